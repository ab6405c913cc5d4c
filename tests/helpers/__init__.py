"""Test helper modules.

- fake_transport: in-memory Transport for publisher and CLI tests
- assertion_helpers: whitespace-insensitive storage-format assertions
"""

from .fake_transport import FakeTransport
from .assertion_helpers import (
    assert_storage_similar,
    assert_contains,
    assert_not_contains,
    normalize_whitespace,
)

__all__ = [
    'FakeTransport',
    'assert_storage_similar',
    'assert_contains',
    'assert_not_contains',
    'normalize_whitespace',
]
