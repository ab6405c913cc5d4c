"""Confluence client library for confluence-publish.

This package provides Python abstractions over the Confluence Cloud REST
content API: credential loading, rate-limit retries and typed errors.
"""

from .errors import (
    SyncError,
    ConfluenceError,
    InvalidCredentialsError,
    APIUnreachableError,
    APIAccessError,
    RemoteLookupError,
    RemoteWriteConflictError,
)

__all__ = [
    "SyncError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "APIUnreachableError",
    "APIAccessError",
    "RemoteLookupError",
    "RemoteWriteConflictError",
]
