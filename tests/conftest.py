"""Root pytest configuration for all tests."""

import logging

import pytest

from tests.helpers.fake_transport import FakeTransport

# atlassian-python-api logs failed requests at ERROR level; tests that
# exercise error translation would otherwise flood the output.
logging.getLogger("atlassian").setLevel(logging.WARNING)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def vault(tmp_path):
    """A vault directory with a minimal publishing configuration."""
    config_dir = tmp_path / ".confluence-publish"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("space_key: DOCS\n", encoding="utf-8")
    (tmp_path / "attachments").mkdir()
    return tmp_path
