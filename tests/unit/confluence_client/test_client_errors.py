"""Unit tests for confluence_client.errors module."""

from src.confluence_client.errors import (
    APIAccessError,
    APIUnreachableError,
    ConfluenceError,
    InvalidCredentialsError,
    RemoteLookupError,
    RemoteWriteConflictError,
    SyncError,
)


class TestErrorHierarchy:
    """Test cases for the exception hierarchy."""

    def test_all_errors_are_sync_errors(self):
        for error in (
            InvalidCredentialsError("u", "e"),
            APIUnreachableError("e"),
            APIAccessError(),
            RemoteLookupError("t"),
            RemoteWriteConflictError("t", "create"),
        ):
            assert isinstance(error, ConfluenceError)
            assert isinstance(error, SyncError)

    def test_remote_errors_are_access_errors(self):
        assert issubclass(RemoteLookupError, APIAccessError)
        assert issubclass(RemoteWriteConflictError, APIAccessError)


class TestMessages:
    """Test cases for error messages."""

    def test_invalid_credentials(self):
        error = InvalidCredentialsError("me@x.com", "https://x/wiki")
        assert str(error) == "API key is invalid (user: me@x.com, endpoint: https://x/wiki)"

    def test_lookup_with_status(self):
        assert str(RemoteLookupError("Tech", 500)) == "Failed to search for page 'Tech': HTTP 500"

    def test_lookup_without_status(self):
        assert str(RemoteLookupError("Tech")) == "Failed to search for page 'Tech'"

    def test_write_conflict(self):
        error = RemoteWriteConflictError("Roadmap", "update", 409, "stale")
        assert str(error) == "Failed to update page 'Roadmap': HTTP 409 - stale"
        assert error.status_code == 409
