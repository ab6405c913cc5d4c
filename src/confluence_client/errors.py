"""Typed exception hierarchy for Confluence-related errors.

This module defines all custom exceptions used by the Confluence client library.
All exceptions inherit from ConfluenceError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all confluence-publish errors.

    Use this to catch any application-level error from the publisher.
    """
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing, invalid or rejected."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API key is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API cannot be reached (network, DNS, timeout)."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(ConfluenceError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(self, message: str = "Confluence API failure (after 3 retries)"):
        super().__init__(message)


class RemoteLookupError(APIAccessError):
    """Raised when a page search returns a non-2xx response."""

    def __init__(self, title: str, status_code: Optional[int] = None):
        if status_code is not None:
            message = f"Failed to search for page '{title}': HTTP {status_code}"
        else:
            message = f"Failed to search for page '{title}'"
        super().__init__(message)
        self.title = title
        self.status_code = status_code


class RemoteWriteConflictError(APIAccessError):
    """Raised when creating or updating a page fails.

    Covers every non-2xx response on a write, including 409 responses caused
    by a stale version number.
    """

    def __init__(
        self,
        title: str,
        operation: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        message = f"Failed to {operation} page '{title}'"
        if status_code is not None:
            message += f": HTTP {status_code}"
        if detail:
            message += f" - {detail}"
        super().__init__(message)
        self.title = title
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
