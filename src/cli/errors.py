"""Typed exception hierarchy for CLI-related errors.

This module defines all custom exceptions used by the CLI.
All exceptions inherit from CLIError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from src.confluence_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigNotFoundError(CLIError):
    """Raised when no publishing configuration can be found for a note."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found at {config_path}")
        self.config_path = config_path


class VaultNotFoundError(CLIError):
    """Raised when no vault root can be located above a note."""

    def __init__(self, note_path: str):
        super().__init__(
            f"No vault found for {note_path}: pass --vault or create a "
            f".confluence-publish/config.yaml in the vault root"
        )
        self.note_path = note_path
