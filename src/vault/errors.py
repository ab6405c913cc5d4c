"""Typed exception hierarchy for vault errors.

This module defines the exceptions raised while reading notes, attachments
and publishing configuration from an Obsidian vault. All of them inherit from
VaultError and, through it, from SyncError.
"""

from typing import Optional

from src.confluence_client.errors import SyncError


class VaultError(SyncError):
    """Base exception for all vault errors."""
    pass


class FilesystemError(VaultError):
    """Raised when filesystem operations fail (read, write, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class ConfigError(VaultError):
    """Raised when the publishing configuration is missing or invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class FrontmatterError(VaultError):
    """Raised when a note's YAML frontmatter cannot be parsed."""

    def __init__(self, file_path: str, message: str):
        super().__init__(f"Frontmatter error in {file_path}: {message}")
        self.file_path = file_path
        self.message = message


class NoteOutsideVaultError(VaultError):
    """Raised when the note to publish does not live under the vault root."""

    def __init__(self, note_path: str, vault_root: str):
        super().__init__(f"Note {note_path} is not inside vault {vault_root}")
        self.note_path = note_path
        self.vault_root = vault_root
