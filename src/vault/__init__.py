"""Vault access: notes, attachments and publishing configuration.

This module reads an Obsidian vault from disk: it loads publishing settings,
splits notes into frontmatter and body, derives page titles and folder chains,
and reads attachment binaries for upload.
"""

from .attachments import VaultAttachmentReader, content_type_for
from .config_loader import ConfigLoader
from .errors import (
    ConfigError,
    FilesystemError,
    FrontmatterError,
    NoteOutsideVaultError,
    VaultError,
)
from .frontmatter_handler import FrontmatterHandler
from .models import PublishConfig, VaultNote
from .note_loader import NoteLoader

__all__ = [
    'VaultAttachmentReader',
    'content_type_for',
    'ConfigLoader',
    'ConfigError',
    'FilesystemError',
    'FrontmatterError',
    'NoteOutsideVaultError',
    'VaultError',
    'FrontmatterHandler',
    'PublishConfig',
    'VaultNote',
    'NoteLoader',
]
