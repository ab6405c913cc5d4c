"""Content conversion module for markdown → Confluence storage format.

This module provides the StorageTranscoder, a fixed pipeline of regex and
cursor-parser stages turning an Obsidian note body into storage-format XHTML,
plus the placeholder helpers used to embed attachments after upload.
"""

from .storage_transcoder import StorageTranscoder, transcode
from .placeholders import attachment_macro, contains_token, substitute_token

__all__ = [
    'StorageTranscoder',
    'transcode',
    'attachment_macro',
    'contains_token',
    'substitute_token',
]
