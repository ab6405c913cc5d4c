"""Data models for pages, documents and transcoding results."""

from src.models.confluence_page import ConfluencePage
from src.models.document import Document
from src.models.sync_result import SyncResult
from src.models.transcode_result import (
    DiagramPlaceholder,
    ImagePlaceholder,
    TranscodeResult,
)

__all__ = [
    'ConfluencePage',
    'Document',
    'SyncResult',
    'DiagramPlaceholder',
    'ImagePlaceholder',
    'TranscodeResult',
]
