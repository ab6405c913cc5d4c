"""Publishing a document into a Confluence page hierarchy.

This module provides the HierarchySynchronizer, which mirrors a note's folder
chain as folder pages, upserts the note's page and resolves diagram and image
attachments, and the Transport seam it talks to Confluence through.
"""

from .errors import (
    ArchivedTitleConflictError,
    AttachmentResolutionError,
    DiagramRenderError,
    PublishError,
)
from .hierarchy_sync import EMPTY_DOCUMENT_BODY, FOLDER_PAGE_BODY, HierarchySynchronizer
from .transport import ConfluenceTransport, Transport

__all__ = [
    'ArchivedTitleConflictError',
    'AttachmentResolutionError',
    'DiagramRenderError',
    'PublishError',
    'EMPTY_DOCUMENT_BODY',
    'FOLDER_PAGE_BODY',
    'HierarchySynchronizer',
    'ConfluenceTransport',
    'Transport',
]
