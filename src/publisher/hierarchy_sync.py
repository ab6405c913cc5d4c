"""Publishes a document into a Confluence page tree mirroring its folders.

A run has three phases:

1. Folder chain: every folder segment maps to one folder page. Segments are
   resolved top-down by (title, parent). A page found elsewhere in the space
   is moved under the expected parent; a missing page is created, unless the
   title is held by an archived page.
2. Leaf upsert: the document page is updated in place or created under the
   last folder page.
3. Placeholders: diagrams are rendered and images read from the vault, each
   is uploaded as an attachment and its token replaced by an image macro.
   One failed placeholder never blocks the others. If anything was resolved
   the body is written once more.

No ids are cached between runs; every run re-resolves the tree.
"""

import logging
from typing import Callable, List, Optional, Tuple

from src.confluence_client.errors import SyncError
from src.content_converter.placeholders import attachment_macro, contains_token, substitute_token
from src.content_converter.storage_transcoder import StorageTranscoder
from src.models.confluence_page import ConfluencePage
from src.models.document import Document
from src.models.sync_result import SyncResult
from src.models.transcode_result import TranscodeResult
from .errors import ArchivedTitleConflictError, AttachmentResolutionError
from .transport import Transport

logger = logging.getLogger(__name__)

FOLDER_PAGE_BODY = "<p>This page represents a folder in your Obsidian vault.</p>"
EMPTY_DOCUMENT_BODY = "<p>Empty document</p>"
DIAGRAM_CONTENT_TYPE = "image/svg+xml"

Callback = Callable[[str], None]


class HierarchySynchronizer:
    """Mirrors one document and its folder chain into a space.

    Example:
        >>> synchronizer = HierarchySynchronizer(transport)
        >>> result = synchronizer.sync(Document("Roadmap", body, ("Tech", "RnD")))
        >>> transport.page_url(result.page.page_id)
    """

    def __init__(
        self,
        transport: Transport,
        transcoder: Optional[StorageTranscoder] = None,
        on_notice: Optional[Callback] = None,
        on_warning: Optional[Callback] = None
    ):
        """Initialize the synchronizer.

        Args:
            transport: Remote capabilities
            transcoder: Markdown transcoder (default settings if omitted)
            on_notice: Receives progress notices such as folder moves
            on_warning: Receives non-fatal placeholder failures
        """
        self.transport = transport
        self.transcoder = transcoder or StorageTranscoder()
        self._notice = on_notice or logger.info
        self._warning = on_warning or logger.warning

    def sync(self, document: Document) -> SyncResult:
        """Publish ``document``.

        Returns:
            SyncResult describing the final leaf page and what changed

        Raises:
            ArchivedTitleConflictError: If a folder title is held by an archived page
            RemoteLookupError: If a page search fails
            RemoteWriteConflictError: If a create or update is rejected
            InvalidCredentialsError: If Confluence rejects the credentials
            APIUnreachableError: If Confluence cannot be reached
        """
        transcoded = self.transcoder.transcode(document.body)
        storage = transcoded.storage if transcoded.storage.strip() else EMPTY_DOCUMENT_BODY

        created_folders: List[str] = []
        moved_folders: List[str] = []
        parent_id = self.ensure_folder_chain(document.folder_path, created_folders, moved_folders)

        page, created = self.upsert_page(document.title, storage, parent_id)

        resolved: List[str] = []
        warnings: List[str] = []
        if transcoded.has_placeholders:
            page = self.resolve_placeholders(page, storage, transcoded, resolved, warnings)

        return SyncResult(
            page=page,
            created=created,
            created_folders=created_folders,
            moved_folders=moved_folders,
            resolved_placeholders=resolved,
            warnings=warnings,
        )

    def ensure_folder_chain(
        self,
        folder_path: Tuple[str, ...],
        created_folders: Optional[List[str]] = None,
        moved_folders: Optional[List[str]] = None
    ) -> Optional[str]:
        """Make sure one folder page exists per segment, correctly nested.

        The first segment has no parent to check against: a live page with
        that title is reused wherever it sits and is never moved.

        Returns:
            Page id of the last folder page, or None for an empty chain
        """
        parent_id: Optional[str] = None

        for segment in folder_path:
            page = self.transport.find_page(segment, parent_id)
            if page is not None:
                parent_id = page.page_id
                continue

            misplaced = self.transport.find_page(segment, None)
            if misplaced is not None:
                self._notice(f"Moving \"{segment}\" to correct location...")
                moved = self.transport.update_page(
                    misplaced.page_id,
                    segment,
                    misplaced.body or FOLDER_PAGE_BODY,
                    misplaced.version,
                    parent_id,
                )
                if moved_folders is not None:
                    moved_folders.append(segment)
                parent_id = moved.page_id
                continue

            archived = self.transport.find_archived_page(segment)
            if archived is not None:
                url = self.transport.page_url(archived.page_id)
                logger.error(f"Archived page blocks folder '{segment}': {url}")
                raise ArchivedTitleConflictError(segment, url)

            folder = self.transport.create_page(segment, FOLDER_PAGE_BODY, parent_id)
            self._notice(f"Created folder page \"{segment}\"")
            if created_folders is not None:
                created_folders.append(segment)
            parent_id = folder.page_id

        return parent_id

    def upsert_page(
        self,
        title: str,
        storage: str,
        parent_id: Optional[str]
    ) -> Tuple[ConfluencePage, bool]:
        """Update the page titled ``title`` under ``parent_id``, or create it.

        Returns:
            Tuple of (page after the write, True if it was created)
        """
        existing = self.transport.find_page(title, parent_id)
        if existing is not None:
            page = self.transport.update_page(
                existing.page_id, title, storage, existing.version, parent_id
            )
            return page, False
        return self.transport.create_page(title, storage, parent_id), True

    def resolve_placeholders(
        self,
        page: ConfluencePage,
        storage: str,
        transcoded: TranscodeResult,
        resolved: List[str],
        warnings: List[str]
    ) -> ConfluencePage:
        """Upload every placeholder's binary and embed it in the page.

        Args:
            page: Leaf page as returned by the upsert
            storage: Body the leaf was written with
            transcoded: Transcoding result listing the placeholders
            resolved: Collects tokens that were substituted
            warnings: Collects one message per failed placeholder

        Returns:
            The page after the final update, or ``page`` if nothing resolved
        """
        if transcoded.diagrams:
            self._notice(f"Processing {len(transcoded.diagrams)} Mermaid diagram(s)...")
        for diagram in transcoded.diagrams:
            try:
                svg = self.transport.render_diagram(diagram.code)
                self.transport.upload_attachment(
                    page.page_id, diagram.filename, svg, DIAGRAM_CONTENT_TYPE
                )
            except SyncError as e:
                self._report(AttachmentResolutionError("Mermaid diagram", str(e)), warnings)
                continue
            storage = self._embed(storage, diagram.token, diagram.filename, resolved)

        if transcoded.images:
            self._notice(f"Processing {len(transcoded.images)} image attachment(s)...")
        for image in transcoded.images:
            try:
                data, content_type = self.transport.read_vault_binary(image.filename)
                self.transport.upload_attachment(
                    page.page_id, image.attachment_name, data, content_type
                )
            except SyncError as e:
                self._report(AttachmentResolutionError(f"image {image.filename}", str(e)), warnings)
                continue
            storage = self._embed(storage, image.token, image.attachment_name, resolved)

        if not resolved:
            return page

        return self.transport.update_page(
            page.page_id, page.title, storage, page.version, page.parent_id
        )

    def _embed(self, storage: str, token: str, filename: str, resolved: List[str]) -> str:
        if not contains_token(storage, token):
            logger.debug(f"Placeholder {token} not present in body")
            return storage
        resolved.append(token)
        return substitute_token(storage, token, attachment_macro(filename))

    def _report(self, error: AttachmentResolutionError, warnings: List[str]) -> None:
        message = f"Warning: {error}"
        warnings.append(message)
        self._warning(message)
