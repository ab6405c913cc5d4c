"""Remote capabilities the hierarchy synchronizer depends on.

``Transport`` is the seam between the publishing algorithm and the outside
world. ``ConfluenceTransport`` backs it with the Confluence REST API, the
diagram service and the vault's attachments folder; tests back it with an
in-memory fake.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.errors import RemoteLookupError
from src.models.confluence_page import ConfluencePage
from src.vault.attachments import VaultAttachmentReader
from .diagram_renderer import KrokiRenderer

logger = logging.getLogger(__name__)

CURRENT = "current"
ARCHIVED = "archived"


class Transport(ABC):
    """Page, attachment and binary operations against one space."""

    @abstractmethod
    def search_pages(self, title: str, status: str = CURRENT) -> List[ConfluencePage]:
        """All pages whose title matches ``title`` with the given status.

        Raises:
            RemoteLookupError: If the search fails
        """

    def find_page(self, title: str, parent_id: Optional[str] = None) -> Optional[ConfluencePage]:
        """Find a live page by exact, case-sensitive title.

        Args:
            title: Page title
            parent_id: Required immediate parent; None accepts the first
                       match anywhere in the space

        Returns:
            The matching page, or None
        """
        for page in self.search_pages(title, CURRENT):
            if page.title != title or page.is_archived:
                continue
            if parent_id is None or page.parent_id == parent_id:
                return page
        return None

    def find_archived_page(self, title: str) -> Optional[ConfluencePage]:
        """Find an archived page holding ``title``.

        A failed archive search is not fatal; it is logged and treated as
        "no archived page".
        """
        try:
            pages = self.search_pages(title, ARCHIVED)
        except RemoteLookupError as e:
            logger.warning(f"Archived page lookup for '{title}' failed: {e}")
            return None
        for page in pages:
            if page.title == title:
                return page
        return None

    @abstractmethod
    def create_page(self, title: str, body: str, parent_id: Optional[str]) -> ConfluencePage:
        """Create a page under ``parent_id`` (None for the space root)."""

    @abstractmethod
    def update_page(
        self,
        page_id: str,
        title: str,
        body: str,
        expected_version: int,
        parent_id: Optional[str] = None
    ) -> ConfluencePage:
        """Replace a page's title and body, submitting ``expected_version + 1``.

        Raises:
            RemoteWriteConflictError: If the page moved past ``expected_version``
                or the update is otherwise rejected
        """

    @abstractmethod
    def upload_attachment(
        self,
        page_id: str,
        filename: str,
        data: bytes,
        content_type: str
    ) -> None:
        """Attach ``data`` to a page, replacing an attachment of the same name."""

    @abstractmethod
    def render_diagram(self, source: str) -> bytes:
        """Render Mermaid source to SVG."""

    @abstractmethod
    def read_vault_binary(self, filename: str) -> Tuple[bytes, str]:
        """Read an embedded vault file, returning (bytes, content type)."""

    @abstractmethod
    def page_url(self, page_id: str) -> str:
        """Browser URL of a page."""


class ConfluenceTransport(Transport):
    """Transport over the Confluence REST API.

    Example:
        >>> transport = ConfluenceTransport(
        ...     APIWrapper(Authenticator(), "DOCS"),
        ...     KrokiRenderer(),
        ...     VaultAttachmentReader("/notes"),
        ... )
    """

    def __init__(
        self,
        api: APIWrapper,
        renderer: KrokiRenderer,
        attachments: VaultAttachmentReader
    ):
        self.api = api
        self.renderer = renderer
        self.attachments = attachments

    def search_pages(self, title: str, status: str = CURRENT) -> List[ConfluencePage]:
        return [ConfluencePage.from_api(data) for data in self.api.find_pages(title, status)]

    def create_page(self, title: str, body: str, parent_id: Optional[str]) -> ConfluencePage:
        data = self.api.create_page(title, body, parent_id)
        page = ConfluencePage.from_api(data, parent_id=parent_id)
        logger.info(f"Created page '{title}' ({page.page_id})")
        return page

    def update_page(
        self,
        page_id: str,
        title: str,
        body: str,
        expected_version: int,
        parent_id: Optional[str] = None
    ) -> ConfluencePage:
        data = self.api.update_page(page_id, title, body, expected_version, parent_id)
        page = ConfluencePage.from_api(data, parent_id=parent_id)
        logger.info(f"Updated page '{title}' ({page_id}) to version {page.version}")
        return page

    def upload_attachment(
        self,
        page_id: str,
        filename: str,
        data: bytes,
        content_type: str
    ) -> None:
        self.api.attach_file(page_id, filename, data, content_type)
        logger.info(f"Uploaded attachment {filename} to page {page_id}")

    def render_diagram(self, source: str) -> bytes:
        return self.renderer.render(source)

    def read_vault_binary(self, filename: str) -> Tuple[bytes, str]:
        return self.attachments.read(filename)

    def page_url(self, page_id: str) -> str:
        return self.api.page_url(page_id)
