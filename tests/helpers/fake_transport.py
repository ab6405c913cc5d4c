"""In-memory Transport used by publisher and CLI tests.

Pages live in a dict keyed by id. Every mutating call is recorded in
``calls`` so tests can assert exactly which remote writes happened.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Set, Tuple

from src.confluence_client.errors import RemoteLookupError, RemoteWriteConflictError
from src.models.confluence_page import ConfluencePage
from src.publisher.errors import DiagramRenderError
from src.publisher.transport import Transport
from src.vault.errors import FilesystemError

BASE_URL = "https://example.atlassian.net/wiki"
SPACE_KEY = "DOCS"


class FakeTransport(Transport):
    """Transport backed by plain dictionaries."""

    def __init__(self):
        self.pages: Dict[str, ConfluencePage] = {}
        self.attachments: Dict[str, Dict[str, Tuple[bytes, str]]] = {}
        self.vault_files: Dict[str, bytes] = {}
        self.failing_diagrams: Set[str] = set()
        self.failing_archive_search = False
        self.calls: List[Tuple] = []
        self._next_id = 1000

    # --- seeding ---------------------------------------------------------------

    def add_page(
        self,
        title: str,
        parent_id: Optional[str] = None,
        body: str = "<p>existing</p>",
        version: int = 1,
        status: str = "current"
    ) -> ConfluencePage:
        page = ConfluencePage(
            page_id=self._new_id(),
            title=title,
            version=version,
            parent_id=parent_id,
            status=status,
            body=body,
        )
        self.pages[page.page_id] = page
        return page

    def _new_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    # --- inspection ------------------------------------------------------------

    def calls_named(self, name: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == name]

    # --- Transport -------------------------------------------------------------

    def search_pages(self, title: str, status: str = "current") -> List[ConfluencePage]:
        if status == "archived" and self.failing_archive_search:
            raise RemoteLookupError(title, status_code=500)
        return [
            page for page in self.pages.values()
            if page.title == title and page.status == status
        ]

    def create_page(self, title: str, body: str, parent_id: Optional[str]) -> ConfluencePage:
        self.calls.append(("create", title, parent_id))
        if any(page.title == title for page in self.pages.values()):
            raise RemoteWriteConflictError(title, "create", status_code=400,
                                           detail="A page with this title already exists")
        return self.add_page(title, parent_id=parent_id, body=body)

    def update_page(
        self,
        page_id: str,
        title: str,
        body: str,
        expected_version: int,
        parent_id: Optional[str] = None
    ) -> ConfluencePage:
        self.calls.append(("update", page_id, expected_version + 1, parent_id))
        current = self.pages[page_id]
        if current.version != expected_version:
            raise RemoteWriteConflictError(title, "update", status_code=409)
        updated = replace(
            current,
            title=title,
            body=body,
            version=expected_version + 1,
            parent_id=parent_id if parent_id is not None else current.parent_id,
        )
        self.pages[page_id] = updated
        return updated

    def upload_attachment(self, page_id: str, filename: str, data: bytes, content_type: str) -> None:
        self.calls.append(("upload", page_id, filename, content_type))
        self.attachments.setdefault(page_id, {})[filename] = (data, content_type)

    def render_diagram(self, source: str) -> bytes:
        self.calls.append(("render", source))
        if source in self.failing_diagrams:
            raise DiagramRenderError("https://kroki.test/mermaid/svg", "HTTP 400")
        return f"<svg>{source}</svg>".encode('utf-8')

    def read_vault_binary(self, filename: str) -> Tuple[bytes, str]:
        if filename not in self.vault_files:
            raise FilesystemError(filename, 'read', 'Attachment not found in vault')
        content_type = "image/png" if filename.lower().endswith(".png") else "image/jpeg"
        return self.vault_files[filename], content_type

    def page_url(self, page_id: str) -> str:
        return f"{BASE_URL}/spaces/{SPACE_KEY}/pages/{page_id}"
