"""Confluence page data model."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ConfluencePage:
    """A page as seen through the Confluence content API.

    Pages are owned by Confluence; instances are only references valid for a
    single publish run and must be re-read before every update.

    Attributes:
        page_id: Unique identifier for the page
        title: Page title (unique within a space)
        version: Current version number (an update must submit version + 1)
        parent_id: Immediate parent page ID (None if the page sits at the space root)
        status: Content status ("current", "archived", ...)
        body: Storage-format body, when the API response carried it
    """
    page_id: str
    title: str
    version: int
    parent_id: Optional[str] = None
    status: str = "current"
    body: Optional[str] = None

    @property
    def is_archived(self) -> bool:
        return self.status == "archived"

    @classmethod
    def from_api(
        cls,
        data: Dict[str, Any],
        parent_id: Optional[str] = None
    ) -> "ConfluencePage":
        """Build a page from a REST content API payload.

        The immediate parent is the last entry of ``ancestors``. Create and
        update responses do not always expand ancestors, so ``parent_id`` can
        be supplied as a fallback.

        Raises:
            ValueError: If the payload has no ``id``
        """
        page_id = data.get('id')
        if not page_id:
            raise ValueError("Page data missing required 'id' field")

        ancestors = data.get('ancestors') or []
        if ancestors and ancestors[-1].get('id'):
            parent_id = str(ancestors[-1]['id'])

        version = (data.get('version') or {}).get('number', 1)
        body = ((data.get('body') or {}).get('storage') or {}).get('value')

        return cls(
            page_id=str(page_id),
            title=data.get('title', ''),
            version=int(version),
            parent_id=parent_id,
            status=data.get('status', 'current'),
            body=body,
        )
