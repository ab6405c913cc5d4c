"""Result of one publish run."""

from dataclasses import dataclass, field
from typing import List

from src.models.confluence_page import ConfluencePage


@dataclass
class SyncResult:
    """Outcome of synchronizing one document.

    Attributes:
        page: The leaf page after the last successful mutation
        created: True if the leaf page was created in this run
        created_folders: Titles of folder pages created in this run
        moved_folders: Titles of existing pages re-parented in this run
        resolved_placeholders: Tokens replaced by attachment macros
        warnings: Non-fatal problems (one per failed placeholder)
    """
    page: ConfluencePage
    created: bool = False
    created_folders: List[str] = field(default_factory=list)
    moved_folders: List[str] = field(default_factory=list)
    resolved_placeholders: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
