"""Document model: one note to publish."""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Document:
    """A note to publish, detached from where it was read from.

    Attributes:
        title: Page title (unique within its parent scope)
        body: Raw markdown body, frontmatter already stripped
        folder_path: Vault folders from the root down to the note's folder;
                     empty for notes at the vault root
    """
    title: str
    body: str
    folder_path: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any sequence from callers, store an immutable tuple
        object.__setattr__(self, 'folder_path', tuple(self.folder_path))
        if not self.title or not self.title.strip():
            raise ValueError("Document title cannot be empty")
        if any(not segment for segment in self.folder_path):
            raise ValueError("Folder path segments cannot be empty")
