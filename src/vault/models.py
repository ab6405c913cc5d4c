"""Data models for the vault layer."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

DEFAULT_DIAGRAM_SERVICE_URL = "https://kroki.io/mermaid/svg"


@dataclass
class PublishConfig:
    """Publishing settings for one vault.

    Attributes:
        space_key: Key of the Confluence space pages are published to
        attachments_folder: Vault folder holding images and icons
        add_confluence_url: Write the page URL back into the note's frontmatter
        diagram_service_url: Endpoint rendering Mermaid source to SVG
        diagram_timeout: Seconds to wait for the diagram service
    """
    space_key: str
    attachments_folder: str = "attachments"
    add_confluence_url: bool = True
    diagram_service_url: str = DEFAULT_DIAGRAM_SERVICE_URL
    diagram_timeout: int = 30


@dataclass
class VaultNote:
    """A note read from disk, split into frontmatter and body.

    Attributes:
        path: Absolute path of the note file
        title: Page title (the file name without extension)
        folder_path: Folders between the vault root and the note
        body: Markdown body without frontmatter
        frontmatter: Parsed frontmatter fields (empty if the note has none)
    """
    path: str
    title: str
    folder_path: Tuple[str, ...]
    body: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)
