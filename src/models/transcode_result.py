"""Transcoding result and placeholder models."""

from dataclasses import dataclass, field
from typing import List

DIAGRAM_TOKEN_PREFIX = "MERMAID-PLACEHOLDER-"
IMAGE_TOKEN_PREFIX = "IMAGE-ATTACHMENT-"


@dataclass(frozen=True)
class DiagramPlaceholder:
    """A Mermaid diagram pulled out of the markdown, rendered later.

    Attributes:
        index: Position among the document's diagrams (0-based)
        code: Mermaid source, stripped
    """
    index: int
    code: str

    @property
    def token(self) -> str:
        return f"{DIAGRAM_TOKEN_PREFIX}{self.index}"

    @property
    def filename(self) -> str:
        """Attachment name the rendered SVG is uploaded under."""
        return f"{self.token}.svg"


@dataclass(frozen=True)
class ImagePlaceholder:
    """A vault image embed (``![[name.png]]``) uploaded later.

    Attributes:
        index: Position among the document's image embeds (0-based)
        filename: File name as written in the embed, relative to the
                  attachments folder
    """
    index: int
    filename: str

    @property
    def token(self) -> str:
        return f"{IMAGE_TOKEN_PREFIX}{self.index}"

    @property
    def attachment_name(self) -> str:
        """Attachment name on the page: the last path segment of the embed."""
        return self.filename.replace('\\', '/').rsplit('/', 1)[-1]


@dataclass
class TranscodeResult:
    """Storage-format markup plus the placeholders it still references.

    Attributes:
        storage: Confluence storage-format markup
        diagrams: Diagram placeholders, in token order
        images: Image placeholders, in token order
    """
    storage: str
    diagrams: List[DiagramPlaceholder] = field(default_factory=list)
    images: List[ImagePlaceholder] = field(default_factory=list)

    @property
    def has_placeholders(self) -> bool:
        return bool(self.diagrams or self.images)
