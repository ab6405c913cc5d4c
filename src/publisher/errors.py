"""Exceptions raised while publishing a document."""

from src.confluence_client.errors import SyncError


class PublishError(SyncError):
    """Base exception for publisher errors."""
    pass


class ArchivedTitleConflictError(PublishError):
    """Raised when a folder page cannot be created because an archived page
    with the same title still exists in the space.

    Confluence keeps titles of archived pages reserved; the page has to be
    removed from the trash (or restored) by hand.
    """

    def __init__(self, title: str, url: str):
        super().__init__(
            f"Cannot create page '{title}' - an archived page with this title exists. "
            f"Permanently delete it from the Confluence trash first: {url}"
        )
        self.title = title
        self.url = url


class DiagramRenderError(PublishError):
    """Raised when the diagram service cannot render a Mermaid diagram."""

    def __init__(self, service_url: str, reason: str):
        super().__init__(f"Diagram rendering failed at {service_url}: {reason}")
        self.service_url = service_url
        self.reason = reason


class AttachmentResolutionError(PublishError):
    """A single diagram or image placeholder could not be resolved.

    Never fatal: the placeholder token stays in the page and the failure is
    reported as a warning.
    """

    def __init__(self, name: str, reason: str):
        super().__init__(f"Failed to process {name}: {reason}")
        self.name = name
        self.reason = reason
