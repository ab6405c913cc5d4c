"""Mermaid diagram rendering through a Kroki-compatible HTTP service."""

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from src.confluence_client.errors import APIAccessError
from src.confluence_client.retry_logic import as_decorator
from .errors import DiagramRenderError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = "https://kroki.io/mermaid/svg"


class KrokiRenderer:
    """Renders Mermaid source to SVG bytes.

    The service receives the raw diagram source as ``text/plain`` and answers
    with the SVG document.

    Example:
        >>> renderer = KrokiRenderer()
        >>> svg = renderer.render("graph TD; A-->B")
    """

    def __init__(
        self,
        service_url: str = DEFAULT_SERVICE_URL,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        self.service_url = service_url
        self.timeout = timeout
        self._session = session or requests.Session()

    @as_decorator
    def _post(self, source: str) -> requests.Response:
        response = self._session.post(
            self.service_url,
            data=source.encode('utf-8'),
            headers={'Content-Type': 'text/plain'},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def render(self, source: str) -> bytes:
        """Render one diagram.

        Raises:
            DiagramRenderError: On network failure, timeout, a non-2xx
                response or an empty body
        """
        try:
            response = self._post(source)
        except (RequestException, APIAccessError) as e:
            raise DiagramRenderError(self.service_url, str(e)) from e

        if not response.content:
            raise DiagramRenderError(self.service_url, "empty response")

        logger.debug(f"Rendered diagram ({len(response.content)} bytes of SVG)")
        return response.content
