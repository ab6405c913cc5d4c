"""Credential loading for the Confluence REST API.

Credentials come from environment variables, optionally seeded from a
``.env`` file via python-dotenv. A vault can carry its own ``.env`` next to
the publish configuration; values already present in the environment win.
"""

import os
from pathlib import Path
from typing import NamedTuple, Optional, Union

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: str
    api_token: str

    @property
    def wiki_url(self) -> str:
        """Base URL guaranteed to end in ``/wiki`` (Confluence Cloud layout)."""
        base = self.url.rstrip('/')
        if not base.endswith('/wiki'):
            base = f"{base}/wiki"
        return base


class Authenticator:
    """Loads and validates Confluence credentials from environment variables.

    Required environment variables:
        CONFLUENCE_URL: Confluence instance URL (e.g., https://yourinstance.atlassian.net/wiki)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token

    Example:
        >>> auth = Authenticator(env_file="vault/.env")
        >>> creds = auth.get_credentials()
        >>> print(f"Publishing to {creds.wiki_url}")
    """

    REQUIRED_VARIABLES = ('CONFLUENCE_URL', 'CONFLUENCE_USER', 'CONFLUENCE_API_TOKEN')

    def __init__(self, env_file: Optional[Union[str, Path]] = None):
        """Load environment variables from ``env_file`` (or the nearest .env).

        Args:
            env_file: Optional explicit path to a .env file
        """
        if env_file is not None:
            load_dotenv(dotenv_path=env_file, override=False)
        else:
            load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get Confluence credentials from environment variables.

        Returns:
            Credentials: A named tuple containing url, user, and api_token

        Raises:
            InvalidCredentialsError: If any required credential is missing or
                the URL is not an http(s) URL
        """
        url = (os.getenv('CONFLUENCE_URL') or '').strip()
        user = (os.getenv('CONFLUENCE_USER') or '').strip()
        api_token = (os.getenv('CONFLUENCE_API_TOKEN') or '').strip()

        if not url or not user or not api_token:
            raise InvalidCredentialsError(
                user=user or "unknown",
                endpoint=url or "unknown"
            )

        if not url.startswith(('http://', 'https://')):
            raise InvalidCredentialsError(user=user, endpoint=url)

        return Credentials(url=url.rstrip('/'), user=user, api_token=api_token)
