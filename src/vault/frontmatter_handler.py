"""YAML frontmatter parsing and write-back for vault notes.

Notes may start with a YAML block between ``---`` delimiters. The block is
stripped before transcoding, and after a successful publish the page URL is
recorded under the ``confluence`` key. The write-back edits the block as
text so the user's own fields, ordering and comments survive untouched.
"""

import re
from typing import Any, Dict, Tuple

import yaml

from .errors import FrontmatterError

CONFLUENCE_URL_KEY = "confluence"


class FrontmatterHandler:
    """Handles YAML frontmatter operations for markdown notes.

    Frontmatter format:
        - confluence: Full Confluence page URL, written after publishing
        - any other user fields are preserved as-is
    """

    FRONTMATTER_PATTERN = re.compile(
        r'^---[ \t]*\r?\n(?:([\s\S]*?)\r?\n)?---[ \t]*(?:\r?\n|$)'
    )

    URL_LINE_PATTERN = re.compile(
        rf'^{CONFLUENCE_URL_KEY}[ \t]*:.*$',
        re.MULTILINE
    )

    # Maximum allowed depth for YAML structures to prevent DoS attacks
    MAX_YAML_DEPTH = 10

    @classmethod
    def _validate_yaml_depth(cls, obj, current_depth: int = 0) -> None:
        """Reject frontmatter nested deeper than MAX_YAML_DEPTH.

        Raises:
            FrontmatterError: If depth exceeds maximum
        """
        if current_depth > cls.MAX_YAML_DEPTH:
            raise FrontmatterError(
                "<yaml>",
                f"YAML structure exceeds maximum depth of {cls.MAX_YAML_DEPTH}"
            )
        if isinstance(obj, dict):
            for value in obj.values():
                cls._validate_yaml_depth(value, current_depth + 1)
        elif isinstance(obj, list):
            for item in obj:
                cls._validate_yaml_depth(item, current_depth + 1)

    @classmethod
    def parse(cls, file_path: str, content: str) -> Tuple[Dict[str, Any], str]:
        """Split a note into its frontmatter fields and markdown body.

        Args:
            file_path: Path to the file (for error messages)
            content: Full note content

        Returns:
            Tuple of (frontmatter dict, body). Notes without frontmatter
            return ({}, content).

        Raises:
            FrontmatterError: If the frontmatter is not valid YAML or not a mapping
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        body = content[match.end():]
        try:
            frontmatter = yaml.safe_load(match.group(1) or '')
        except yaml.YAMLError as e:
            raise FrontmatterError(file_path, f"Invalid YAML syntax: {str(e)}")

        if frontmatter is None:
            return {}, body

        if not isinstance(frontmatter, dict):
            raise FrontmatterError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(frontmatter).__name__}"
            )

        try:
            cls._validate_yaml_depth(frontmatter)
        except FrontmatterError as e:
            raise FrontmatterError(file_path, e.message)

        return frontmatter, body

    @classmethod
    def set_confluence_url(cls, content: str, url: str) -> str:
        """Record ``url`` under the ``confluence`` frontmatter key.

        An existing ``confluence:`` line is replaced, otherwise the key is
        appended to the block; a note without frontmatter gets a new block.

        Args:
            content: Full note content
            url: Published page URL

        Returns:
            Updated note content
        """
        line = f"{CONFLUENCE_URL_KEY}: {url}"
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return f"---\n{line}\n---\n{content}"

        fields = match.group(1) or ''
        if cls.URL_LINE_PATTERN.search(fields):
            fields = cls.URL_LINE_PATTERN.sub(lambda _: line, fields, count=1)
        elif fields.strip():
            fields = f"{fields.rstrip()}\n{line}"
        else:
            fields = line

        return f"---\n{fields}\n---\n{content[match.end():]}"
