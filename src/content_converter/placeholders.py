"""Placeholder extraction and substitution for out-of-band attachments.

Mermaid diagrams and vault image embeds cannot be expressed in storage
format until their binaries exist as page attachments. Extraction swaps each
one for a unique token before transcoding; substitution swaps the token for an
attachment-embed macro once the upload succeeded.
"""

import re
from typing import Callable, List, Pattern, Tuple

from src.models.transcode_result import DiagramPlaceholder, ImagePlaceholder

ATTACHMENT_IMAGE_WIDTH = 500

_MERMAID_FENCE = re.compile(r'```mermaid[ \t]*\n([\s\S]+?)```')
_IMAGE_EMBED = re.compile(
    r'!\[\[([^\]|]+\.(?:png|jpe?g))(?:\|[^\]]*)?\]\]',
    re.IGNORECASE
)


def extract_diagrams(markdown: str) -> Tuple[str, List[DiagramPlaceholder]]:
    """Replace Mermaid fences with ``MERMAID-PLACEHOLDER-{n}`` tokens.

    Returns:
        Tuple of (rewritten markdown, placeholders in token order)
    """
    diagrams: List[DiagramPlaceholder] = []

    def replace(match: re.Match) -> str:
        placeholder = DiagramPlaceholder(index=len(diagrams), code=match.group(1).strip())
        diagrams.append(placeholder)
        return placeholder.token

    return _MERMAID_FENCE.sub(replace, markdown), diagrams


def extract_images(
    markdown: str,
    outside_code: Callable[[Callable[[str], str]], Callable[[str], str]],
) -> Tuple[str, List[ImagePlaceholder]]:
    """Replace ``![[image.png]]`` embeds with ``IMAGE-ATTACHMENT-{n}`` tokens.

    Args:
        markdown: Markdown text
        outside_code: Wrapper restricting a rewrite to text outside code, so
                      embeds shown as code examples are left alone

    Returns:
        Tuple of (rewritten markdown, placeholders in token order)
    """
    images: List[ImagePlaceholder] = []

    def replace(match: re.Match) -> str:
        placeholder = ImagePlaceholder(index=len(images), filename=match.group(1).strip())
        images.append(placeholder)
        return placeholder.token

    rewrite = outside_code(lambda text: _IMAGE_EMBED.sub(replace, text))
    return rewrite(markdown), images


def attachment_macro(filename: str) -> str:
    """Storage-format image macro embedding a page attachment."""
    return (
        f'<ac:image ac:width="{ATTACHMENT_IMAGE_WIDTH}">'
        f'<ri:attachment ri:filename="{escape_attribute(filename)}" />'
        f'</ac:image>'
    )


def _token_patterns(token: str) -> Tuple[Pattern, Pattern]:
    # (?!\d) keeps token 1 from matching the head of token 10
    escaped = re.escape(token)
    wrapped = re.compile(rf'<p>\s*{escaped}(?!\d)\s*</p>')
    bare = re.compile(rf'{escaped}(?!\d)')
    return wrapped, bare


def contains_token(storage: str, token: str) -> bool:
    return _token_patterns(token)[1].search(storage) is not None


def substitute_token(storage: str, token: str, replacement: str) -> str:
    """Replace every occurrence of ``token`` with ``replacement``.

    A token that is alone in a paragraph loses the paragraph wrapper with it;
    a token sharing a paragraph with other text is replaced in place.
    """
    wrapped, bare = _token_patterns(token)
    storage = wrapped.sub(lambda _: replacement, storage)
    return bare.sub(lambda _: replacement, storage)


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted XML attribute.

    Existing entity references are kept so already-escaped URLs are not
    escaped twice.
    """
    value = re.sub(r'&(?!(?:[A-Za-z]+|#\d+|#x[0-9A-Fa-f]+);)', '&amp;', value)
    return value.replace('"', '&quot;').replace('<', '&lt;').replace('>', '&gt;')
