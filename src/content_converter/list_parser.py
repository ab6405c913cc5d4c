"""Cursor-based parser turning markdown list runs into storage-format lists.

The parser walks an indexed sequence of lines. Each call consumes one logical
block and returns the rendered element together with the index of the next
unconsumed line, so no index is shared or mutated across nested loops.

Supported shape:
    - root items start at column 0, ordered (``1. text``) or unordered
      (``- text`` / ``* text``); a contiguous run of one kind becomes one
      ``<ol>`` or ``<ul>``
    - an item absorbs indented continuation lines (joined with a space)
    - an item absorbs one level of nested unordered items; deeper bullets are
      flattened into that level
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

ORDERED = "ol"
UNORDERED = "ul"

_ORDERED_ITEM = re.compile(r'^(\s*)\d+\. (.+)$')
_UNORDERED_ITEM = re.compile(r'^(\s*)[*-] (.+)$')
_NESTED_BULLET = re.compile(r'^(\s+)[*-] (.+)$')


@dataclass(frozen=True)
class _RootItem:
    kind: str
    text: str


def _root_item(line: str) -> Optional[_RootItem]:
    """Return the root-level list item on ``line``, if it is one."""
    match = _ORDERED_ITEM.match(line)
    if match and not match.group(1):
        return _RootItem(ORDERED, match.group(2))
    match = _UNORDERED_ITEM.match(line)
    if match and not match.group(1):
        return _RootItem(UNORDERED, match.group(2))
    return None


class ListParser:
    """Renders every root-level list run found in a block of text.

    Example:
        >>> ListParser("1. one\\n2. two").render()
        '<ol><li>one</li><li>two</li></ol>'
    """

    def __init__(self, text: str):
        self._lines: Sequence[str] = text.split('\n')

    def render(self) -> str:
        """Return the text with each list run replaced by its element."""
        output: List[str] = []
        cursor = 0
        while cursor < len(self._lines):
            root = _root_item(self._lines[cursor])
            if root is None:
                output.append(self._lines[cursor])
                cursor += 1
                continue
            element, cursor = self.parse_list(cursor, root.kind)
            output.append(element)
        return '\n'.join(output)

    def parse_list(self, cursor: int, kind: str) -> Tuple[str, int]:
        """Consume a run of root items of one kind starting at ``cursor``."""
        items: List[str] = []
        while cursor < len(self._lines):
            root = _root_item(self._lines[cursor])
            if root is None or root.kind != kind:
                break
            item, cursor = self.parse_item(cursor)
            items.append(f"<li>{item}</li>")
        return f"<{kind}>{''.join(items)}</{kind}>", cursor

    def parse_item(self, cursor: int) -> Tuple[str, int]:
        """Consume one root item and everything that belongs to it."""
        root = _root_item(self._lines[cursor])
        if root is None:
            raise ValueError(f"Line {cursor} is not a root-level list item")
        content = root.text
        cursor += 1

        while cursor < len(self._lines):
            line = self._lines[cursor]

            if not line.strip():
                following = self._next_non_blank(cursor)
                if following is None:
                    break
                if _root_item(self._lines[following]) is not None:
                    # blank lines between items keep the list going
                    cursor = following
                    break
                if not self._lines[following][0].isspace():
                    break
                cursor = following
                continue

            if _root_item(line) is not None or not line[0].isspace():
                break

            if _NESTED_BULLET.match(line):
                nested, cursor = self.parse_nested(cursor)
                content += nested
                continue

            content += f" {line.strip()}"
            cursor += 1

        return content, cursor

    def parse_nested(self, cursor: int) -> Tuple[str, int]:
        """Consume consecutive indented bullets as a single nested ``<ul>``."""
        first = _NESTED_BULLET.match(self._lines[cursor])
        if first is None:
            raise ValueError(f"Line {cursor} is not a nested bullet")
        base_indent = len(first.group(1))
        items: List[str] = []

        while cursor < len(self._lines):
            match = _NESTED_BULLET.match(self._lines[cursor])
            if not match or len(match.group(1)) < base_indent:
                break
            items.append(f"<li>{match.group(2)}</li>")
            cursor += 1

        return f"<ul>{''.join(items)}</ul>", cursor

    def _next_non_blank(self, cursor: int) -> Optional[int]:
        while cursor < len(self._lines):
            if self._lines[cursor].strip():
                return cursor
            cursor += 1
        return None


def convert_lists(text: str) -> str:
    """Replace markdown list runs in ``text`` with ``<ol>``/``<ul>`` elements."""
    return ListParser(text).render()
