"""Markdown to Confluence storage-format transcoder.

The transcoder is a fixed, ordered list of named stages. Each stage is a pure
``str -> str`` rewrite; later stages rely on the output shape of earlier ones
(list items must already carry resolved emphasis and links, paragraph wrapping
must see finished block elements), so the order in ``build_stages`` is part of
the contract.

Code is never rewritten as prose: stages run only on the text between fenced
blocks and code macros, and the inline stages additionally skip inline code
spans and the markup earlier stages emitted (tags, CDATA sections). The
transcoder never fails; anything it does not recognise passes
through as plain text.
"""

import html
import itertools
import logging
import re
from functools import wraps
from typing import Callable, List, Optional, Pattern, Tuple

from src.models.transcode_result import TranscodeResult
from .list_parser import convert_lists
from .placeholders import escape_attribute, extract_diagrams, extract_images

logger = logging.getLogger(__name__)

Stage = Callable[[str], str]

DEFAULT_ATTACHMENTS_FOLDER = "attachments"
DEFAULT_CODE_LANGUAGE = "none"

_FENCE = r'```[\s\S]*?```'
_MACRO = r'<ac:structured-macro\b[\s\S]*?</ac:structured-macro>'
_INLINE_CODE = r'`[^`\n]+`'
_CDATA_SECTION = r'<!\[CDATA\[[\s\S]*?\]\]>'
_TAG = r'</?[A-Za-z][\w:.-]*(?:\s[^<>]*)?/?>'
_LINK_TARGET = r'\]\([^()\s]+(?:\s+"[^"]*")?\)'

_BLOCK_CODE = re.compile(f'({_FENCE}|{_MACRO})')
_ANY_CODE = re.compile(f'({_FENCE}|{_MACRO}|{_INLINE_CODE})')
_MARKUP = re.compile(f'{_FENCE}|{_MACRO}|{_CDATA_SECTION}|{_INLINE_CODE}|{_TAG}')
_MARKUP_AND_TARGETS = re.compile(
    f'{_FENCE}|{_MACRO}|{_CDATA_SECTION}|{_INLINE_CODE}|{_TAG}|{_LINK_TARGET}'
)
_MACRO_SPAN = re.compile(f'({_MACRO})')
_SHIELD = re.compile(r'\ue000(\d+)\ue001')


def _outside(protected: Pattern) -> Callable[[Stage], Stage]:
    """Restrict a stage to the text between ``protected`` spans.

    ``protected`` must have exactly one capturing group so ``re.split`` keeps
    the protected spans at odd indexes.
    """
    def decorator(stage: Stage) -> Stage:
        @wraps(stage)
        def wrapper(text: str) -> str:
            parts = protected.split(text)
            return ''.join(
                part if index % 2 else stage(part)
                for index, part in enumerate(parts)
            )
        return wrapper
    return decorator


def _shielded(protected: Pattern) -> Callable[[Stage], Stage]:
    """Hide ``protected`` spans behind numbered tokens while a stage runs.

    Unlike ``_outside`` the stage still sees one continuous text, so a match
    may span a hidden element (``**[[Page]]**``) but never rewrites inside it.
    """
    def decorator(stage: Stage) -> Stage:
        @wraps(stage)
        def wrapper(text: str) -> str:
            spans: List[str] = []

            def hide(match: re.Match) -> str:
                spans.append(match.group(0))
                return f'\ue000{len(spans) - 1}\ue001'

            result = stage(protected.sub(hide, text))
            return _SHIELD.sub(lambda m: spans[int(m.group(1))], result)
        return wrapper
    return decorator


outside_block_code = _outside(_BLOCK_CODE)
outside_any_code = _outside(_ANY_CODE)
outside_markup = _shielded(_MARKUP)
prose_only = _shielded(_MARKUP_AND_TARGETS)


def _cdata(text: str) -> str:
    # "]]>" cannot appear inside a CDATA section; split it across two
    return '<![CDATA[' + text.replace(']]>', ']]]]><![CDATA[>') + ']]>'


# --- 1. dataview tag queries ------------------------------------------------

_DATAVIEW_TAGS = re.compile(
    r'```dataviewjs\s*dv\.view\([^,]+,\s*\{\s*tags:\s*\[([^\]]+)\][^}]*\}\s*\)\s*```'
)


def convert_dataview_tags(text: str) -> str:
    """Turn a ``dv.view(..., {tags: [...]})`` block into ``#tag`` tokens."""
    def replace(match: re.Match) -> str:
        tags = [tag.strip().replace('"', '').replace("'", '') for tag in match.group(1).split(',')]
        return ' '.join(f'#{tag}' for tag in tags if tag)

    return _DATAVIEW_TAGS.sub(replace, text)


# --- 2. wiki links ------------------------------------------------------------

_WIKI_LINK = re.compile(r'\[\[([^\]|]+)(?:\|([^\]]+))?\]\]')


@outside_any_code
def convert_wiki_links(text: str) -> str:
    """``[[path/Page#Heading|alias]]`` -> link macro to the page titled ``Page``."""
    def replace(match: re.Match) -> str:
        # "\|" is how an alias pipe is escaped inside a table row
        target = match.group(1).rstrip('\\').strip()
        page, _, anchor = target.partition('#')
        title = page.split('/')[-1].strip()
        anchor = anchor.strip()
        link_text = (match.group(2) or '').strip() or title or anchor

        anchor_attr = f' ac:anchor="{escape_attribute(anchor)}"' if anchor else ''
        resource = f'<ri:page ri:content-title="{escape_attribute(title)}" />' if title else ''
        return (
            f'<ac:link{anchor_attr}>{resource}'
            f'<ac:plain-text-link-body>{_cdata(link_text)}</ac:plain-text-link-body>'
            f'</ac:link>'
        )

    return _WIKI_LINK.sub(replace, text)


# --- 3. decorative icons ------------------------------------------------------

def make_icon_remover(attachments_folder: str) -> Stage:
    """Build the stage dropping ``![..](<folder>/...)`` icon images."""
    folder = re.escape(attachments_folder.strip('/'))
    pattern = re.compile(rf'!\[[^\]]*\]\((?:\./)?{folder}/[^)]+\)')

    @outside_any_code
    def remove_inline_icons(text: str) -> str:
        return pattern.sub('', text)

    return remove_inline_icons


# --- 4. headings --------------------------------------------------------------

_HEADING = re.compile(r'^(#{1,6}) (.+)$', re.MULTILINE)


@outside_block_code
def convert_headings(text: str) -> str:
    def replace(match: re.Match) -> str:
        level = len(match.group(1))
        return f'<h{level}>{match.group(2).strip()}</h{level}>'

    return _HEADING.sub(replace, text)


# --- 5. fenced code -----------------------------------------------------------

_CODE_FENCE = re.compile(r'```([\w+#.-]*)[ \t]*\n([\s\S]*?)\n?```')


def code_macro(language: str, code: str) -> str:
    return (
        '<ac:structured-macro ac:name="code">'
        f'<ac:parameter ac:name="language">{language or DEFAULT_CODE_LANGUAGE}</ac:parameter>'
        f'<ac:plain-text-body>{_cdata(code)}</ac:plain-text-body>'
        '</ac:structured-macro>'
    )


def convert_code_blocks(text: str) -> str:
    return _CODE_FENCE.sub(lambda m: code_macro(m.group(1), m.group(2)), text)


# --- 6. images ----------------------------------------------------------------

_IMAGE = re.compile(r'!\[([^\]]*)\]\(([^)\s]+)(?:\s+"[^"]*")?\)')


@outside_markup
def convert_images(text: str) -> str:
    return _IMAGE.sub(
        lambda m: f'<ac:image><ri:url ri:value="{escape_attribute(m.group(2))}" /></ac:image>',
        text
    )


# --- 7. tables ----------------------------------------------------------------

_TABLE = re.compile(r'^(?:\|.*\|[ \t]*(?:\n|$))+', re.MULTILINE)
_CELL_SEPARATOR = re.compile(r'(?<!\\)\|')
_CELL_CODE = re.compile(f'({_INLINE_CODE})')


def _split_cells(row: str) -> List[str]:
    # a pipe inside an inline code span belongs to the cell
    inner = row.strip()[1:-1]
    cells = ['']
    for index, part in enumerate(_CELL_CODE.split(inner)):
        if index % 2:
            cells[-1] += part
            continue
        first, *rest = _CELL_SEPARATOR.split(part)
        cells[-1] += first
        cells.extend(rest)
    return [cell.strip().replace('\\|', '|') for cell in cells]


@outside_block_code
def convert_tables(text: str) -> str:
    """Pipe tables: row 0 is the header, row 1 (separator) is dropped."""
    def replace(match: re.Match) -> str:
        block = match.group(0)
        parts = ['<table><tbody>']
        for index, row in enumerate(block.strip().split('\n')):
            if index == 1:
                continue
            tag = 'th' if index == 0 else 'td'
            cells = ''.join(f'<{tag}>{cell}</{tag}>' for cell in _split_cells(row))
            parts.append(f'<tr>{cells}</tr>')
        parts.append('</tbody></table>')
        return ''.join(parts) + ('\n' if block.endswith('\n') else '')

    return _TABLE.sub(replace, text)


# --- 8. task lists ------------------------------------------------------------

_TASK = re.compile(r'^- \[([ xX])\] (.+)$', re.MULTILINE)
_TASK_RUN = re.compile(r'^(?:- \[[ xX]\] .+(?:\n|$))+', re.MULTILINE)


@outside_block_code
def convert_task_lists(text: str) -> str:
    """Consecutive ``- [ ]`` / ``- [x]`` lines -> one ``<ac:task-list>``."""
    task_ids = itertools.count(1)

    def task(match: re.Match) -> str:
        status = 'complete' if match.group(1).lower() == 'x' else 'incomplete'
        return (
            f'<ac:task><ac:task-id>{next(task_ids)}</ac:task-id>'
            f'<ac:task-status>{status}</ac:task-status>'
            f'<ac:task-body>{match.group(2).strip()}</ac:task-body></ac:task>'
        )

    def replace(match: re.Match) -> str:
        run = match.group(0)
        tasks = ''.join(task(m) for m in _TASK.finditer(run))
        return f'<ac:task-list>{tasks}</ac:task-list>' + ('\n' if run.endswith('\n') else '')

    return _TASK_RUN.sub(replace, text)


# --- 9. emphasis --------------------------------------------------------------

_EMPHASIS_RULES: List[Tuple[Pattern, str]] = [
    (re.compile(r'\*\*\*(.+?)\*\*\*'), r'<strong><em>\1</em></strong>'),
    (re.compile(r'(?<!\w)___(.+?)___(?!\w)'), r'<strong><em>\1</em></strong>'),
    (re.compile(r'\*\*(.+?)\*\*'), r'<strong>\1</strong>'),
    (re.compile(r'(?<!\w)__(.+?)__(?!\w)'), r'<strong>\1</strong>'),
    (re.compile(r'\*(?!\s)(.+?)(?<!\s)\*'), r'<em>\1</em>'),
    (re.compile(r'(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)'), r'<em>\1</em>'),
]


@prose_only
def convert_emphasis(text: str) -> str:
    for pattern, replacement in _EMPHASIS_RULES:
        text = pattern.sub(replacement, text)
    return text


# --- 10. strikethrough --------------------------------------------------------

_STRIKETHROUGH = re.compile(r'~~(.+?)~~')


@prose_only
def convert_strikethrough(text: str) -> str:
    return _STRIKETHROUGH.sub(r'<s>\1</s>', text)


# --- 11. links ----------------------------------------------------------------

_LINK = re.compile(r'\[([^\[\]]+)\]\(([^()\s]+)(?:\s+"[^"]*")?\)')


@outside_markup
def convert_links(text: str) -> str:
    return _LINK.sub(
        lambda m: f'<a href="{escape_attribute(m.group(2))}">{m.group(1)}</a>',
        text
    )


# --- 12. inline code ----------------------------------------------------------

_INLINE_CODE_SPAN = re.compile(r'`([^`\n]+)`')


@outside_block_code
def convert_inline_code(text: str) -> str:
    return _INLINE_CODE_SPAN.sub(
        lambda m: f'<code>{html.escape(m.group(1), quote=False)}</code>',
        text
    )


# --- 13. horizontal rules -----------------------------------------------------

_HORIZONTAL_RULE = re.compile(r'^-{3,}[ \t]*$', re.MULTILINE)


@outside_block_code
def convert_horizontal_rules(text: str) -> str:
    return _HORIZONTAL_RULE.sub('<hr/>', text)


# --- 14. blockquotes ----------------------------------------------------------

_QUOTE_LINE = re.compile(r'^>[ \t]?(.*)$', re.MULTILINE)
_ADJACENT_QUOTES = re.compile(r'</blockquote>[ \t]*\n?[ \t]*<blockquote>')


@outside_block_code
def convert_blockquotes(text: str) -> str:
    """``> text`` lines -> blockquotes; consecutive quote lines share one."""
    def replace(match: re.Match) -> str:
        content = match.group(1).strip()
        if not content:
            return '<blockquote></blockquote>'
        return f'<blockquote><p>{content}</p></blockquote>'

    text = _QUOTE_LINE.sub(replace, text)
    return _ADJACENT_QUOTES.sub('', text)


# --- 15. lists ----------------------------------------------------------------

list_stage = outside_block_code(convert_lists)


# --- 16. paragraphs -----------------------------------------------------------

_BLOCK_ELEMENT = re.compile(
    r'^<(?:h[1-6]|p|ul|ol|table|blockquote|hr|pre|div|'
    r'ac:structured-macro|ac:task-list|ac:task|ac:layout)\b'
)


def wrap_paragraphs(text: str) -> str:
    """Wrap blank-line separated runs of plain lines in ``<p>``.

    Structured-macro spans are emitted untouched and never split, lines that
    already are block elements stand on their own, and no empty paragraph is
    produced.
    """
    blocks: List[str] = []
    run: List[str] = []

    def flush() -> None:
        if run:
            blocks.append('<p>' + '\n'.join(run) + '</p>')
            run.clear()

    for index, segment in enumerate(_MACRO_SPAN.split(text)):
        if index % 2:
            flush()
            blocks.append(segment)
            continue
        for line in segment.split('\n'):
            stripped = line.strip()
            if not stripped:
                flush()
            elif _BLOCK_ELEMENT.match(stripped):
                flush()
                blocks.append(stripped)
            else:
                run.append(stripped)
        # a macro closes the paragraph it interrupts
        flush()

    return '\n'.join(blocks)


# --- pipeline -----------------------------------------------------------------

def build_stages(attachments_folder: str = DEFAULT_ATTACHMENTS_FOLDER) -> List[Tuple[str, Stage]]:
    """The transcoding pipeline, in execution order."""
    return [
        ("dataview_tags", convert_dataview_tags),
        ("wiki_links", convert_wiki_links),
        ("inline_icons", make_icon_remover(attachments_folder)),
        ("headings", convert_headings),
        ("code_blocks", convert_code_blocks),
        ("images", convert_images),
        ("tables", convert_tables),
        ("task_lists", convert_task_lists),
        ("emphasis", convert_emphasis),
        ("strikethrough", convert_strikethrough),
        ("links", convert_links),
        ("inline_code", convert_inline_code),
        ("horizontal_rules", convert_horizontal_rules),
        ("blockquotes", convert_blockquotes),
        ("lists", list_stage),
        ("paragraphs", wrap_paragraphs),
    ]


class StorageTranscoder:
    """Converts a markdown note body into Confluence storage format.

    Example:
        >>> result = StorageTranscoder().transcode("# Title\\n\\nSome **bold** text")
        >>> result.storage
        '<h1>Title</h1>\\n<p>Some <strong>bold</strong> text</p>'
    """

    def __init__(self, attachments_folder: str = DEFAULT_ATTACHMENTS_FOLDER):
        """Initialize the transcoder.

        Args:
            attachments_folder: Vault folder holding attachments; inline
                                images pointing into it are treated as
                                decorative icons and dropped
        """
        self.attachments_folder = attachments_folder
        self.stages = build_stages(attachments_folder)

    def convert(self, markdown: str) -> str:
        """Run the stage pipeline only (no placeholder extraction)."""
        text = markdown.replace('\r\n', '\n').replace('\r', '\n')
        for name, stage in self.stages:
            text = stage(text)
            logger.debug(f"Stage {name}: {len(text)} characters")
        return text.strip()

    def transcode(self, markdown: str) -> TranscodeResult:
        """Extract placeholders, then run the pipeline.

        Diagrams and image embeds are pulled out before the pipeline so the
        generic image stage never sees them.

        Args:
            markdown: Note body (frontmatter already removed)

        Returns:
            TranscodeResult with storage markup and the placeholders it holds
        """
        text = markdown.replace('\r\n', '\n').replace('\r', '\n')
        text, diagrams = extract_diagrams(text)
        text, images = extract_images(text, outside_any_code)
        storage = self.convert(text)

        if diagrams or images:
            logger.info(
                f"Transcoded with {len(diagrams)} diagram(s) and "
                f"{len(images)} image attachment(s) pending"
            )
        return TranscodeResult(storage=storage, diagrams=diagrams, images=images)


def transcode(markdown: str, attachments_folder: Optional[str] = None) -> TranscodeResult:
    """Convenience wrapper around ``StorageTranscoder.transcode``."""
    transcoder = StorageTranscoder(attachments_folder or DEFAULT_ATTACHMENTS_FOLDER)
    return transcoder.transcode(markdown)
