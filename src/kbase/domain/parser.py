"""Structural Markdown parsing — headings, tags, and wikilinks.

Two phases, mirroring how markdown-it-py works:

1. **Block phase**: the CommonMark block parser splits the document into
   headings, paragraphs, lists, fences, indented code and HTML blocks.
   Headings are read straight off the ``heading_open`` tokens.
2. **Inline phase**: every ``inline`` token is split into children. A
   ``wikilink`` inline rule runs ahead of CommonMark's link rule and turns
   ``[[...]]`` into a single token, so emphasis, code or HTML inside the
   brackets stays part of the link payload. Tags are matched in ``text``
   children only; ``code_inline`` spans, images, and HTML are skipped, and
   code/HTML blocks never produce ``inline`` tokens at all.

The engine sits behind the :class:`MarkdownParser` protocol so it can be
swapped without touching resolution or indexing.
"""

from __future__ import annotations

import functools
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

from markdown_it import MarkdownIt

from kbase.domain.links import wikilink_at
from kbase.domain.tags import find_tags, finalize_tags
from kbase.domain.types import Heading, ParsedDocument, Reference
from kbase.errors import ParseError

if TYPE_CHECKING:
    from markdown_it.rules_inline import StateInline
    from markdown_it.token import Token

_FRONTMATTER_DELIMITER = "---"

WIKILINK_TOKEN = "wikilink"

# Stand-in for an escaped (``\#``) or entity (``&#35;``) hash. Like a
# literal ``#`` it cannot open a tag and blocks a ``#tag`` right after it.
_ESCAPED_HASH = "&"


class MarkdownParser(Protocol):
    """Anything that turns document content into a :class:`ParsedDocument`."""

    def parse(self, content: str) -> ParsedDocument: ...


def blank_frontmatter(content: str) -> str:
    """Replace a leading ``---`` YAML block with empty lines.

    Frontmatter is metadata, not prose. Blanking (rather than removing)
    keeps every later line number unchanged. The block must be closed, and
    the line after the opening ``---`` must not be blank; otherwise the
    ``---`` is an ordinary thematic break and content is returned as-is.
    """
    lines = content.split("\n")
    if lines[0].strip() != _FRONTMATTER_DELIMITER:
        return content
    if len(lines) < 2 or not lines[1].strip():
        return content

    for end_idx in range(1, len(lines)):
        if lines[end_idx].strip() == _FRONTMATTER_DELIMITER:
            return "\n".join([""] * (end_idx + 1) + lines[end_idx + 1 :])
    return content


def _wikilink_rule(state: StateInline, silent: bool) -> bool:
    """Inline rule: consume ``[[...]]`` or ``![[...]]`` at the current position."""
    if state.src[state.pos] not in "![":
        return False
    found = wikilink_at(state.src, state.pos, state.posMax)
    if found is None:
        return False

    end, ref = found
    if not silent:
        token = state.push(WIKILINK_TOKEN, "", 0)
        token.markup = state.src[state.pos : end]
        token.meta = {"reference": ref, "offset": state.pos}
    state.pos = end
    return True


class MarkdownItParser:
    """:class:`MarkdownParser` backed by markdown-it-py's CommonMark preset."""

    def __init__(self) -> None:
        # text_join would fold escapes and entities back into plain text.
        self._md = MarkdownIt("commonmark").disable("text_join")
        self._md.inline.ruler.before("link", WIKILINK_TOKEN, _wikilink_rule)

    def parse(self, content: str) -> ParsedDocument:
        """Parse *content* into title, headings, tags, and references.

        Raises:
            ParseError: If *content* is not text or the engine fails on it.
        """
        if not isinstance(content, str):
            msg = f"expected str content, got {type(content).__name__}"
            raise ParseError(msg)

        source = blank_frontmatter(content.replace("\r\n", "\n"))
        try:
            tokens = self._md.parse(source)
        except Exception as exc:
            raise ParseError(f"markdown parse failed: {exc}") from exc

        lines = source.split("\n")
        headings: list[Heading] = []
        tags: list[str] = []
        references: list[Reference] = []

        for idx, token in enumerate(tokens):
            if token.type == "heading_open":
                heading = _heading_from(token, tokens[idx + 1])
                if heading is not None:
                    headings.append(heading)
            elif token.type == "inline":
                _scan_inline(token, lines, tags, references)

        title = next((h.text for h in headings if h.level == 1), "")
        return ParsedDocument(
            title=title,
            headings=headings,
            tags=finalize_tags(tags),
            references=references,
            body=content,
        )


def _heading_from(open_token: Token, inline: Token) -> Heading | None:
    text = inline.content.strip()
    if not text or open_token.map is None:
        return None
    return Heading(level=int(open_token.tag[1:]), text=text, line=open_token.map[0] + 1)


def _scan_inline(
    token: Token,
    lines: list[str],
    tags: list[str],
    references: list[Reference],
) -> None:
    """Collect tags and wikilinks from the children of one inline token.

    Consecutive ``text``/``text_special`` children form one prose run for
    tag matching. Any other child ends the run.
    """
    start_line = token.map[0] if token.map is not None else 0
    run: list[str] = []

    def flush() -> None:
        if run:
            tags.extend(find_tags("".join(run)))
            run.clear()

    for child in token.children or []:
        if child.type == "text":
            run.append(child.content)
        elif child.type == "text_special":
            run.append(_ESCAPED_HASH if child.content == "#" else child.content)
        else:
            flush()
            if child.type == WIKILINK_TOKEN:
                references.append(_place_reference(child, token.content, lines, start_line))
    flush()


def _place_reference(child: Token, src: str, lines: list[str], start_line: int) -> Reference:
    """Attach the source line and column to a ``wikilink`` token's reference.

    The token's offset is into the inline content, whose lines map one to
    one onto source lines minus leading indentation or heading markers.
    The column is the n-th occurrence of the raw link on the source line,
    where n counts occurrences before it on the same content line.
    """
    offset: int = child.meta["offset"]
    raw = child.markup
    line_begin = src.rfind("\n", 0, offset) + 1
    line_idx = start_line + src.count("\n", 0, offset)

    column = offset - line_begin
    if line_idx < len(lines):
        found = _nth_index(lines[line_idx], raw, src.count(raw, line_begin, offset))
        if found >= 0:
            column = found
    return replace(child.meta["reference"], line=line_idx + 1, column=column)


def _nth_index(text: str, sub: str, n: int) -> int:
    found = text.find(sub)
    while found >= 0 and n > 0:
        found = text.find(sub, found + len(sub))
        n -= 1
    return found


@functools.lru_cache(maxsize=1)
def get_parser() -> MarkdownItParser:
    """Process-wide parser, created on first use and never mutated."""
    return MarkdownItParser()


def parse_document(content: str) -> ParsedDocument:
    """Parse *content* with the shared default parser."""
    return get_parser().parse(content)
