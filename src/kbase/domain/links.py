"""Link syntax — parse ``[[wikilinks]]`` payloads.

Pure functions, no infrastructure dependencies. The parser's inline rule
calls :func:`wikilink_at` while markdown-it walks prose, so anything inside
code never reaches this module.
"""

from __future__ import annotations

import re

from kbase.domain.types import Reference

# [[target]], [[target|alias]], [[target#section]], ![[embed.png]]
WIKILINK_PATTERN = re.compile(r"(!?)\[\[([^\[\]\n]+)\]\]")


def split_section(target: str) -> tuple[str, str | None]:
    """Split ``note#Section`` into ``("note", "Section")``.

    Everything before the first ``#`` is the target. An empty section
    (``note#``) is reported as None.

    Examples:
        >>> split_section("note#Introduction")
        ('note', 'Introduction')
        >>> split_section("domain/note")
        ('domain/note', None)
    """
    path, sep, section = target.partition("#")
    if not sep or not section.strip():
        return path.strip(), None
    return path.strip(), section.strip()


def parse_wikilink(inner: str, *, embed: bool = False) -> Reference:
    """Build a :class:`Reference` from the text between ``[[`` and ``]]``."""
    target_part, sep, alias = inner.partition("|")
    target, section = split_section(target_part)
    alias = alias.strip() if sep else ""
    return Reference(
        target=target,
        alias=alias or None,
        section=section,
        embed=embed,
    )


def wikilink_at(text: str, pos: int = 0, endpos: int | None = None) -> tuple[int, Reference] | None:
    """Match a wikilink that opens exactly at *pos* in *text*.

    Returns ``(end, reference)``, where *end* is the offset just past the
    closing ``]]``, or None when no wikilink opens at *pos*. The payload is
    taken verbatim: emphasis or code markup inside it stays part of the
    target, section or alias.

    Examples:
        >>> wikilink_at("see [[a]]", 4)[0]
        9
        >>> wikilink_at("see [[a]]", 0) is None
        True
    """
    match = WIKILINK_PATTERN.match(text, pos, len(text) if endpos is None else endpos)
    if match is None:
        return None
    return match.end(), parse_wikilink(match.group(2), embed=bool(match.group(1)))
