"""Document types, enums, and identity helpers.

A document identity is the vault-relative POSIX path of a note, extension
included (``"lucene/search-flow.md"``). The first path segment is the
note's *domain*; notes directly under the vault root have no domain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

DOCUMENT_EXTENSION = ".md"
PATH_SEPARATOR = "/"


class IndexKind(StrEnum):
    """Indexes that ``kbase index`` knows how to build."""

    TAGS = "tags"
    LINKS = "links"


class SortBy(StrEnum):
    """Sort modes shared by the tag and domain listings."""

    NAME = "name"
    COUNT = "count"


@dataclass(frozen=True)
class Heading:
    """A heading in document order."""

    level: int  # 1..6
    text: str
    line: int  # 1-indexed


@dataclass(frozen=True)
class Reference:
    """A ``[[wikilink]]`` found in prose."""

    target: str  # payload with any #section stripped
    alias: str | None = None  # text after | if present
    section: str | None = None  # text after # if present
    line: int = 0  # 1-indexed
    column: int = 0  # 0-indexed
    embed: bool = False  # ![[...]] form


@dataclass(frozen=True)
class ParsedDocument:
    """Structured view of a single document's content."""

    title: str = ""
    headings: list[Heading] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)
    body: str = ""


def domain_of(identity: str) -> str | None:
    """Return the domain (first path segment) of *identity*.

    Examples:
        >>> domain_of("lucene/search-flow.md")
        'lucene'
        >>> domain_of("lucene/internals/codec.md")
        'lucene'
        >>> domain_of("glossary.md") is None
        True
    """
    head, sep, _rest = identity.partition(PATH_SEPARATOR)
    if not sep:
        return None
    return head


def in_domain(identity: str, domain: str) -> bool:
    """Whether *identity* lives in *domain*. Root notes are in no domain."""
    return domain_of(identity) == domain


def normalize_identity(name: str) -> str:
    """Turn user input like ``./lucene/codecs`` into ``lucene/codecs.md``."""
    identity = name.strip().replace("\\", PATH_SEPARATOR)
    while identity.startswith("./"):
        identity = identity[2:]
    if not identity.endswith(DOCUMENT_EXTENSION):
        identity += DOCUMENT_EXTENSION
    return identity
