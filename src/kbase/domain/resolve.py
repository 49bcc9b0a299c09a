"""Wikilink resolution — map a reference target onto a note identity.

Resolution is domain-scoped. Given the source note ``lucene/search-flow.md``:

- ``[[codecs]]`` -> ``lucene/codecs.md`` (same domain)
- ``[[glossary]]`` -> ``glossary.md`` (root level, if not in ``lucene/``)
- ``[[internals/codec]]`` -> ``lucene/internals/codec.md`` (domain-relative path)
- ``[[lucene/codecs]]`` -> ``lucene/codecs.md`` (root-relative path)
- ``[[datafusion/query]]`` -> ``datafusion/query.md`` (root-relative path)

A bare name is never resolved into a domain other than the source's own,
and a root-level source only ever resolves bare names at the root.
"""

from __future__ import annotations

import re
from collections.abc import Set
from pathlib import PurePosixPath

from kbase.domain.types import DOCUMENT_EXTENSION, PATH_SEPARATOR, domain_of

# A file-type suffix on the last segment: ".png", ".pdf", ".md".
_FILE_SUFFIX = re.compile(r"\.[A-Za-z][A-Za-z0-9]*$")


def is_document_target(target: str) -> bool:
    """Whether a reference target can point at a note.

    Targets without a file-type suffix, or with the document extension,
    are notes. Anything else (``image.png``, ``folder/scan.pdf``) is an
    attachment and is never indexed.

    Examples:
        >>> is_document_target("domain/note")
        True
        >>> is_document_target("note.md")
        True
        >>> is_document_target("diagram.svg")
        False
    """
    name = PurePosixPath(target).name
    match = _FILE_SUFFIX.search(name)
    if match is None:
        return True
    return match.group(0) == DOCUMENT_EXTENSION


def strip_document_extension(target: str) -> str:
    """Drop an explicit ``.md`` so ``[[note.md]]`` and ``[[note]]`` agree."""
    if target.endswith(DOCUMENT_EXTENSION):
        return target[: -len(DOCUMENT_EXTENSION)]
    return target


def resolve_target(target: str, source: str, known: Set[str]) -> str | None:
    """Resolve *target* as referenced from *source* against *known* identities.

    **Path-style** (contains ``/``):

    1. ``target.md`` from the vault root.
    2. ``<source domain>/target.md``.
    3. Otherwise unresolved; no further fallback.

    **Bare name**:

    1. ``<source domain>/target.md`` (same domain wins).
    2. ``target.md`` at the vault root.
    3. Otherwise unresolved.

    Pure and total: returns None rather than raising when nothing matches.
    """
    domain = domain_of(source)
    filename = f"{target}{DOCUMENT_EXTENSION}"

    if PATH_SEPARATOR in target:
        if filename in known:
            return filename
        if domain is not None:
            relative = f"{domain}{PATH_SEPARATOR}{filename}"
            if relative in known:
                return relative
        return None

    if domain is not None:
        same_domain = f"{domain}{PATH_SEPARATOR}{filename}"
        if same_domain in known:
            return same_domain

    if filename in known:
        return filename

    return None
