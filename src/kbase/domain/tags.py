"""Tag domain logic — inline ``#tag`` recognition and the tag-set policy.

Pure functions, no parsing engine. The parser feeds prose text through
:func:`find_tags`; :func:`finalize_tags` applies the per-document policy.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# A # that is not glued to a preceding word, path, entity or another #.
TAG_PATTERN = re.compile(r"(?<![\w/&#])#([A-Za-z0-9][A-Za-z0-9_-]*)")


def find_tags(text: str) -> list[str]:
    """Return every tag token in *text* (without ``#``), in order of appearance.

    Examples:
        >>> find_tags("This is a #test and #example note.")
        ['test', 'example']
        >>> find_tags("C# and issue#12 are not tags")
        []
    """
    return [match.group(1) for match in TAG_PATTERN.finditer(text)]


def is_numeric_tag(tag: str) -> bool:
    """Whether *tag* is composed entirely of digits (``#123``, ``#20298``)."""
    return tag.isdigit()


def finalize_tags(tags: Iterable[str]) -> list[str]:
    """Deduplicate, drop numeric-only tokens, and sort ascending.

    Examples:
        >>> finalize_tags(["wip", "123", "bug-report", "wip"])
        ['bug-report', 'wip']
    """
    return sorted({tag for tag in tags if not is_numeric_tag(tag)})
