"""Tag index — tag to the sorted notes that carry it."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Set
from pathlib import Path

from kbase.domain.types import domain_of
from kbase.infrastructure.index.store import read_json_mapping, write_json_atomic

TAGS_FILE = "tags.json"


class TagIndex:
    """Immutable-by-convention ``tag -> [identity]`` mapping.

    Every list is sorted ascending with no duplicates. Construct through
    :class:`TagIndexBuilder` or :meth:`load`.
    """

    def __init__(self, tags: Mapping[str, Iterable[str]] | None = None) -> None:
        self._tags: dict[str, list[str]] = {
            tag: sorted(set(notes)) for tag, notes in (tags or {}).items()
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagIndex):
            return NotImplemented
        return self._tags == other._tags

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all_tags(self) -> list[str]:
        return sorted(self._tags)

    def sorted_by_name(self) -> list[tuple[str, int]]:
        """``(tag, note count)`` pairs, ascending by tag."""
        return [(tag, len(self._tags[tag])) for tag in sorted(self._tags)]

    def sorted_by_count(self) -> list[tuple[str, int]]:
        """``(tag, note count)`` pairs, most used first, ties by tag name."""
        return sorted(self.sorted_by_name(), key=lambda item: (-item[1], item[0]))

    def notes_with_tag(self, tag: str) -> list[str]:
        """Notes carrying *tag*; empty when the tag is unknown."""
        return list(self._tags.get(tag, []))

    def filter_by_domains(self, domains: Set[str]) -> dict[str, list[str]]:
        """Restrict every tag to notes in *domains*, dropping emptied tags.

        Root notes have no domain and never match.
        """
        result: dict[str, list[str]] = {}
        for tag in sorted(self._tags):
            kept = [note for note in self._tags[tag] if domain_of(note) in domains]
            if kept:
                result[tag] = kept
        return result

    def to_dict(self) -> dict[str, list[str]]:
        return {tag: list(notes) for tag, notes in self._tags.items()}

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, index_dir: Path) -> Path:
        """Atomically write ``tags.json`` into *index_dir*; return its path."""
        path = index_dir / TAGS_FILE
        write_json_atomic(path, self._tags)
        return path

    @staticmethod
    def exists(index_dir: Path) -> bool:
        """Whether ``tags.json`` has been written into *index_dir*."""
        return (index_dir / TAGS_FILE).is_file()

    @classmethod
    def load(cls, index_dir: Path) -> TagIndex:
        """Load ``tags.json``; an index that was never built loads empty.

        Use :meth:`exists` to tell "not built" from "built but empty".

        Raises:
            IndexCorruptError: If the artifact exists but is malformed.
        """
        return cls(read_json_mapping(index_dir / TAGS_FILE) or {})


class TagIndexBuilder:
    """Accumulates ``(tag, note)`` pairs during a vault scan."""

    def __init__(self) -> None:
        self._acc: defaultdict[str, list[str]] = defaultdict(list)

    def add(self, identity: str, tags: Iterable[str]) -> None:
        for tag in tags:
            self._acc[tag].append(identity)

    def build(self) -> TagIndex:
        return TagIndex(self._acc)
