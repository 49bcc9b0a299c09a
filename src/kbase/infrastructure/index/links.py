"""Link index — forward and backward note-to-note links.

``forward[s]`` lists every note that *s* links to; ``backward[t]`` lists
every note linking to *t*. Both maps are filled from the same stream of
resolved ``(source, target)`` pairs, so ``t in forward[s]`` holds exactly
when ``s in backward[t]``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from pathlib import Path

from kbase.errors import IndexCorruptError
from kbase.infrastructure.index.store import read_json_mapping, write_json_atomic

FORWARD_FILE = "links-forward.json"
BACKWARD_FILE = "links-backward.json"


def _normalize(mapping: Mapping[str, Iterable[str]]) -> dict[str, list[str]]:
    return {key: sorted(set(values)) for key, values in mapping.items()}


class LinkIndex:
    """Bidirectional link maps with sorted, deduplicated values."""

    def __init__(
        self,
        forward: Mapping[str, Iterable[str]] | None = None,
        backward: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._forward = _normalize(forward or {})
        self._backward = _normalize(backward or {})

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> LinkIndex:
        builder = LinkIndexBuilder()
        for source, target in pairs:
            builder.add(source, target)
        return builder.build()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkIndex):
            return NotImplemented
        return self._forward == other._forward and self._backward == other._backward

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def forward(self, identity: str) -> list[str] | None:
        """Notes *identity* links to; None when it has no forward entry."""
        links = self._forward.get(identity)
        return None if links is None else list(links)

    def backward(self, identity: str) -> list[str] | None:
        """Notes linking to *identity*; None when it has no backward entry."""
        links = self._backward.get(identity)
        return None if links is None else list(links)

    def link_count(self) -> int:
        """Number of distinct ``(source, target)`` pairs."""
        return sum(len(targets) for targets in self._forward.values())

    def forward_map(self) -> dict[str, list[str]]:
        return {key: list(values) for key, values in self._forward.items()}

    def backward_map(self) -> dict[str, list[str]]:
        return {key: list(values) for key, values in self._backward.items()}

    def is_consistent(self) -> bool:
        """Whether the forward and backward maps describe the same pairs."""
        forward_pairs = {(s, t) for s, targets in self._forward.items() for t in targets}
        backward_pairs = {(s, t) for t, sources in self._backward.items() for s in sources}
        return forward_pairs == backward_pairs

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, index_dir: Path) -> tuple[Path, Path]:
        """Write both artifacts into *index_dir*.

        The index is only durable once both writes return. If the second
        write fails the directory is inconsistent until the next rebuild.
        """
        forward_path = index_dir / FORWARD_FILE
        backward_path = index_dir / BACKWARD_FILE
        write_json_atomic(forward_path, self._forward)
        write_json_atomic(backward_path, self._backward)
        return forward_path, backward_path

    @staticmethod
    def exists(index_dir: Path) -> bool:
        """Whether either link artifact has been written into *index_dir*."""
        return (index_dir / FORWARD_FILE).is_file() or (index_dir / BACKWARD_FILE).is_file()

    @classmethod
    def load(cls, index_dir: Path) -> LinkIndex:
        """Load both artifacts; an index that was never built loads empty.

        Raises:
            IndexCorruptError: If either artifact is malformed, only one of
                them exists, or they disagree with each other.
        """
        forward_path = index_dir / FORWARD_FILE
        backward_path = index_dir / BACKWARD_FILE
        forward = read_json_mapping(forward_path)
        backward = read_json_mapping(backward_path)

        if forward is None and backward is None:
            return cls()
        if forward is None:
            raise IndexCorruptError(forward_path, "missing while backward links exist")
        if backward is None:
            raise IndexCorruptError(backward_path, "missing while forward links exist")

        index = cls(forward, backward)
        if not index.is_consistent():
            raise IndexCorruptError(index_dir, "forward and backward links disagree")
        return index


class LinkIndexBuilder:
    """Accumulates resolved links during a vault scan."""

    def __init__(self) -> None:
        self._forward: defaultdict[str, list[str]] = defaultdict(list)
        self._backward: defaultdict[str, list[str]] = defaultdict(list)

    def add(self, source: str, target: str) -> None:
        self._forward[source].append(target)
        self._backward[target].append(source)

    def build(self) -> LinkIndex:
        return LinkIndex(self._forward, self._backward)
