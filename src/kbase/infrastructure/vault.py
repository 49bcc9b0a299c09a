"""Vault — the folder tree of notes that every service reads from.

INVARIANT: Files are truth. The indexes under :attr:`Vault.index_dir` are
derived data and ``kbase index`` must always be able to rebuild them from
the files alone.

Layout::

    <vault>/
        glossary.md              root note (no domain)
        lucene/                  domain
            _description.md      domain description, not a note
            search-flow.md       note "lucene/search-flow.md"
            internals/codec.md   nested note in domain "lucene"
        _templates/              skipped (leading underscore)
        .obsidian/               skipped (hidden)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from kbase.domain.types import DOCUMENT_EXTENSION
from kbase.errors import DomainNotFoundError, NoteNotFoundError, NoteReadError, VaultError

logger = logging.getLogger(__name__)

# Files checked for a domain description, in priority order.
DESCRIPTION_FILES = ("_description.md", "description.md")

# Only this many lines are scanned for a "# Title" when listing notes.
_TITLE_SCAN_LINES = 20


@dataclass(frozen=True)
class Domain:
    """A top-level folder of the vault."""

    name: str
    path: Path
    note_count: int


@dataclass(frozen=True)
class Note:
    """A note, identified by its vault-relative POSIX path."""

    identity: str  # e.g. "lucene/search-flow.md"
    path: Path  # absolute filesystem path

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem


def _is_skipped(name: str) -> bool:
    """Hidden entries and anything starting with ``_`` are not content."""
    return name.startswith((".", "_"))


class Vault:
    """Read-only view over a vault directory.

    Enumeration never reads note content; callers that need content go
    through :meth:`read_note` so each note is read once per operation.
    """

    def __init__(self, root: Path, name: str, index_dir: Path) -> None:
        self.root = root
        self.name = name
        self.index_dir = index_dir

    @classmethod
    def open(cls, root: Path, name: str, index_dir: Path) -> Vault:
        """Open the vault at *root*.

        Raises:
            VaultError: If *root* does not exist or is not a directory.
        """
        root = root.expanduser()
        if not root.exists():
            msg = f"vault path does not exist: {root}"
            raise VaultError(msg)
        if not root.is_dir():
            msg = f"vault path is not a directory: {root}"
            raise VaultError(msg)
        return cls(root=root, name=name, index_dir=index_dir)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def domains(self) -> list[Domain]:
        """Top-level folders in name order, excluding hidden and ``_`` ones."""
        result: list[Domain] = []
        for path in sorted(self.root.iterdir()):
            if not path.is_dir() or _is_skipped(path.name):
                continue
            result.append(
                Domain(name=path.name, path=path, note_count=len(self._walk(path))),
            )
        return result

    def root_notes(self) -> list[Note]:
        """Notes directly under the vault root, sorted by filename."""
        return [self._note(path) for path in self._files_in(self.root)]

    def notes_in_domain(self, domain: str) -> list[Note]:
        """All notes under *domain* (nested folders included), sorted by path.

        Raises:
            DomainNotFoundError: If *domain* is not a domain folder.
        """
        if not self.has_domain(domain):
            raise DomainNotFoundError(domain)
        return [self._note(path) for path in self._walk(self.root / domain)]

    def all_notes(self) -> list[Note]:
        """Every note: root notes first, then each domain in name order."""
        notes = self.root_notes()
        for domain in self.domains():
            notes.extend(self.notes_in_domain(domain.name))
        return notes

    def has_domain(self, name: str) -> bool:
        """True when *name* is a top-level, non-skipped folder of the vault."""
        return not _is_skipped(name) and "/" not in name and (self.root / name).is_dir()

    def has_note(self, identity: str) -> bool:
        try:
            return self._path_for(identity).is_file()
        except NoteNotFoundError:
            return False

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def read_note(self, identity: str) -> str:
        """Read the full content of the note at vault-relative *identity*.

        Raises:
            NoteNotFoundError: If no such note exists (or it escapes the vault).
            NoteReadError: If the file exists but cannot be read as UTF-8.
        """
        path = self._path_for(identity)
        if not path.is_file():
            raise NoteNotFoundError(identity)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise NoteReadError(identity, str(exc)) from exc

    def note_title(self, note: Note) -> str:
        """First ``# Title`` line within the head of the note, else its stem."""
        try:
            with note.path.open(encoding="utf-8") as fh:
                for lineno, line in enumerate(fh):
                    if lineno >= _TITLE_SCAN_LINES:
                        break
                    stripped = line.strip()
                    if stripped.startswith("# ") and stripped[2:].strip():
                        return stripped[2:].strip()
        except (OSError, UnicodeDecodeError):
            logger.debug("Could not scan title of %s", note.identity)
        return note.stem

    def domain_description(self, domain: str) -> str | None:
        """Trimmed content of the domain's description file, if any."""
        for filename in DESCRIPTION_FILES:
            path = self.root / domain / filename
            if not path.is_file():
                continue
            try:
                content = path.read_text(encoding="utf-8").strip()
            except (OSError, UnicodeDecodeError):
                logger.warning("Could not read description %s", path)
                continue
            if content:
                return content
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _path_for(self, identity: str) -> Path:
        # Guard against path traversal via a crafted identity
        path = self.root / identity
        if not path.resolve().is_relative_to(self.root.resolve()):
            raise NoteNotFoundError(identity)
        return path

    def _note(self, path: Path) -> Note:
        return Note(identity=path.relative_to(self.root).as_posix(), path=path)

    @staticmethod
    def _files_in(directory: Path) -> list[Path]:
        return sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix == DOCUMENT_EXTENSION and not _is_skipped(path.name)
        )

    def _walk(self, directory: Path) -> list[Path]:
        results: list[Path] = []
        for path in directory.rglob(f"*{DOCUMENT_EXTENSION}"):
            if not path.is_file():
                continue
            relative = path.relative_to(directory)
            if any(_is_skipped(part) for part in relative.parts):
                continue
            results.append(path)
        return sorted(results, key=lambda p: p.relative_to(directory).as_posix())
