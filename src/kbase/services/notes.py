"""NoteService — domains, note listings, and reading a single note."""

from __future__ import annotations

from typing import Any

from kbase.domain.parser import get_parser
from kbase.domain.types import SortBy, in_domain, normalize_identity
from kbase.errors import KbaseError
from kbase.infrastructure.vault import Note
from kbase.services.base import BaseService, error_result
from kbase.services.result import IO_ERROR, ServiceResult
from kbase.services.tags import normalize_tag
from kbase.services.timing import timed


class NoteService(BaseService):
    """Read-only operations over vault content."""

    # ------------------------------------------------------------------
    # domains
    # ------------------------------------------------------------------

    @timed
    def domains(self, *, sort: SortBy | str = SortBy.NAME) -> ServiceResult:
        """Domains with note counts and optional descriptions."""
        op = "domains"
        try:
            found = self._vault.domains()
        except OSError as exc:
            return ServiceResult.failure(op, IO_ERROR, f"could not list {self._vault.root}: {exc}")

        if SortBy(sort) is SortBy.COUNT:
            found = sorted(found, key=lambda d: (-d.note_count, d.name))

        items = [
            {
                "name": domain.name,
                "count": domain.note_count,
                "description": self._vault.domain_description(domain.name),
            }
            for domain in found
        ]
        return ServiceResult(ok=True, op=op, data={"items": items, "total": len(items)})

    # ------------------------------------------------------------------
    # list_notes
    # ------------------------------------------------------------------

    @timed
    def list_notes(self, *, domain: str | None = None, tag: str | None = None) -> ServiceResult:
        """Notes with titles, filtered by domain and/or tag.

        Tag filtering goes through the persisted tag index; index entries
        whose file has since disappeared are skipped with a warning.
        """
        op = "list_notes"
        warnings: list[str] = []
        try:
            if tag is not None:
                if domain is not None:
                    self._require_domains([domain])
                index = self._load_tags()
                if index is None:
                    return self._missing_index(op, "tag")
                notes: list[Note] = []
                for identity in index.notes_with_tag(normalize_tag(tag)):
                    if domain is not None and not in_domain(identity, domain):
                        continue
                    if not self._vault.has_note(identity):
                        warnings.append(f"stale index entry: {identity}")
                        continue
                    notes.append(Note(identity=identity, path=self._vault.root / identity))
            elif domain is not None:
                notes = self._vault.notes_in_domain(domain)
            else:
                notes = self._vault.all_notes()
        except KbaseError as exc:
            return error_result(op, exc)

        items = [{"path": note.identity, "title": self._vault.note_title(note)} for note in notes]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": items,
                "total": len(items),
                "domain": domain,
                "tag": normalize_tag(tag) if tag is not None else None,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # read
    # ------------------------------------------------------------------

    @timed
    def read(self, path: str, *, outline: bool = False, line_numbers: bool = False) -> ServiceResult:
        """Content of a note, or its heading outline when *outline* is set."""
        op = "read"
        identity = normalize_identity(path)
        try:
            content = self._vault.read_note(identity)
            data: dict[str, Any] = {
                "path": identity,
                "outline": outline,
                "line_numbers": line_numbers,
                "line_count": len(content.splitlines()),
            }
            if outline:
                document = get_parser().parse(content)
                data["title"] = document.title
                data["headings"] = [
                    {"level": h.level, "text": h.text, "line": h.line} for h in document.headings
                ]
            else:
                data["content"] = content
        except KbaseError as exc:
            return error_result(op, exc)
        return ServiceResult(ok=True, op=op, data=data)
