"""LinkService — forward links and backlinks of a single note."""

from __future__ import annotations

from typing import Any

from kbase.domain.types import normalize_identity
from kbase.errors import KbaseError
from kbase.services.base import BaseService, error_result
from kbase.services.result import ServiceResult
from kbase.services.timing import timed


def _section(links: list[str] | None) -> dict[str, Any]:
    # "No entry" and "empty entry" render the same way
    paths = links or []
    return {"total": len(paths), "links": paths}


class LinkService(BaseService):
    """Reads the persisted link index."""

    @timed
    def links(self, note: str, *, forward: bool = True, backward: bool = True) -> ServiceResult:
        """Links of *note* in the requested directions.

        Asking for neither direction means both. ``data["indexed"]`` is
        False when the note has no entry in either map.
        """
        op = "links"
        if not forward and not backward:
            forward = backward = True

        identity = normalize_identity(note)
        try:
            index = self._load_links()
        except KbaseError as exc:
            return error_result(op, exc)
        if index is None:
            return self._missing_index(op, "link")

        outgoing = index.forward(identity)
        incoming = index.backward(identity)
        data: dict[str, Any] = {
            "note": identity,
            "indexed": outgoing is not None or incoming is not None,
        }
        if forward:
            data["forward"] = _section(outgoing)
        if backward:
            data["backward"] = _section(incoming)

        warnings: list[str] = []
        if not self._vault.has_note(identity):
            warnings.append(f"{identity} is not a note in vault {self._vault.name!r}")
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
