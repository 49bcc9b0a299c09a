"""TagService — queries over the persisted tag index."""

from __future__ import annotations

from collections.abc import Iterable

from kbase.domain.types import SortBy, in_domain
from kbase.errors import KbaseError
from kbase.infrastructure.index import TagIndex
from kbase.services.base import BaseService, error_result
from kbase.services.result import ServiceResult
from kbase.services.timing import timed


def normalize_tag(tag: str) -> str:
    """Accept ``#tag`` as well as ``tag`` from the command line."""
    return tag.strip().lstrip("#")


class TagService(BaseService):
    """Lists tags and the notes carrying them."""

    @timed
    def list_tags(
        self,
        *,
        sort: SortBy | str = SortBy.NAME,
        domains: Iterable[str] | None = None,
    ) -> ServiceResult:
        """All tags with note counts.

        Args:
            sort: ``name`` (ascending) or ``count`` (most used first).
            domains: Only count notes in these domains; tags left with no
                notes are dropped.
        """
        op = "tags"
        domain_list = sorted(set(domains or ()))
        try:
            self._require_domains(domain_list)
            index = self._load_tags()
        except KbaseError as exc:
            return error_result(op, exc)
        if index is None:
            return self._missing_index(op, "tag")

        if domain_list:
            index = TagIndex(index.filter_by_domains(set(domain_list)))

        pairs = index.sorted_by_count() if SortBy(sort) is SortBy.COUNT else index.sorted_by_name()
        items = [{"tag": tag, "count": count} for tag, count in pairs]
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": items, "total": len(items), "sort": str(SortBy(sort)), "domains": domain_list},
        )

    @timed
    def notes_with_tag(self, tag: str, *, domain: str | None = None) -> ServiceResult:
        """Notes carrying *tag*, optionally restricted to one domain."""
        op = "tagged_notes"
        try:
            if domain is not None:
                self._require_domains([domain])
            index = self._load_tags()
        except KbaseError as exc:
            return error_result(op, exc)
        if index is None:
            return self._missing_index(op, "tag")

        name = normalize_tag(tag)
        paths = index.notes_with_tag(name)
        if domain is not None:
            paths = [path for path in paths if in_domain(path, domain)]
        return ServiceResult(
            ok=True,
            op=op,
            data={"tag": name, "domain": domain, "items": [{"path": p} for p in paths]},
        )
