"""IndexService — one pass over the vault builds both indexes.

Each note is read and parsed exactly once. Its tags feed the tag
accumulator and its references are resolved against the full set of
known identities, feeding the link accumulator. Unresolved references
are counted and logged, never raised.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from kbase.domain.parser import MarkdownParser, get_parser
from kbase.domain.resolve import is_document_target, resolve_target, strip_document_extension
from kbase.domain.types import IndexKind
from kbase.errors import KbaseError, ParseError
from kbase.infrastructure.index import LinkIndex, LinkIndexBuilder, TagIndex, TagIndexBuilder
from kbase.services.base import BaseService, error_result
from kbase.services.result import ServiceResult
from kbase.services.timing import stage, timed

if TYPE_CHECKING:
    from kbase.infrastructure.vault import Vault

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UnresolvedLink:
    """A reference whose target matched no note."""

    source: str
    target: str
    line: int


@dataclass
class IndexBuild:
    """Everything a full scan produces."""

    tags: TagIndex
    links: LinkIndex
    documents: int = 0
    unresolved: list[UnresolvedLink] = field(default_factory=list)

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved)


def build_indexes(vault: Vault, parser: MarkdownParser | None = None) -> IndexBuild:
    """Scan every note of *vault* once and assemble both indexes.

    Raises:
        NoteNotFoundError: If a note disappears mid-scan.
        NoteReadError: If a note cannot be read.
        ParseError: If a note cannot be parsed; names the note.
    """
    parser = parser or get_parser()
    notes = vault.all_notes()
    known = {note.identity for note in notes}

    tag_builder = TagIndexBuilder()
    link_builder = LinkIndexBuilder()
    unresolved: list[UnresolvedLink] = []

    for note in notes:
        content = vault.read_note(note.identity)
        try:
            document = parser.parse(content)
        except ParseError as exc:
            raise ParseError(exc.message, identity=note.identity) from exc

        tag_builder.add(note.identity, document.tags)

        for ref in document.references:
            if not ref.target or not is_document_target(ref.target):
                continue
            target = strip_document_extension(ref.target)
            if not target:
                continue
            resolved = resolve_target(target, note.identity, known)
            if resolved is None:
                unresolved.append(UnresolvedLink(note.identity, ref.target, ref.line))
                log.debug("index.unresolved", source=note.identity, target=ref.target, line=ref.line)
                continue
            link_builder.add(note.identity, resolved)

    return IndexBuild(
        tags=tag_builder.build(),
        links=link_builder.build(),
        documents=len(notes),
        unresolved=unresolved,
    )


class IndexService(BaseService):
    """Builds and persists the tag and link indexes."""

    @timed
    def build(self, only: Iterable[IndexKind | str] = ()) -> ServiceResult:
        """Rebuild the indexes named in *only* (all of them when empty).

        The scan always covers both indexes; *only* limits what is written.
        """
        kinds = {IndexKind(kind) for kind in only} or set(IndexKind)
        index_dir = self._vault.index_dir
        log.info("index.build.start", vault=self._vault.name, kinds=sorted(kinds))

        try:
            with stage("scan") as counts:
                build = build_indexes(self._vault)
                counts["documents"] = build.documents
                counts["unresolved"] = build.unresolved_count

            data: dict[str, object] = {
                "vault": self._vault.name,
                "index_dir": str(index_dir),
                "documents": build.documents,
            }

            if IndexKind.TAGS in kinds:
                with stage("save_tags"):
                    tags_path = build.tags.save(index_dir)
                data["tags"] = {"count": len(build.tags), "path": str(tags_path)}

            if IndexKind.LINKS in kinds:
                with stage("save_links"):
                    forward_path, backward_path = build.links.save(index_dir)
                data["links"] = {
                    "count": build.links.link_count(),
                    "unresolved": build.unresolved_count,
                    "forward_path": str(forward_path),
                    "backward_path": str(backward_path),
                }
        except KbaseError as exc:
            return error_result("index", exc)

        warnings: list[str] = []
        if IndexKind.LINKS in kinds and build.unresolved:
            warnings.append(f"{build.unresolved_count} unresolved links (broken)")

        log.info(
            "index.build.done",
            vault=self._vault.name,
            documents=build.documents,
            unresolved=build.unresolved_count,
        )
        return ServiceResult(ok=True, op="index", data=data, warnings=warnings)
