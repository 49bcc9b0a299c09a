"""BaseService — abstract foundation for all kbase services.

Every service receives a :class:`Vault` at construction time. The Vault
provides note enumeration and content; the persisted indexes live in
``vault.index_dir``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from kbase.errors import (
    ConfigError,
    DomainNotFoundError,
    IndexCorruptError,
    IndexWriteError,
    KbaseError,
    NoteNotFoundError,
    NoteReadError,
    ParseError,
    VaultError,
)
from kbase.infrastructure.index import LinkIndex, TagIndex
from kbase.services.result import (
    CONFIG_ERROR,
    INDEX_CORRUPT,
    INDEX_MISSING,
    IO_ERROR,
    NO_VAULT,
    NOT_FOUND,
    PARSE_ERROR,
    ServiceResult,
)

if TYPE_CHECKING:
    from kbase.infrastructure.vault import Vault

logger = logging.getLogger(__name__)

_ERROR_CODES: tuple[tuple[type[KbaseError], str], ...] = (
    (NoteNotFoundError, NOT_FOUND),
    (DomainNotFoundError, NOT_FOUND),
    (IndexCorruptError, INDEX_CORRUPT),
    (NoteReadError, IO_ERROR),
    (IndexWriteError, IO_ERROR),
    (ParseError, PARSE_ERROR),
    (VaultError, NO_VAULT),
    (ConfigError, CONFIG_ERROR),
)


def error_result(op: str, exc: KbaseError) -> ServiceResult:
    """Translate a kbase exception into an ``ok=False`` result."""
    code = next((c for kind, c in _ERROR_CODES if isinstance(exc, kind)), IO_ERROR)
    logger.debug("%s failed: %s", op, exc)
    return ServiceResult.failure(op, code, str(exc))


class BaseService:
    """Abstract base for all service-layer classes.

    Subclasses implement read or build operations against the vault.

    Usage::

        class TagService(BaseService):
            def list_tags(self, ...) -> ServiceResult:
                index = self._load_tags()
                ...
    """

    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    def _missing_index(self, op: str, kind: str) -> ServiceResult:
        return ServiceResult.failure(
            op,
            INDEX_MISSING,
            f"No {kind} index found. Run `kbase index` to build it first.",
            index_dir=str(self._vault.index_dir),
        )

    def _load_tags(self) -> TagIndex | None:
        """The persisted tag index, or None if it was never built.

        Raises IndexCorruptError if the artifact is malformed.
        """
        if not TagIndex.exists(self._vault.index_dir):
            return None
        return TagIndex.load(self._vault.index_dir)

    def _load_links(self) -> LinkIndex | None:
        """The persisted link index, or None if it was never built."""
        if not LinkIndex.exists(self._vault.index_dir):
            return None
        return LinkIndex.load(self._vault.index_dir)

    def _require_domains(self, domains: Iterable[str]) -> None:
        """Raise DomainNotFoundError for the first name that is not a domain."""
        for name in domains:
            if not self._vault.has_domain(name):
                raise DomainNotFoundError(name)
