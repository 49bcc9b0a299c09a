"""Exception hierarchy shared by the domain, infrastructure and service layers.

Services catch these and translate them into ``ServiceResult`` errors;
nothing below the service layer reports errors any other way.
"""

from __future__ import annotations

from pathlib import Path


class KbaseError(Exception):
    """Base class for all kbase errors."""


class ConfigError(KbaseError):
    """Missing config file, invalid TOML, or an unknown vault name."""


class VaultError(KbaseError):
    """The configured vault path is missing or not a directory."""


class NoteNotFoundError(KbaseError):
    """A note was requested by identity but does not exist."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"note not found: {identity}")


class NoteReadError(KbaseError):
    """A note exists but could not be read or decoded."""

    def __init__(self, identity: str, reason: str) -> None:
        self.identity = identity
        self.reason = reason
        super().__init__(f"could not read {identity}: {reason}")


class ParseError(KbaseError):
    """Raised when document content cannot be structurally parsed."""

    def __init__(self, message: str, identity: str | None = None) -> None:
        self.identity = identity
        self.message = message
        prefix = f"{identity}: " if identity else ""
        super().__init__(f"{prefix}{message}")


class IndexCorruptError(KbaseError):
    """An index artifact exists but cannot be deserialized or is inconsistent."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class IndexWriteError(KbaseError):
    """Writing or renaming an index artifact failed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"could not write {path}: {reason}")


class DomainNotFoundError(KbaseError):
    """A domain was named that has no folder in the vault."""

    def __init__(self, domain: str) -> None:
        self.domain = domain
        super().__init__(f"domain not found: {domain}")
