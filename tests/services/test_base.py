"""Tests for BaseService and exception translation."""

from pathlib import Path

import pytest

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
from kbase.infrastructure.vault import Vault
from kbase.services.base import BaseService, error_result
from kbase.services.index import IndexService
from kbase.services.links import LinkService
from kbase.services.notes import NoteService
from kbase.services.tags import TagService


class TestBaseService:
    def test_vault_stored(self, vault: Vault) -> None:
        assert BaseService(vault)._vault is vault

    def test_missing_index_result(self, vault: Vault) -> None:
        result = BaseService(vault)._missing_index("tags", "tag")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INDEX_MISSING"
        assert "kbase index" in result.error.message
        assert result.error.detail["index_dir"] == str(vault.index_dir)

    def test_load_before_build(self, vault: Vault) -> None:
        service = BaseService(vault)
        assert service._load_tags() is None
        assert service._load_links() is None


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (NoteNotFoundError("a.md"), "NOT_FOUND"),
        (DomainNotFoundError("x"), "NOT_FOUND"),
        (IndexCorruptError(Path("tags.json"), "bad"), "INDEX_CORRUPT"),
        (NoteReadError("a.md", "bad bytes"), "IO_ERROR"),
        (IndexWriteError(Path("tags.json"), "disk full"), "IO_ERROR"),
        (ParseError("boom", identity="a.md"), "PARSE_ERROR"),
        (VaultError("gone"), "NO_VAULT"),
        (ConfigError("bad"), "CONFIG_ERROR"),
        (KbaseError("other"), "IO_ERROR"),
    ],
)
def test_error_result_codes(exc: KbaseError, code: str) -> None:
    result = error_result("op", exc)
    assert not result.ok
    assert result.error is not None
    assert result.error.code == code
    assert result.error.message == str(exc)


@pytest.mark.parametrize("service_cls", [IndexService, TagService, LinkService, NoteService])
def test_services_extend_base(service_cls: type, vault: Vault) -> None:
    assert issubclass(service_cls, BaseService)
    assert service_cls(vault)._vault is vault
