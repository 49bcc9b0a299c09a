"""Shared pytest fixtures and test helpers for kbase tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from kbase.infrastructure.vault import Vault
from kbase.services.timing import set_timing

VAULT_NAME = "test"


def write_note(root: Path, identity: str, content: str) -> Path:
    """Write *content* to the vault-relative *identity*, creating folders."""
    path = root / identity
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the config directory at a temp dir and clear vault overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("KBASE_CONFIG_DIR", str(home))
    monkeypatch.delenv("KBASE_VAULT", raising=False)


@pytest.fixture(autouse=True)
def _reset_timing() -> Generator[None]:
    """``-v`` switches timing on for the whole context; undo it per test."""
    yield
    set_timing(False)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None]:
    """AppContext reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    kbase_level = logging.getLogger("kbase").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("kbase").setLevel(kbase_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """The ``.kb`` directory the isolated config points at."""
    return tmp_path / "home" / ".kb"


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Temporary vault with two domains sharing a note name.

    This is the single source of truth for the base vault layout::

        a/one.md   "#x [[two]]"
        a/two.md   "no tags"
        b/two.md   "no tags"
    """
    root = tmp_path / "vault"
    write_note(root, "a/one.md", "#x [[two]]")
    write_note(root, "a/two.md", "no tags")
    write_note(root, "b/two.md", "no tags")
    return root


@pytest.fixture
def index_dir(tmp_path: Path) -> Path:
    return tmp_path / "indexes" / VAULT_NAME


@pytest.fixture
def vault(vault_root: Path, index_dir: Path) -> Vault:
    """A Vault over :func:`vault_root` with a temp index directory."""
    return Vault.open(vault_root, VAULT_NAME, index_dir)


@pytest.fixture
def configured(vault_root: Path, config_dir: Path) -> Path:
    """Write a ``config.toml`` whose active vault is :func:`vault_root`.

    Use via ``@pytest.mark.usefixtures("configured")`` on command test
    classes. Returns the config file path.
    """
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "config.toml"
    config_file.write_text(
        f'active_vault = "{VAULT_NAME}"\n\n'
        f"[vaults.{VAULT_NAME}]\n"
        f'path = "{vault_root.as_posix()}"\n',
        encoding="utf-8",
    )
    return config_file
