"""Config operations — report what the CLI resolved, add and select vaults.

These operations need no vault, so they are plain functions over
:class:`KbaseSettings` rather than a :class:`BaseService`. ``add_vault``
and ``use_vault`` rewrite the config file; the settings object itself
stays frozen and the next invocation picks the change up.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from kbase.config.writer import read_config_table, write_config_table
from kbase.errors import ConfigError, KbaseError
from kbase.services.base import error_result
from kbase.services.result import ServiceResult

if TYPE_CHECKING:
    from kbase.config.settings import KbaseSettings

log = structlog.get_logger(__name__)

# Vault names become index directory names.
_VAULT_NAME = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


def _vault_items(settings: KbaseSettings) -> list[dict[str, Any]]:
    selected = settings.selected_vault
    items: list[dict[str, Any]] = []
    for name in sorted(settings.vaults):
        path = settings.vaults[name].expanded_path()
        items.append(
            {
                "name": name,
                "path": str(path),
                "active": name == selected,
                "exists": path.is_dir(),
                "index_dir": str(settings.index_dir(name)),
            }
        )
    return items


def show_config(settings: KbaseSettings) -> ServiceResult:
    """Config file location, active vault, and every configured vault."""
    warnings: list[str] = []
    if settings.config_path is None:
        warnings.append(f"No config file found at {settings.config_file}")
    selected = settings.selected_vault
    if selected is not None and selected not in settings.vaults:
        warnings.append(f"Active vault {selected!r} is not configured")

    return ServiceResult(
        ok=True,
        op="config",
        data={
            "config_file": str(settings.config_file),
            "config_exists": settings.config_path is not None,
            "active_vault": selected,
            "vaults": _vault_items(settings),
        },
        warnings=warnings,
    )


def list_vaults(settings: KbaseSettings) -> ServiceResult:
    """Configured vaults, the active one flagged."""
    items = _vault_items(settings)
    return ServiceResult(ok=True, op="vaults", data={"items": items, "total": len(items)})


# ------------------------------------------------------------------
# add / use
# ------------------------------------------------------------------


def _check_vault_name(name: str) -> None:
    if not _VAULT_NAME.fullmatch(name):
        msg = f"Invalid vault name {name!r}: use letters, digits, '.', '_' or '-'"
        raise ConfigError(msg)


def _vault_directory(path: str | Path) -> Path:
    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        msg = f"Path does not exist: {resolved}"
        raise ConfigError(msg)
    if not resolved.is_dir():
        msg = f"Path is not a directory: {resolved}"
        raise ConfigError(msg)
    return resolved


def add_vault(settings: KbaseSettings, name: str, path: str | Path) -> ServiceResult:
    """Register vault *name* at *path* in the config file.

    An existing entry of the same name is replaced. The vault becomes
    active when it is the only one, or when no active vault is set.
    """
    op = "add_vault"
    config_file = settings.config_file
    try:
        _check_vault_name(name)
        vault_path = _vault_directory(path)
        table = read_config_table(config_file)
        vaults = table.setdefault("vaults", {})
        replaced = name in vaults
        vaults[name] = {"path": vault_path.as_posix()}
        if len(vaults) == 1 or not table.get("active_vault"):
            table["active_vault"] = name
        write_config_table(config_file, table)
    except KbaseError as exc:
        return error_result(op, exc)

    log.info("config.vault.added", vault=name, path=str(vault_path), replaced=replaced)
    return ServiceResult(
        ok=True,
        op=op,
        data={
            "name": name,
            "path": str(vault_path),
            "active": table["active_vault"] == name,
            "replaced": replaced,
            "config_file": str(config_file),
        },
    )


def use_vault(settings: KbaseSettings, name: str) -> ServiceResult:
    """Make the configured vault *name* the active one."""
    op = "use_vault"
    config_file = settings.config_file
    try:
        table = read_config_table(config_file)
        vaults = table.get("vaults") or {}
        if name not in vaults:
            available = ", ".join(sorted(vaults)) or "(none)"
            msg = f"Unknown vault {name!r}. Available: {available}"
            raise ConfigError(msg)
        previous = table.get("active_vault")
        table["active_vault"] = name
        write_config_table(config_file, table)
    except KbaseError as exc:
        return error_result(op, exc)

    log.info("config.vault.activated", vault=name, previous=previous)
    return ServiceResult(
        ok=True,
        op=op,
        data={"name": name, "previous": previous, "config_file": str(config_file)},
    )
