"""Persist ``config.toml`` changes made by ``kbase add`` and ``kbase use``.

The file is re-read raw rather than through :class:`KbaseSettings`, so
keys kbase does not model survive a rewrite. Writes go through a
``.tmp`` sibling and a rename, the same way index artifacts are written.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from kbase.errors import ConfigError

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def read_config_table(path: Path) -> dict[str, Any]:
    """Return the raw TOML table at *path*, or an empty table if absent.

    Raises:
        ConfigError: If the file exists but is unreadable or not TOML.
    """
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Could not read config {path}: {exc}"
        raise ConfigError(msg) from exc
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc


def write_config_table(path: Path, table: dict[str, Any]) -> None:
    """Serialize *table* to *path* atomically, creating the directory.

    Raises:
        ConfigError: If the directory, temporary file, or rename fails.
    """
    tmp_path = path.with_name(path.name + TMP_SUFFIX)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(tomli_w.dumps(table), encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        msg = f"Could not write config {path}: {exc}"
        raise ConfigError(msg) from exc
    logger.debug("Wrote config %s", path)
