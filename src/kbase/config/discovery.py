"""Config file discovery.

The config lives in a per-user directory rather than inside the vault,
because one config names many vaults. ``KBASE_CONFIG_DIR`` relocates it
(tests point it at a temporary directory) and ``--config`` names a file
directly.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "config.toml"
CONFIG_DIR_ENV_VAR = "KBASE_CONFIG_DIR"
CONFIG_DIRNAME = ".kb"
INDEXES_DIRNAME = "indexes"


def config_dir() -> Path:
    """Return ``$KBASE_CONFIG_DIR/.kb`` when set, else ``~/.kb``."""
    base = os.environ.get(CONFIG_DIR_ENV_VAR)
    if base:
        return Path(base).expanduser() / CONFIG_DIRNAME
    return Path.home() / CONFIG_DIRNAME


def find_config(config_path: str | Path | None = None) -> Path | None:
    """Locate the config file.

    An explicit *config_path* wins when it exists. Otherwise
    ``config.toml`` in :func:`config_dir` is used. Returns None if neither
    is a file.
    """
    if config_path:
        p = Path(config_path).expanduser()
        return p if p.is_file() else None

    candidate = config_dir() / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None
