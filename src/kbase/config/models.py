"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``config.toml`` only lists the
vaults and, optionally, an index directory override.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class VaultConfig(BaseModel):
    """A ``[vaults.<name>]`` table."""

    model_config = {"frozen": True}

    path: Path

    def expanded_path(self) -> Path:
        return self.path.expanduser()


class IndexConfig(BaseModel):
    """[index] section."""

    model_config = {"frozen": True}

    # Root under which per-vault index directories live; None means
    # "<config dir>/indexes".
    directory: Path | None = None
