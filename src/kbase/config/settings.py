"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``KBASE_*`` prefix (``KBASE_VAULT`` selects a vault)
  3. TOML file    — ``config.toml`` in the config directory
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reads the file located by :func:`kbase.config.discovery.find_config`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from kbase.config.discovery import CONFIG_FILENAME, INDEXES_DIRNAME, config_dir, find_config
from kbase.config.models import IndexConfig, VaultConfig
from kbase.errors import ConfigError


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the user's ``config.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class KbaseSettings(BaseSettings):
    """Unified settings for the kbase CLI.

    Merges CLI flags, environment variables, the TOML config, and
    code-baked defaults into a single frozen object. Stored on the
    ``AppContext`` in ``click.Context.obj``.

    Attributes:
        config_root: Directory holding the config and default indexes.
        config_path: The TOML file that was read, or None if none exists.
        config_override: The file named by ``--config``, whether or not it
            exists yet; ``kbase add`` creates it.
        vault: Vault name override from ``--vault`` / ``KBASE_VAULT``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "KBASE_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths (not in TOML) ---
    config_root: Path = Field(default_factory=config_dir)
    config_path: Path | None = None
    config_override: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    vault: str | None = None

    # --- TOML ---
    active_vault: str | None = None
    vaults: dict[str, VaultConfig] = Field(default_factory=dict)
    index: IndexConfig = Field(default_factory=IndexConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        vault: str | None = None,
        **cli_flags: Any,
    ) -> KbaseSettings:
        """Construct settings from a CLI invocation.

        Locates ``config.toml`` (or the explicit *config_path*) and merges
        CLI flags as highest-priority overrides. A *vault* of None leaves
        ``KBASE_VAULT`` and ``active_vault`` in charge.

        Raises:
            ConfigError: If the TOML file cannot be parsed or validated.
        """
        toml_path = find_config(config_path)
        if vault is not None:
            cli_flags["vault"] = vault
        if config_path:
            cli_flags["config_override"] = Path(config_path).expanduser()

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            msg = f"Invalid config in {toml_path}: {exc}"
            raise ConfigError(msg) from exc
        finally:
            _tls.toml_path = None

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def config_file(self) -> Path:
        """The file that was read, or where the config would be looked up."""
        return self.config_path or self.config_override or self.config_root / CONFIG_FILENAME

    @property
    def selected_vault(self) -> str | None:
        return self.vault or self.active_vault

    def resolve_vault(self) -> tuple[str, VaultConfig]:
        """Return ``(name, config)`` of the vault commands should use.

        Raises:
            ConfigError: If no vault is configured, none is selected, or the
                selected name is unknown.
        """
        if not self.vaults:
            msg = f"No vaults configured. Run `kbase add NAME PATH` to add one to {self.config_file}"
            raise ConfigError(msg)

        name = self.selected_vault
        if name is None:
            msg = "No active vault. Run `kbase use NAME` or pass --vault NAME"
            raise ConfigError(msg)

        vault_config = self.vaults.get(name)
        if vault_config is None:
            available = ", ".join(sorted(self.vaults))
            msg = f"Unknown vault {name!r}. Available: {available}"
            raise ConfigError(msg)
        return name, vault_config

    def index_dir(self, vault_name: str) -> Path:
        """Directory holding the persisted indexes of *vault_name*."""
        root = self.index.directory
        if root is None:
            root = self.config_root / INDEXES_DIRNAME
        return root.expanduser() / vault_name
