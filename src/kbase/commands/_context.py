"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Vault initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kbase.errors import ConfigError, VaultError
from kbase.output.formatters import OutputSettings, format_result
from kbase.services.result import CONFIG_ERROR, NO_VAULT, ServiceResult

if TYPE_CHECKING:
    from kbase.config.settings import KbaseSettings
    from kbase.infrastructure.vault import Vault


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The vault is opened
    on first use so ``--help``, ``config`` and ``vaults`` work without
    one being configured.
    """

    def __init__(self, settings: KbaseSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from kbase.config.logging import configure_logging
        from kbase.services.timing import set_timing

        configure_logging(verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json)
        set_timing(settings.verbose)

    @property
    def vault(self) -> Vault:
        """The selected vault (opened lazily on first access).

        A missing or unknown vault is reported through :meth:`emit` and
        ends the command with exit code 1.
        """
        if self._vault is None:
            from kbase.infrastructure.vault import Vault

            try:
                name, vault_config = self.settings.resolve_vault()
                self._vault = Vault.open(
                    vault_config.expanded_path(),
                    name,
                    self.settings.index_dir(name),
                )
            except ConfigError as exc:
                self.emit(ServiceResult.failure("open_vault", CONFIG_ERROR, str(exc)))
                raise  # unreachable: emit() exits
            except VaultError as exc:
                self.emit(ServiceResult.failure("open_vault", NO_VAULT, str(exc)))
                raise
        return self._vault

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
