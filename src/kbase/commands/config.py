"""Commands: show the configuration, list, add and select vaults."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kbase.commands._base import KbaseCommand

if TYPE_CHECKING:
    from kbase.commands._context import AppContext


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase config
  kbase --config ./kb.toml config
  KBASE_VAULT=work kbase config""",
)
@click.pass_obj
def config(app: AppContext) -> None:
    """Show the config file location, active vault, and vaults."""
    from kbase.services.config import show_config

    app.emit(show_config(app.settings))


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase vaults
  kbase -q vaults""",
)
@click.pass_obj
def vaults(app: AppContext) -> None:
    """List configured vaults; the active one is starred."""
    from kbase.services.config import list_vaults

    app.emit(list_vaults(app.settings))


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase add notes ~/notes
  kbase --config ./kb.toml add work /srv/work-notes""",
)
@click.argument("name")
@click.argument("path", type=click.Path(file_okay=False, path_type=str))
@click.pass_obj
def add(app: AppContext, name: str, path: str) -> None:
    """Add vault NAME at PATH; the first vault added becomes active."""
    from kbase.services.config import add_vault

    app.emit(add_vault(app.settings, name, path))


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase use work
  kbase vaults""",
)
@click.argument("name")
@click.pass_obj
def use(app: AppContext, name: str) -> None:
    """Make the configured vault NAME the active one."""
    from kbase.services.config import use_vault

    app.emit(use_vault(app.settings, name))
