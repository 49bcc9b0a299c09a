"""Command: list domains with note counts and descriptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kbase.commands._base import KbaseCommand
from kbase.domain.types import SortBy

if TYPE_CHECKING:
    from kbase.commands._context import AppContext


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase domains
  kbase domains --sort count""",
)
@click.option(
    "--sort",
    type=click.Choice([s.value for s in SortBy]),
    default=SortBy.NAME.value,
    show_default=True,
    help="Order by domain name or by note count.",
)
@click.pass_obj
def domains(app: AppContext, sort: str) -> None:
    """List the vault's domains (top-level folders)."""
    from kbase.services.notes import NoteService

    app.emit(NoteService(app.vault).domains(sort=sort))
