"""Command: show forward links and backlinks of a note."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kbase.commands._base import KbaseCommand

if TYPE_CHECKING:
    from kbase.commands._context import AppContext


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase links lucene/search-flow.md
  kbase links lucene/search-flow --backward
  kbase --json links glossary.md --forward""",
)
@click.argument("note")
@click.option("--forward", is_flag=True, help="Only notes this note links to.")
@click.option("--backward", is_flag=True, help="Only notes linking to this note.")
@click.pass_obj
def links(app: AppContext, note: str, forward: bool, backward: bool) -> None:
    """Show the links of NOTE (both directions by default)."""
    from kbase.services.links import LinkService

    app.emit(LinkService(app.vault).links(note, forward=forward, backward=backward))
