"""Command: print a note or its heading outline."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kbase.commands._base import KbaseCommand

if TYPE_CHECKING:
    from kbase.commands._context import AppContext


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase read lucene/search-flow.md
  kbase read lucene/search-flow --outline
  kbase read glossary.md --line-numbers
  kbase read lucene/codecs.md --outline --line-numbers""",
)
@click.argument("path")
@click.option("--outline", is_flag=True, help="Show only the heading outline.")
@click.option("-n", "--line-numbers", is_flag=True, help="Prefix lines with their numbers.")
@click.pass_obj
def read(app: AppContext, path: str, outline: bool, line_numbers: bool) -> None:
    """Print the note at PATH (relative to the vault root)."""
    from kbase.services.notes import NoteService

    app.emit(NoteService(app.vault).read(path, outline=outline, line_numbers=line_numbers))
