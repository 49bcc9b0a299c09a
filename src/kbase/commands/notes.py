"""Command: list notes with their titles."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kbase.commands._base import KbaseCommand

if TYPE_CHECKING:
    from kbase.commands._context import AppContext


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase notes
  kbase notes --domain lucene
  kbase notes --tag rust --domain datafusion
  kbase notes --files | xargs wc -l""",
)
@click.option("--domain", default=None, help="Only notes in this domain.")
@click.option("--tag", default=None, help="Only notes carrying this tag (needs the tag index).")
@click.option("--files", is_flag=True, help="Print bare paths, one per line.")
@click.pass_obj
def notes(app: AppContext, domain: str | None, tag: str | None, files: bool) -> None:
    """List notes in the vault."""
    from kbase.services.notes import NoteService

    result = NoteService(app.vault).list_notes(domain=domain, tag=tag)
    if files and result.ok and not app.settings.json_output:
        for item in result.data["items"]:
            click.echo(item["path"])
        return
    app.emit(result)
