"""Command: build and persist the tag and link indexes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kbase.commands._base import KbaseCommand
from kbase.domain.types import IndexKind

if TYPE_CHECKING:
    from kbase.commands._context import AppContext


@click.command(
    cls=KbaseCommand,
    examples="""\
  kbase index                      # rebuild every index
  kbase index --only tags
  kbase index --only links --only tags
  kbase --vault work index""",
)
@click.option(
    "--only",
    "only",
    multiple=True,
    type=click.Choice([kind.value for kind in IndexKind]),
    help="Only write this index (repeatable).",
)
@click.pass_obj
def index(app: AppContext, only: tuple[str, ...]) -> None:
    """Scan the vault and rebuild its indexes."""
    from kbase.services.index import IndexService

    app.emit(IndexService(app.vault).build(only=only))
