"""Command: list tags with note counts."""

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
  kbase tags
  kbase tags --sort count
  kbase tags --domain lucene --domain datafusion
  kbase tags --tag rust                # notes carrying #rust
  kbase --json tags""",
)
@click.option(
    "--sort",
    type=click.Choice([s.value for s in SortBy]),
    default=SortBy.NAME.value,
    show_default=True,
    help="Order by tag name or by note count.",
)
@click.option("--domain", "domains", multiple=True, help="Only count notes in this domain.")
@click.option("--tag", default=None, help="List the notes carrying this tag instead.")
@click.pass_obj
def tags(app: AppContext, sort: str, domains: tuple[str, ...], tag: str | None) -> None:
    """List tags from the tag index."""
    from kbase.services.tags import TagService

    svc = TagService(app.vault)
    if tag is not None:
        if len(domains) > 1:
            raise click.UsageError("--tag accepts at most one --domain")
        domain = domains[0] if domains else None
        app.emit(svc.notes_with_tag(tag, domain=domain))
    else:
        app.emit(svc.list_tags(sort=sort, domains=domains or None))
