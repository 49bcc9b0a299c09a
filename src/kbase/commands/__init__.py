"""Subcommand modules for kbase.

Provides register_commands() which uses deferred imports to keep
``kbase --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    # --- Index ---
    from kbase.commands.index import index

    cli.add_command(index)

    # --- Queries ---
    from kbase.commands.domains import domains
    from kbase.commands.links import links
    from kbase.commands.notes import notes
    from kbase.commands.read import read
    from kbase.commands.tags import tags

    cli.add_command(tags)
    cli.add_command(links)
    cli.add_command(notes)
    cli.add_command(domains)
    cli.add_command(read)

    # --- Config ---
    from kbase.commands.config import add, config, use, vaults

    cli.add_command(config)
    cli.add_command(vaults)
    cli.add_command(add)
    cli.add_command(use)
