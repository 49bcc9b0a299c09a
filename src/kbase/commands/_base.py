"""Click base classes that carry per-command usage examples.

``--help`` stays short; ``--examples`` prints the command's example
invocations and exits. Help output ends with a pointer to ``--examples``
whenever a command has any.
"""

from __future__ import annotations

import inspect
from textwrap import indent
from typing import Any

import click

EXAMPLES_HINT = "Run with --examples to see example invocations."


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag built from the ``examples`` kwarg."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = inspect.cleandoc(examples) if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(indent(self.examples or "", "  "))
        ctx.exit(0)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(EXAMPLES_HINT)


class KbaseCommand(_ExamplesMixin, click.Command):
    """A command accepting ``examples=``."""


class KbaseGroup(_ExamplesMixin, click.Group):
    """A group accepting ``examples=``; subcommands default to KbaseCommand."""

    command_class = KbaseCommand
