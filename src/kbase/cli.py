"""Root CLI group for kbase with global flags and command registration."""

from __future__ import annotations

import click

from kbase import __version__
from kbase.commands import register_commands
from kbase.commands._base import KbaseGroup
from kbase.commands._context import AppContext
from kbase.config.settings import KbaseSettings
from kbase.errors import ConfigError


@click.group(
    cls=KbaseGroup,
    invoke_without_command=True,
    examples="""\
  kbase index
  kbase tags --sort count
  kbase notes --domain lucene
  kbase --vault work links lucene/codecs.md""",
)
@click.version_option(version=__version__, prog_name="kbase")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--vault", default=None, help="Use this configured vault instead of the active one.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    vault: str | None,
) -> None:
    """kbase — tag and link indexes for a vault of Markdown notes."""
    ctx.ensure_object(dict)
    try:
        settings = KbaseSettings.from_cli(
            config_path=config_path,
            vault=vault,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
