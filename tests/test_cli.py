"""Tests for the root kbase CLI."""

from pathlib import Path

from click.testing import CliRunner

from kbase import __version__
from kbase.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "kbase" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Vault selection ---


def test_no_config(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["index"])
    assert result.exit_code == 1
    assert "No vaults configured" in result.stderr


def test_unknown_vault(cli_runner: CliRunner, configured: Path) -> None:
    result = cli_runner.invoke(cli, ["--vault", "nope", "tags"])
    assert result.exit_code == 1
    assert "Unknown vault 'nope'" in result.stderr


def test_vault_env_var(cli_runner: CliRunner, configured: Path) -> None:
    result = cli_runner.invoke(cli, ["tags"], env={"KBASE_VAULT": "nope"})
    assert result.exit_code == 1
    assert "Unknown vault 'nope'" in result.stderr


def test_missing_vault_directory(cli_runner: CliRunner, configured: Path, tmp_path: Path) -> None:
    configured.write_text(f'active_vault = "gone"\n[vaults.gone]\npath = "{(tmp_path / "gone").as_posix()}"\n')
    result = cli_runner.invoke(cli, ["--json", "notes"])
    assert result.exit_code == 1
    assert '"NO_VAULT"' in result.stderr


def test_invalid_toml(cli_runner: CliRunner, configured: Path) -> None:
    configured.write_text("[vaults\n")
    result = cli_runner.invoke(cli, ["tags"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.stderr
