"""Tests for the root todoctl CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from todoctl import __version__
from todoctl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "todoctl" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize(
    "name", ["task", "project", "tag", "recur", "remind", "inbox", "today", "upcoming", "search"]
)
def test_commands_registered(cli_runner: CliRunner, name: str) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert name in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json", "--sync"])
def test_global_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/todoctl-test.toml", "--version"])
    assert result.exit_code == 0


@pytest.mark.usefixtures("_isolated_project")
def test_config_file_selects_workspace(cli_runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "todoctl.toml").write_text('[workspace]\nworkspace_id = "home"\n')
    result = cli_runner.invoke(cli, ["--json", "task", "add", "Configured"])
    assert result.exit_code == 0, result.output
    assert '"workspace_id": "home"' in result.stdout


@pytest.mark.usefixtures("_isolated_project")
def test_memory_backend_via_env(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TODOCTL_STORE__BACKEND", "memory")
    result = cli_runner.invoke(cli, ["task", "add", "Ephemeral"])
    assert result.exit_code == 0
    assert not (tmp_path / ".todoctl" / "todoctl.db").exists()


@pytest.mark.usefixtures("_isolated_project")
def test_missing_config_file_is_an_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "absent.toml"), "inbox"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


@pytest.mark.usefixtures("_isolated_project")
def test_workspace_flag_scopes_commands(cli_runner: CliRunner) -> None:
    added = cli_runner.invoke(cli, ["-q", "-w", "team", "task", "add", "Shared"])
    assert added.exit_code == 0, added.output
    task_id = added.stdout.strip()

    assert task_id in cli_runner.invoke(cli, ["-q", "-w", "team", "inbox"]).stdout
    assert task_id not in cli_runner.invoke(cli, ["-q", "inbox"]).stdout


@pytest.mark.usefixtures("_isolated_project")
def test_output_flags_from_env(cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODOCTL_JSON_OUTPUT", "true")
    result = cli_runner.invoke(cli, ["inbox"])
    assert result.exit_code == 0
    assert '"op": "inbox"' in result.stdout


@pytest.mark.usefixtures("_isolated_project")
def test_walk_up_from_subdirectory_finds_database(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    added = cli_runner.invoke(cli, ["-q", "task", "add", "Rooted"])
    assert added.exit_code == 0, added.output
    nested = tmp_path / "notes" / "2025"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    assert added.stdout.strip() in cli_runner.invoke(cli, ["-q", "inbox"]).stdout
