"""Tests for the standalone view commands: inbox, today, upcoming."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from click.testing import CliRunner

from todoctl.cli import cli


def _json(runner: CliRunner, *args: str) -> dict[str, Any]:
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.mark.usefixtures("_isolated_project")
class TestInboxCommand:
    def test_inbox(self, cli_runner: CliRunner) -> None:
        loose = _json(cli_runner, "task", "add", "Call bank")["data"]["id"]
        _json(cli_runner, "task", "add", "Filed", "--project", "proj_home")

        data = _json(cli_runner, "inbox")

        assert data["data"]["count"] == 1
        assert data["data"]["items"][0]["id"] == loose

    def test_inbox_table(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "task", "add", "Call bank")
        result = cli_runner.invoke(cli, ["inbox"])
        assert result.exit_code == 0
        assert "Call bank" in result.output
        assert "1 tasks" in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestTodayCommand:
    def test_overdue_listed(self, cli_runner: CliRunner) -> None:
        late = _json(cli_runner, "task", "add", "Late", "--due", "2020-01-01")["data"]["id"]
        data = _json(cli_runner, "today")
        assert data["data"]["date"] == datetime.now(UTC).date().isoformat()
        assert [t["id"] for t in data["data"]["overdue"]] == [late]

    def test_nothing_due(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["today"])
        assert result.exit_code == 0
        assert "Nothing due." in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestUpcomingCommand:
    def test_groups(self, cli_runner: CliRunner) -> None:
        due = (datetime.now(UTC) + timedelta(days=3)).replace(hour=12, minute=0)
        _json(cli_runner, "task", "add", "Dentist", "--due", due.strftime("%Y-%m-%d %H:%M"))

        data = _json(cli_runner, "upcoming", "--days", "14")

        assert data["data"]["days"] == 14
        assert [g["date"] for g in data["data"]["groups"]] == [due.date().isoformat()]

    def test_invalid_days(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["upcoming", "--days", "10"])
        assert result.exit_code == 2

    def test_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["upcoming"])
        assert result.exit_code == 0
        assert "Nothing scheduled." in result.output
