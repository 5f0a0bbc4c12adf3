"""Tests for the ``remind`` command group."""

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


def _at(**delta: float) -> str:
    return (datetime.now(UTC) + timedelta(**delta)).strftime("%Y-%m-%dT%H:%M:%S")


@pytest.mark.usefixtures("_isolated_project")
class TestRemindCrud:
    def test_add_and_list(self, cli_runner: CliRunner) -> None:
        task_id = _json(cli_runner, "task", "add", "Pay rent")["data"]["id"]
        late = _json(cli_runner, "remind", "add", task_id, _at(days=2))["data"]
        early = _json(cli_runner, "remind", "add", task_id, _at(days=1))["data"]
        assert early["status"] == "pending"
        assert early["id"].startswith("rem_")

        listing = _json(cli_runner, "remind", "list", task_id)

        assert listing["data"]["count"] == 2
        assert [r["id"] for r in listing["data"]["items"]] == [early["id"], late["id"]]

    def test_add_in_past(self, cli_runner: CliRunner) -> None:
        task_id = _json(cli_runner, "task", "add", "Pay rent")["data"]["id"]
        result = cli_runner.invoke(cli, ["remind", "add", task_id, "2000-01-01 08:00"])
        assert result.exit_code == 1
        assert "Reminder time must be in the future" in result.output

    def test_move_dismiss_delete(self, cli_runner: CliRunner) -> None:
        task_id = _json(cli_runner, "task", "add", "Pay rent")["data"]["id"]
        rem_id = _json(cli_runner, "remind", "add", task_id, _at(days=1))["data"]["id"]

        moved = _json(cli_runner, "remind", "move", rem_id, _at(days=3))
        assert moved["op"] == "update_reminder"

        dismissed = _json(cli_runner, "remind", "dismiss", rem_id)
        assert dismissed["data"]["status"] == "dismissed"

        deleted = _json(cli_runner, "remind", "delete", rem_id)
        assert deleted["data"] == {"id": rem_id}
        assert _json(cli_runner, "remind", "list", task_id)["data"]["count"] == 0


@pytest.mark.usefixtures("_isolated_project")
class TestRemindProcess:
    def test_nothing_due(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "remind", "process")
        assert data["op"] == "process_due_reminders"
        assert data["data"]["processed"] == 0

    def test_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["remind", "process"])
        assert result.exit_code == 0
        assert "processed: 0" in result.output

    def test_watch_rejects_zero_interval(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["remind", "watch", "--interval", "0"])
        assert result.exit_code == 2
