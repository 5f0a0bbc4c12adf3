"""Tests for the shared Click types and the --examples mixin."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import click
import pytest
from click.testing import CliRunner

from todoctl.commands._base import TodoGroup, UtcDateTime

NOW = datetime(2025, 6, 15, 9, 30, tzinfo=UTC)


@pytest.fixture
def dt() -> UtcDateTime:
    return UtcDateTime(now=lambda: NOW)


class TestUtcDateTime:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2025-03-01", datetime(2025, 3, 1, tzinfo=UTC)),
            ("2025-03-01 08:00", datetime(2025, 3, 1, 8, 0, tzinfo=UTC)),
            ("2025-03-01T08:00", datetime(2025, 3, 1, 8, 0, tzinfo=UTC)),
            ("2025-03-01T08:00:30", datetime(2025, 3, 1, 8, 0, 30, tzinfo=UTC)),
        ],
    )
    def test_absolute_is_utc(self, dt: UtcDateTime, raw: str, expected: datetime) -> None:
        assert dt.convert(raw, None, None) == expected

    @pytest.mark.parametrize(
        ("raw", "delta"),
        [
            ("+45m", timedelta(minutes=45)),
            ("+2h", timedelta(hours=2)),
            ("+3d", timedelta(days=3)),
            ("+1w", timedelta(weeks=1)),
            ("+2H", timedelta(hours=2)),
        ],
    )
    def test_relative_offsets(self, dt: UtcDateTime, raw: str, delta: timedelta) -> None:
        assert dt.convert(raw, None, None) == NOW + delta

    def test_today_and_tomorrow_are_midnight(self, dt: UtcDateTime) -> None:
        assert dt.convert("today", None, None) == datetime(2025, 6, 15, tzinfo=UTC)
        assert dt.convert("Tomorrow", None, None) == datetime(2025, 6, 16, tzinfo=UTC)

    def test_aware_datetime_passes_through(self, dt: UtcDateTime) -> None:
        plus_two = datetime(2025, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert dt.convert(plus_two, None, None) is plus_two

    @pytest.mark.parametrize("raw", ["next week", "2025-13-01", "+2y", "-1d", ""])
    def test_rejects_garbage(self, dt: UtcDateTime, raw: str) -> None:
        with pytest.raises(click.BadParameter, match="is not a date"):
            dt.convert(raw, None, None)


class TestExamplesMixin:
    def test_group_and_command_examples(self) -> None:
        @click.group(cls=TodoGroup, examples="  demo run")
        def demo() -> None:
            """Demo group."""

        @demo.command(examples="  demo run --fast")
        def run() -> None:
            """Run it."""

        runner = CliRunner()
        group_out = runner.invoke(demo, ["--examples"])
        assert group_out.exit_code == 0
        assert group_out.output.startswith("Examples for 'demo':")

        cmd_out = runner.invoke(demo, ["run", "--examples"])
        assert "demo run --fast" in cmd_out.output

        help_out = runner.invoke(demo, ["run", "--help"])
        assert "Run with --examples for usage examples." in help_out.output

    def test_without_examples_no_flag(self) -> None:
        @click.group(cls=TodoGroup)
        def bare() -> None:
            """Bare group."""

        result = CliRunner().invoke(bare, ["--examples"])
        assert result.exit_code == 2
        assert "No such option" in result.output
