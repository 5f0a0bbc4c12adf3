"""Tests for injected clocks and id generators."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from todoctl.domain.ids import validate_id
from todoctl.infrastructure.clock import FixedClock, SystemClock
from todoctl.infrastructure.ids import SequentialIdGenerator, UuidIdGenerator


class TestClocks:
    def test_system_clock_is_utc(self) -> None:
        assert SystemClock().now().tzinfo == UTC

    def test_fixed_clock_advance_and_set(self) -> None:
        clock = FixedClock(datetime(2025, 1, 1, 12))
        assert clock.now() == datetime(2025, 1, 1, 12, tzinfo=UTC)
        assert clock.advance(minutes=30) == datetime(2025, 1, 1, 12, 30, tzinfo=UTC)
        assert clock.advance(timedelta(days=1)) == datetime(2025, 1, 2, 12, 30, tzinfo=UTC)
        clock.set(datetime(2030, 6, 1, tzinfo=UTC))
        assert clock.now() == datetime(2030, 6, 1, tzinfo=UTC)


class TestIdGenerators:
    def test_sequential_per_entity(self) -> None:
        ids = SequentialIdGenerator()
        assert ids.task_id() == "task_000000000001"
        assert ids.task_id() == "task_000000000002"
        assert ids.reminder_id() == "rem_000000000001"
        assert ids.recurrence_rule_id() == "rule_000000000001"
        assert ids.project_id() == "proj_000000000001"
        assert ids.tag_id() == "tag_000000000001"

    def test_uuid_ids_match_patterns(self) -> None:
        ids = UuidIdGenerator()
        assert validate_id(ids.task_id(), "task")
        assert validate_id(ids.reminder_id(), "reminder")
        assert validate_id(ids.recurrence_rule_id(), "recurrence_rule")
        assert validate_id(ids.project_id(), "project")
        assert validate_id(ids.tag_id(), "tag")

    def test_uuid_ids_unique(self) -> None:
        ids = UuidIdGenerator()
        assert len({ids.task_id() for _ in range(200)}) == 200
