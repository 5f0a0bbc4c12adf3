"""Contract tests run against both the in-memory and SQLite repositories."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from tests.conftest import NOW
from todoctl.domain.lifecycle import ReminderStatus, TaskStatus
from todoctl.domain.project import Project, create_project
from todoctl.domain.recurrence import (
    RecurrenceRule,
    create_recurrence_rule,
    plan_rule_removal,
    plan_rule_replacement,
)
from todoctl.domain.reminder import Reminder, create_reminder
from todoctl.domain.result import Ok
from todoctl.domain.tag import Tag, create_tag
from todoctl.domain.task import Task, create_task
from todoctl.infrastructure.database.schema import task_tags
from todoctl.infrastructure.repositories.base import TaskSearchFilters
from todoctl.infrastructure.repositories.sql import from_db_time, to_db_time
from todoctl.infrastructure.store import Store


@pytest.fixture(params=["memory", "sqlite"])
def backend(request: pytest.FixtureRequest) -> Store:
    name = "store" if request.param == "memory" else "sql_store"
    return request.getfixturevalue(name)


def _task(n: int, workspace: str = "ws_1", **overrides: object) -> Task:
    result = create_task(
        f"Task {n}",
        NOW + timedelta(seconds=n),
        "user_1",  # type: ignore[arg-type]
        workspace,  # type: ignore[arg-type]
        task_id=f"task_{n:012x}",  # type: ignore[arg-type]
    )
    assert isinstance(result, Ok)
    return result.value.model_copy(update=overrides)


def _reminder(n: int, task: Task, remind_at_offset: timedelta) -> Reminder:
    result = create_reminder(
        task.id,
        task.workspace_id,
        NOW + remind_at_offset,
        NOW - timedelta(days=30),
        reminder_id=f"rem_{n:012x}",  # type: ignore[arg-type]
    )
    assert isinstance(result, Ok)
    return result.value


def _project(n: int, workspace: str = "ws_1", **overrides: object) -> Project:
    result = create_project(
        f"Project {n}",
        NOW + timedelta(minutes=n),
        workspace,  # type: ignore[arg-type]
        project_id=f"proj_{n:012x}",  # type: ignore[arg-type]
    )
    assert isinstance(result, Ok)
    return result.value.model_copy(update=overrides)


def _tag(n: int, name: str, workspace: str = "ws_1") -> Tag:
    result = create_tag(
        name,
        NOW,
        workspace,  # type: ignore[arg-type]
        tag_id=f"tag_{n:012x}",  # type: ignore[arg-type]
        color="red",
    )
    assert isinstance(result, Ok)
    return result.value


def _rule(n: int, **kwargs: object) -> RecurrenceRule:
    result = create_recurrence_rule(
        "weekly", NOW, rule_id=f"rule_{n:012x}", **kwargs  # type: ignore[arg-type]
    )
    assert isinstance(result, Ok)
    return result.value


class TestTaskRepository:
    def test_round_trip(self, backend: Store) -> None:
        task = _task(
            1,
            notes="n",
            project_id="proj_1",
            due_at=NOW + timedelta(days=1),
            tag_ids=("b", "a"),
        )
        backend.tasks.save(task)
        assert backend.tasks.find_by_id(task.id) == task

    def test_save_overwrites(self, backend: Store) -> None:
        task = _task(1, tag_ids=("a", "b"))
        backend.tasks.save(task)
        backend.tasks.save(task.model_copy(update={"title": "Renamed", "tag_ids": ("c",)}))
        found = backend.tasks.find_by_id(task.id)
        assert found is not None
        assert found.title == "Renamed"
        assert found.tag_ids == ("c",)

    def test_missing(self, backend: Store) -> None:
        assert backend.tasks.find_by_id("task_ffffffffffff") is None  # type: ignore[arg-type]

    def test_soft_deleted_hidden(self, backend: Store) -> None:
        task = _task(1, deleted_at=NOW, due_at=NOW)
        backend.tasks.save(task)
        assert backend.tasks.find_by_id(task.id) is None
        assert backend.tasks.find_inbox("ws_1") == []  # type: ignore[arg-type]
        assert backend.tasks.find_due_on_or_before("ws_1", NOW) == []  # type: ignore[arg-type]

    def test_hard_delete(self, backend: Store) -> None:
        task = _task(1, tag_ids=("a",))
        backend.tasks.save(task)
        backend.tasks.delete(task.id)
        assert backend.tasks.find_by_id(task.id) is None

    def test_save_all(self, backend: Store) -> None:
        backend.tasks.save_all([_task(1), _task(2)])
        assert backend.tasks.find_by_id("task_000000000001") is not None  # type: ignore[arg-type]
        assert backend.tasks.find_by_id("task_000000000002") is not None  # type: ignore[arg-type]

    def test_inbox(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(2),
                _task(1),
                _task(3, project_id="proj_1"),
                _task(4, status=TaskStatus.COMPLETED),
                _task(5, workspace="ws_2"),
            ]
        )
        inbox = backend.tasks.find_inbox("ws_1")  # type: ignore[arg-type]
        assert [t.id for t in inbox] == ["task_000000000001", "task_000000000002"]

    def test_due_on_or_before(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(1, due_at=NOW + timedelta(hours=2)),
                _task(2, due_at=NOW - timedelta(days=1)),
                _task(3, due_at=NOW + timedelta(days=2)),
                _task(4),
            ]
        )
        found = backend.tasks.find_due_on_or_before("ws_1", NOW + timedelta(hours=2))  # type: ignore[arg-type]
        assert [t.id for t in found] == ["task_000000000002", "task_000000000001"]

    def test_equal_due_dates_order_by_id(self, backend: Store) -> None:
        backend.tasks.save_all(
            [_task(3, due_at=NOW), _task(1, due_at=NOW), _task(2, due_at=NOW), _task(4)]
        )
        found = backend.tasks.find_due_on_or_before("ws_1", NOW)  # type: ignore[arg-type]
        assert [t.id for t in found] == [
            "task_000000000001",
            "task_000000000002",
            "task_000000000003",
        ]

    def test_due_between_is_inclusive(self, backend: Store) -> None:
        start, end = NOW, NOW + timedelta(days=7)
        backend.tasks.save_all(
            [
                _task(1, due_at=start),
                _task(2, due_at=end),
                _task(3, due_at=end + timedelta(microseconds=1)),
                _task(4, due_at=start - timedelta(microseconds=1)),
            ]
        )
        found = backend.tasks.find_due_between("ws_1", start, end)  # type: ignore[arg-type]
        assert [t.id for t in found] == ["task_000000000001", "task_000000000002"]

    def test_by_project(self, backend: Store) -> None:
        backend.tasks.save_all(
            [_task(1, project_id="proj_1"), _task(2), _task(3, project_id="proj_1")]
        )
        found = backend.tasks.find_by_project("proj_1")  # type: ignore[arg-type]
        assert {t.id for t in found} == {"task_000000000001", "task_000000000003"}

    def test_by_tag_any_status(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(1, tag_ids=("tag_a", "tag_b")),
                _task(2, tag_ids=("tag_b",)),
                _task(3, tag_ids=("tag_a",), status=TaskStatus.COMPLETED),
                _task(4, tag_ids=("tag_a",), deleted_at=NOW),
                _task(5, workspace="ws_2", tag_ids=("tag_a",)),
            ]
        )
        found = backend.tasks.find_by_tag("tag_a", "ws_1")  # type: ignore[arg-type]
        assert [t.id for t in found] == ["task_000000000001", "task_000000000003"]


class TestTaskSearch:
    def _ids(self, backend: Store, text: str, **filters: object) -> list[str]:
        found = backend.tasks.search(
            "ws_1", text, TaskSearchFilters(**filters)  # type: ignore[arg-type]
        )
        return [t.id for t in found]

    def test_matches_title_or_notes_case_insensitively(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(1, title="Call the Dentist"),
                _task(2, title="Groceries", notes="ask dentist about invoice"),
                _task(3, title="Laundry"),
                _task(4, title="Dentist follow-up", deleted_at=NOW),
                _task(5, workspace="ws_2", title="Dentist"),
            ]
        )
        assert self._ids(backend, "DENTIST") == ["task_000000000001", "task_000000000002"]

    def test_like_wildcards_are_literal(self, backend: Store) -> None:
        backend.tasks.save_all([_task(1, title="Raise to 100%"), _task(2, title="Raise to 1000")])
        assert self._ids(backend, "100%") == ["task_000000000001"]
        assert self._ids(backend, "_") == []

    def test_orders_dated_first_then_by_due(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(1, title="a"),
                _task(2, title="a", due_at=NOW + timedelta(days=2)),
                _task(3, title="a", due_at=NOW - timedelta(days=1)),
            ]
        )
        assert self._ids(backend, "a") == [
            "task_000000000003",
            "task_000000000002",
            "task_000000000001",
        ]

    def test_tag_filter_requires_every_tag(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(1, title="x", tag_ids=("tag_a", "tag_b")),
                _task(2, title="x", tag_ids=("tag_a",)),
            ]
        )
        assert self._ids(backend, "x", tag_ids=("tag_a", "tag_b")) == ["task_000000000001"]
        assert self._ids(backend, "x", tag_ids=("tag_a",)) == [
            "task_000000000001",
            "task_000000000002",
        ]

    def test_project_and_status_filters(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(1, title="x", project_id="proj_1"),
                _task(2, title="x", project_id="proj_1", status=TaskStatus.COMPLETED),
                _task(3, title="x"),
            ]
        )
        assert self._ids(backend, "x", project_id="proj_1", status=TaskStatus.ACTIVE) == [
            "task_000000000001"
        ]

    def test_due_bounds_are_inclusive_and_drop_undated(self, backend: Store) -> None:
        backend.tasks.save_all(
            [
                _task(1, title="x", due_at=NOW),
                _task(2, title="x", due_at=NOW + timedelta(days=1)),
                _task(3, title="x", due_at=NOW + timedelta(days=1, seconds=1)),
                _task(4, title="x"),
            ]
        )
        found = self._ids(
            backend, "x", due_after=NOW, due_before=NOW + timedelta(days=1)
        )
        assert found == ["task_000000000001", "task_000000000002"]
        assert self._ids(backend, "x", due_before=NOW) == ["task_000000000001"]


class TestReminderRepository:
    def test_round_trip(self, backend: Store) -> None:
        reminder = _reminder(1, _task(1), timedelta(hours=1))
        backend.reminders.save(reminder)
        assert backend.reminders.find_by_id(reminder.id) == reminder

    def test_by_task_sorted(self, backend: Store) -> None:
        task = _task(1)
        backend.reminders.save(_reminder(1, task, timedelta(hours=3)))
        backend.reminders.save(_reminder(2, task, timedelta(hours=1)))
        backend.reminders.save(_reminder(3, _task(2), timedelta(hours=2)))
        found = backend.reminders.find_by_task(task.id, task.workspace_id)
        assert [r.id for r in found] == ["rem_000000000002", "rem_000000000001"]

    def test_by_task_scoped_to_workspace(self, backend: Store) -> None:
        task = _task(1)
        backend.reminders.save(_reminder(1, task, timedelta(hours=1)))
        assert backend.reminders.find_by_task(task.id, "ws_2") == []  # type: ignore[arg-type]

    def test_find_due_only_pending(self, backend: Store) -> None:
        task = _task(1)
        due = _reminder(1, task, timedelta(minutes=-5))
        sent = _reminder(2, task, timedelta(minutes=-10)).model_copy(
            update={"status": ReminderStatus.SENT}
        )
        later = _reminder(3, task, timedelta(hours=1))
        for reminder in (due, sent, later):
            backend.reminders.save(reminder)
        assert [r.id for r in backend.reminders.find_due(NOW)] == [due.id]

    def test_delete(self, backend: Store) -> None:
        reminder = _reminder(1, _task(1), timedelta(hours=1))
        backend.reminders.save(reminder)
        backend.reminders.delete(reminder.id)
        assert backend.reminders.find_by_id(reminder.id) is None


class TestProjectRepository:
    def test_round_trip(self, backend: Store) -> None:
        project = _project(1, color="blue", archived=True)
        backend.projects.save(project)
        assert backend.projects.find_by_id(project.id) == project

    def test_by_workspace_newest_first_without_archived(self, backend: Store) -> None:
        for project in (
            _project(1),
            _project(2),
            _project(3, archived=True),
            _project(4, workspace="ws_2"),
        ):
            backend.projects.save(project)
        active = backend.projects.find_by_workspace("ws_1")  # type: ignore[arg-type]
        assert [p.id for p in active] == ["proj_000000000002", "proj_000000000001"]
        every = backend.projects.find_by_workspace(
            "ws_1", include_archived=True  # type: ignore[arg-type]
        )
        assert [p.id for p in every] == [
            "proj_000000000003",
            "proj_000000000002",
            "proj_000000000001",
        ]

    def test_delete(self, backend: Store) -> None:
        project = _project(1)
        backend.projects.save(project)
        backend.projects.delete(project.id)
        assert backend.projects.find_by_id(project.id) is None


class TestTagRepository:
    def test_round_trip(self, backend: Store) -> None:
        tag = _tag(1, "urgent")
        backend.tags.save(tag)
        assert backend.tags.find_by_id(tag.id) == tag

    def test_find_by_name_scoped_to_workspace(self, backend: Store) -> None:
        backend.tags.save(_tag(1, "urgent"))
        backend.tags.save(_tag(2, "urgent", workspace="ws_2"))
        found = backend.tags.find_by_name("ws_2", "urgent")  # type: ignore[arg-type]
        assert found is not None
        assert found.id == "tag_000000000002"
        assert backend.tags.find_by_name("ws_1", "later") is None  # type: ignore[arg-type]

    def test_by_workspace_sorted_by_name(self, backend: Store) -> None:
        for tag in (_tag(1, "work"), _tag(2, "errand"), _tag(3, "home")):
            backend.tags.save(tag)
        names = [t.name for t in backend.tags.find_by_workspace("ws_1")]  # type: ignore[arg-type]
        assert names == ["errand", "home", "work"]

    def test_delete(self, backend: Store) -> None:
        tag = _tag(1, "urgent")
        backend.tags.save(tag)
        backend.tags.delete(tag.id)
        assert backend.tags.find_by_id(tag.id) is None


class TestRecurrenceRules:
    def test_round_trip(self, backend: Store) -> None:
        rule = _rule(1, days_of_week=[1, 3], interval=2)
        backend.rules.save(rule)
        assert backend.rules.find_by_id(rule.id) == rule

    def test_replace_rule(self, backend: Store) -> None:
        old = _rule(1)
        task = _task(1, recurrence_rule_id=old.id)
        backend.rules.save(old)
        backend.tasks.save(task)

        new = _rule(2, days_of_week=[5])
        backend.rule_store.replace_rule(plan_rule_replacement(task, new, NOW))

        assert backend.rules.find_by_id(old.id) is None
        assert backend.rules.find_by_id(new.id) == new
        saved = backend.tasks.find_by_id(task.id)
        assert saved is not None
        assert saved.recurrence_rule_id == new.id

    def test_remove_rule(self, backend: Store) -> None:
        rule = _rule(1)
        task = _task(1, recurrence_rule_id=rule.id)
        backend.rules.save(rule)
        backend.tasks.save(task)

        plan = plan_rule_removal(task, NOW)
        assert plan is not None
        backend.rule_store.remove_rule(plan)

        assert backend.rules.find_by_id(rule.id) is None
        saved = backend.tasks.find_by_id(task.id)
        assert saved is not None
        assert saved.recurrence_rule_id is None


class TestSqlDetails:
    def test_time_codec_is_fixed_width(self) -> None:
        assert to_db_time(NOW) == "2025-03-14T09:00:00.000000+00:00"
        assert from_db_time(to_db_time(NOW)) == NOW
        assert to_db_time(None) is None

    def test_replace_rule_is_atomic(self, sql_store: Store) -> None:
        old = _rule(1)
        sql_store.rules.save(old)
        task = _task(1, recurrence_rule_id=old.id)
        sql_store.tasks.save(task)

        # A task row missing its NOT NULL title makes the final write fail.
        broken = task.model_copy(update={"title": None, "recurrence_rule_id": "rule_000000000002"})
        plan = replace(plan_rule_replacement(task, _rule(2), NOW), updated_task=broken)

        with pytest.raises(IntegrityError):
            sql_store.rule_store.replace_rule(plan)

        assert sql_store.rules.find_by_id(old.id) == old
        assert sql_store.rules.find_by_id("rule_000000000002") is None  # type: ignore[arg-type]

    def test_tags_replaced_not_accumulated(self, sql_store: Store) -> None:
        task = _task(1, tag_ids=("a", "b"))
        sql_store.tasks.save(task)
        sql_store.tasks.save(task.model_copy(update={"tag_ids": ("b",)}))
        assert sql_store.engine is not None
        with sql_store.engine.connect() as conn:
            count = conn.execute(select(func.count()).select_from(task_tags)).scalar()
        assert count == 1

    def test_duplicate_tag_name_rejected_by_schema(self, sql_store: Store) -> None:
        sql_store.tags.save(_tag(1, "urgent"))
        with pytest.raises(IntegrityError):
            sql_store.tags.save(_tag(2, "urgent"))
