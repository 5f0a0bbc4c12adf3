"""Tests for TaskService: task use cases and recurring succession."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tests.conftest import NOW, create_task
from todoctl.infrastructure.clock import FixedClock
from todoctl.infrastructure.store import Store
from todoctl.services.commands import (
    CancelTaskCommand,
    CompleteTaskCommand,
    CreateTaskCommand,
    DeleteTaskCommand,
    RequestContext,
    SetRecurrenceRuleCommand,
    UncompleteTaskCommand,
    UpdateTaskCommand,
)
from todoctl.services.recurrence import RecurrenceService
from todoctl.services.tasks import TaskService

OTHER = RequestContext(user_id="user_2", workspace_id="ws_2")  # type: ignore[arg-type]


class TestCreateTask:
    def test_create(self, store: Store, ctx: RequestContext) -> None:
        result = TaskService(store).create(
            CreateTaskCommand(title="  Write report ", tag_ids=("work", "work")), ctx
        )
        assert result.ok
        assert result.op == "create_task"
        data = result.data
        assert data["id"] == "task_000000000001"
        assert data["title"] == "Write report"
        assert data["status"] == "active"
        assert data["tag_ids"] == ["work"]
        assert data["owner_user_id"] == "user_1"
        assert data["workspace_id"] == "ws_1"
        assert data["created_at"] == "2025-03-14T09:00:00+00:00"
        assert store.event_bus.types() == ["TaskCreated"]

    def test_invalid_title(self, store: Store, ctx: RequestContext) -> None:
        result = TaskService(store).create(CreateTaskCommand(title="x" * 201), ctx)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.detail["field"] == "title"
        assert store.event_bus.types() == []

    def test_overdue_flag(self, store: Store, ctx: RequestContext) -> None:
        data = create_task(store, ctx, "Late", due_at=NOW - timedelta(hours=1))
        assert data["overdue"] is True


class TestGetTask:
    def test_get(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Write report")["id"]
        result = TaskService(store).get(task_id, ctx)
        assert result.ok
        assert result.data["title"] == "Write report"

    def test_missing(self, store: Store, ctx: RequestContext) -> None:
        result = TaskService(store).get("task_ffffffffffff", ctx)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "No Task found with ID: task_ffffffffffff"

    def test_other_workspace_is_not_found(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Private")["id"]
        result = TaskService(store).get(task_id, OTHER)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestUpdateTask:
    def test_update_fields(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Draft", notes="old")["id"]
        due = NOW + timedelta(days=2)
        result = TaskService(store).update(
            UpdateTaskCommand(task_id=task_id, title="Final", due_at=due, notes=None), ctx
        )
        assert result.ok
        assert result.data["title"] == "Final"
        assert result.data["notes"] is None
        assert result.data["due_at"] == due.isoformat()
        event = store.event_bus.events[-1]
        assert event.type == "TaskUpdated"
        assert event.fields_changed == ["title", "notes", "due_at"]  # type: ignore[attr-defined]

    def test_update_allowed_when_completed(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Done")["id"]
        svc = TaskService(store)
        svc.complete(CompleteTaskCommand(task_id=task_id), ctx)
        result = svc.update(UpdateTaskCommand(task_id=task_id, title="Renamed"), ctx)
        assert result.ok
        assert result.data["status"] == "completed"

    def test_invalid_title(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Draft")["id"]
        result = TaskService(store).update(UpdateTaskCommand(task_id=task_id, title=""), ctx)
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"


class TestLifecycle:
    def test_complete_and_uncomplete(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Ship it")["id"]
        svc = TaskService(store)

        done = svc.complete(CompleteTaskCommand(task_id=task_id), ctx)
        assert done.ok
        assert done.data["status"] == "completed"
        assert done.data["completed_at"] == NOW.isoformat()
        assert done.data["next_task"] is None

        reopened = svc.uncomplete(UncompleteTaskCommand(task_id=task_id), ctx)
        assert reopened.ok
        assert reopened.data["status"] == "active"
        assert reopened.data["completed_at"] is None
        assert store.event_bus.types() == ["TaskCreated", "TaskCompleted", "TaskUncompleted"]

    def test_complete_twice(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Ship it")["id"]
        svc = TaskService(store)
        svc.complete(CompleteTaskCommand(task_id=task_id), ctx)
        result = svc.complete(CompleteTaskCommand(task_id=task_id), ctx)
        assert result.error is not None
        assert result.error.code == "INVALID_TRANSITION"
        assert result.error.message == "Cannot complete a task that is completed"

    def test_cancel_completed_task(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Ship it")["id"]
        svc = TaskService(store)
        svc.complete(CompleteTaskCommand(task_id=task_id), ctx)
        result = svc.cancel(CancelTaskCommand(task_id=task_id), ctx)
        assert result.ok
        assert result.data["status"] == "canceled"
        assert result.data["completed_at"] == NOW.isoformat()

    def test_cancel_twice(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Ship it")["id"]
        svc = TaskService(store)
        svc.cancel(CancelTaskCommand(task_id=task_id), ctx)
        result = svc.cancel(CancelTaskCommand(task_id=task_id), ctx)
        assert result.error is not None
        assert result.error.message == "Task is already canceled"

    def test_delete_is_soft(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Obsolete")["id"]
        svc = TaskService(store)

        result = svc.delete(DeleteTaskCommand(task_id=task_id), ctx)

        assert result.ok
        assert result.data == {"id": task_id, "deleted_at": NOW.isoformat()}
        assert store.event_bus.types()[-1] == "TaskDeleted"
        for again in (svc.get(task_id, ctx), svc.delete(DeleteTaskCommand(task_id=task_id), ctx)):
            assert again.error is not None
            assert again.error.code == "NOT_FOUND"


class TestRecurringCompletion:
    def _recurring(
        self, store: Store, ctx: RequestContext, frequency: str = "daily", **kwargs: object
    ) -> str:
        task_id = create_task(
            store, ctx, "Standup", due_at=NOW, project_id="proj_1", tag_ids=("team",)
        )["id"]
        result = RecurrenceService(store).set_rule(
            SetRecurrenceRuleCommand(task_id=task_id, frequency=frequency, **kwargs),  # type: ignore[arg-type]
            ctx,
        )
        assert result.ok
        return task_id

    def test_successor_created(self, store: Store, ctx: RequestContext) -> None:
        task_id = self._recurring(store, ctx)
        store.event_bus.clear()

        result = TaskService(store).complete(CompleteTaskCommand(task_id=task_id), ctx)

        assert result.ok
        successor = result.data["next_task"]
        assert successor["id"] == "task_000000000002"
        assert successor["title"] == "Standup"
        assert successor["status"] == "active"
        assert successor["due_at"] == (NOW + timedelta(days=1)).isoformat()
        assert successor["project_id"] == "proj_1"
        assert successor["tag_ids"] == ["team"]
        assert successor["recurrence_rule_id"] == "rule_000000000001"
        assert result.data["recurrence_rule_id"] is None
        assert store.event_bus.types() == ["TaskCompleted", "TaskCreated"]
        assert store.event_bus.events[0].next_task_id == "task_000000000002"  # type: ignore[attr-defined]

    def test_successor_persisted(self, store: Store, ctx: RequestContext) -> None:
        task_id = self._recurring(store, ctx, "weekly", days_of_week=(1, 3, 5))
        TaskService(store).complete(CompleteTaskCommand(task_id=task_id), ctx)
        # Friday 14 March -> Monday 17 March
        successor = TaskService(store).get("task_000000000002", ctx)
        assert successor.ok
        assert successor.data["due_at"] == "2025-03-17T09:00:00+00:00"

    def test_reopen_does_not_duplicate(self, store: Store, ctx: RequestContext) -> None:
        task_id = self._recurring(store, ctx)
        svc = TaskService(store)
        svc.complete(CompleteTaskCommand(task_id=task_id), ctx)
        svc.uncomplete(UncompleteTaskCommand(task_id=task_id), ctx)

        again = svc.complete(CompleteTaskCommand(task_id=task_id), ctx)

        assert again.ok
        assert again.data["next_task"] is None

    def test_from_completion_mode(
        self, store: Store, ctx: RequestContext, clock: FixedClock
    ) -> None:
        task_id = self._recurring(store, ctx, "daily", interval=2, mode="fromCompletion")
        clock.advance(hours=5)
        result = TaskService(store).complete(CompleteTaskCommand(task_id=task_id), ctx)
        assert result.data["next_task"]["due_at"] == "2025-03-16T14:00:00+00:00"

    def test_missing_rule_warns(self, store: Store, ctx: RequestContext) -> None:
        task_id = self._recurring(store, ctx)
        store.rules.delete("rule_000000000001")  # type: ignore[arg-type]

        result = TaskService(store).complete(CompleteTaskCommand(task_id=task_id), ctx)

        assert result.ok
        assert result.data["next_task"] is None
        assert result.warnings == [
            "Recurrence rule rule_000000000001 not found; no successor created"
        ]

    @pytest.mark.parametrize("backend", ["store", "sql_store"])
    def test_both_backends(self, backend: str, request: pytest.FixtureRequest) -> None:
        chosen: Store = request.getfixturevalue(backend)
        ctx = RequestContext(user_id="user_1", workspace_id="ws_1")  # type: ignore[arg-type]
        task_id = self._recurring(chosen, ctx, "monthly", day_of_month=31)

        result = TaskService(chosen).complete(CompleteTaskCommand(task_id=task_id), ctx)

        # 31 clamps to the last day of April
        assert result.data["next_task"]["due_at"] == "2025-04-30T09:00:00+00:00"
