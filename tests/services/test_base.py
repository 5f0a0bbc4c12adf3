"""Tests for BaseService event dispatch and entity loading."""

from __future__ import annotations

from tests.conftest import create_task
from todoctl.domain.events import DomainEvent
from todoctl.infrastructure.clock import FixedClock
from todoctl.infrastructure.ids import SequentialIdGenerator
from todoctl.infrastructure.store import Store
from todoctl.services.commands import CreateTaskCommand, RequestContext
from todoctl.services.tasks import TaskService


class _ExplodingBus:
    def publish(self, event: DomainEvent) -> None:
        raise RuntimeError("bus offline")


class TestDispatchEvent:
    def test_bus_failure_becomes_warning(
        self, clock: FixedClock, ids: SequentialIdGenerator, ctx: RequestContext
    ) -> None:
        store = Store.in_memory(clock=clock, ids=ids, event_bus=_ExplodingBus())

        result = TaskService(store).create(CreateTaskCommand(title="Still saved"), ctx)

        assert result.ok
        assert result.warnings == ["Event dispatch failed for post_task_created"]
        assert store.tasks.find_by_id(result.data["id"]) is not None

    def test_no_bus_is_silent(self, sql_store: Store, ctx: RequestContext) -> None:
        assert sql_store.event_bus is None
        data = create_task(sql_store, ctx, "Quiet")
        assert data["title"] == "Quiet"


class TestLoaders:
    def test_deleted_task_is_not_found(self, store: Store, ctx: RequestContext) -> None:
        task_id = create_task(store, ctx, "Gone")["id"]
        task = store.tasks.find_by_id(task_id)
        assert task is not None
        store.tasks.save(task.model_copy(update={"deleted_at": task.created_at}))

        result = TaskService(store).get(task_id, ctx)

        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
