"""TaskService: task use cases, including recurring-task succession.

Pipeline per operation: GATHER → DECIDE → ACT
(load through the store, run pure domain rules, persist then publish).
"""

from __future__ import annotations

import logging

from todoctl.domain.errors import NotFoundError
from todoctl.domain.events import (
    TaskCanceled,
    TaskCompleted,
    TaskCreated,
    TaskDeleted,
    TaskUncompleted,
    TaskUpdated,
)
from todoctl.domain.recurrence import build_next_recurring_task
from todoctl.domain.result import Err
from todoctl.domain.task import (
    Task,
    cancel_task,
    complete_task,
    create_task,
    create_task_from_params,
    delete_task,
    uncomplete_task,
    unlink_recurrence_rule,
    update_task,
)
from todoctl.services._helpers import changed_fields, iso, task_to_dict
from todoctl.services.base import BaseService
from todoctl.services.commands import (
    CancelTaskCommand,
    CompleteTaskCommand,
    CreateTaskCommand,
    DeleteTaskCommand,
    RequestContext,
    UncompleteTaskCommand,
    UpdateTaskCommand,
)
from todoctl.services.contracts import (
    TaskCompletionData,
    TaskDeletedData,
    TaskPayload,
    dump_validated,
)
from todoctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _created_event(task: Task) -> TaskCreated:
    return TaskCreated(
        task_id=task.id,
        title=task.title,
        workspace_id=task.workspace_id,
        owner_user_id=task.owner_user_id,
        project_id=task.project_id,
        occurred_at=task.created_at,
    )


class TaskService(BaseService):
    """Creates, edits, and moves tasks through their lifecycle."""

    def _task_result(self, op: str, task: Task, warnings: list[str]) -> ServiceResult:
        now = self._store.clock.now()
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(TaskPayload, task_to_dict(task, now)),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create(self, cmd: CreateTaskCommand, ctx: RequestContext) -> ServiceResult:
        op = "create_task"
        warnings: list[str] = []
        now = self._store.clock.now()

        created = create_task(
            cmd.title,
            now,
            ctx.user_id,
            ctx.workspace_id,
            task_id=self._store.ids.task_id(),
            project_id=cmd.project_id,
            due_at=cmd.due_at,
            notes=cmd.notes,
            tag_ids=cmd.tag_ids,
        )
        if isinstance(created, Err):
            return ServiceResult.failure(op, created.error)

        task = created.value
        self._store.tasks.save(task)
        self._dispatch_event(_created_event(task), warnings)
        return self._task_result(op, task, warnings)

    def get(self, task_id: str, ctx: RequestContext) -> ServiceResult:
        op = "get_task"
        task = self._load_task(task_id, ctx)
        if isinstance(task, NotFoundError):
            return ServiceResult.failure(op, task)
        return self._task_result(op, task, [])

    def update(self, cmd: UpdateTaskCommand, ctx: RequestContext) -> ServiceResult:
        op = "update_task"
        warnings: list[str] = []

        existing = self._load_task(cmd.task_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        updated = update_task(existing, cmd.changes(), now)
        if isinstance(updated, Err):
            return ServiceResult.failure(op, updated.error)

        task = updated.value
        self._store.tasks.save(task)
        self._dispatch_event(
            TaskUpdated(
                task_id=task.id,
                fields_changed=changed_fields(existing, task),
                occurred_at=now,
            ),
            warnings,
        )
        return self._task_result(op, task, warnings)

    def complete(self, cmd: CompleteTaskCommand, ctx: RequestContext) -> ServiceResult:
        """Complete a task; a recurring task spawns its successor.

        The successor takes over the recurrence rule, so the completed
        task is unlinked from it and reopening it never spawns a duplicate.
        """
        op = "complete_task"
        warnings: list[str] = []

        # ── GATHER ───────────────────────────────────────────
        existing = self._load_task(cmd.task_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        rule = None
        if existing.recurrence_rule_id is not None:
            rule = self._store.rules.find_by_id(existing.recurrence_rule_id)
            if rule is None:
                warnings.append(
                    f"Recurrence rule {existing.recurrence_rule_id} not found; no successor created"
                )

        # ── DECIDE ───────────────────────────────────────────
        now = self._store.clock.now()
        completed = complete_task(existing, now)
        if isinstance(completed, Err):
            return ServiceResult.failure(op, completed.error)

        done = completed.value
        successor: Task | None = None
        if rule is not None:
            params = build_next_recurring_task(existing, rule, self._store.ids.task_id(), now)
            spawned = create_task_from_params(params)
            if isinstance(spawned, Err):
                warnings.append(f"Could not create next occurrence: {spawned.error.message}")
            else:
                successor = spawned.value
                done = unlink_recurrence_rule(done, now)

        # ── ACT ──────────────────────────────────────────────
        to_save = [done] if successor is None else [done, successor]
        self._store.tasks.save_all(to_save)

        self._dispatch_event(
            TaskCompleted(
                task_id=done.id,
                completed_at=now,
                next_task_id=successor.id if successor is not None else None,
                occurred_at=now,
            ),
            warnings,
        )
        if successor is not None:
            self._dispatch_event(_created_event(successor), warnings)
            logger.debug("Spawned %s after completing %s", successor.id, done.id)

        data = task_to_dict(done, now)
        data["next_task"] = task_to_dict(successor, now) if successor is not None else None
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(TaskCompletionData, data),
            warnings=warnings,
        )

    def uncomplete(self, cmd: UncompleteTaskCommand, ctx: RequestContext) -> ServiceResult:
        op = "uncomplete_task"
        warnings: list[str] = []

        existing = self._load_task(cmd.task_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        reopened = uncomplete_task(existing, now)
        if isinstance(reopened, Err):
            return ServiceResult.failure(op, reopened.error)

        self._store.tasks.save(reopened.value)
        self._dispatch_event(TaskUncompleted(task_id=existing.id, occurred_at=now), warnings)
        return self._task_result(op, reopened.value, warnings)

    def cancel(self, cmd: CancelTaskCommand, ctx: RequestContext) -> ServiceResult:
        op = "cancel_task"
        warnings: list[str] = []

        existing = self._load_task(cmd.task_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        canceled = cancel_task(existing, now)
        if isinstance(canceled, Err):
            return ServiceResult.failure(op, canceled.error)

        self._store.tasks.save(canceled.value)
        self._dispatch_event(TaskCanceled(task_id=existing.id, occurred_at=now), warnings)
        return self._task_result(op, canceled.value, warnings)

    def delete(self, cmd: DeleteTaskCommand, ctx: RequestContext) -> ServiceResult:
        """Soft delete. The task disappears from every finder."""
        op = "delete_task"
        warnings: list[str] = []

        existing = self._load_task(cmd.task_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        deleted = delete_task(existing, now)
        if isinstance(deleted, Err):
            return ServiceResult.failure(op, deleted.error)

        self._store.tasks.save(deleted.value)
        self._dispatch_event(TaskDeleted(task_id=existing.id, occurred_at=now), warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                TaskDeletedData, {"id": existing.id, "deleted_at": iso(deleted.value.deleted_at)}
            ),
            warnings=warnings,
        )
