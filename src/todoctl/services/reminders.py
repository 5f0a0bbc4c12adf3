"""ReminderService: reminder CRUD and the due-reminder scan.

``process_due`` is the only entry point the scheduler calls. It follows
GATHER → DECIDE → ACT:

- GATHER: every pending reminder due at or before ``now``; each
  targeted task is loaded once, inside the reminder's own failure scope.
- DECIDE: :func:`~todoctl.domain.reminder.triage_reminder` per reminder.
- ACT: ``dismiss`` saves; ``send`` notifies, saves, then publishes
  ``ReminderTriggered``; ``skip`` touches nothing.

A failure on one reminder is logged and counted; the scan continues.
"""

from __future__ import annotations

import logging
from typing import Any

from todoctl.domain.errors import NotFoundError, ValidationError
from todoctl.domain.events import ReminderCreated, ReminderDismissed, ReminderTriggered
from todoctl.domain.lifecycle import TaskStatus
from todoctl.domain.reminder import (
    DismissReminder,
    SendReminder,
    SkipReminder,
    create_reminder,
    dismiss_reminder,
    triage_reminder,
    update_reminder_time,
)
from todoctl.domain.result import Err
from todoctl.domain.task import Task
from todoctl.services._helpers import reminder_to_dict
from todoctl.services.base import BaseService
from todoctl.services.commands import (
    CreateReminderCommand,
    DeleteReminderCommand,
    DismissReminderCommand,
    RequestContext,
    UpdateReminderCommand,
)
from todoctl.services.contracts import (
    ProcessDueData,
    ReminderDeletedData,
    ReminderListData,
    ReminderPayload,
    dump_validated,
)
from todoctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ReminderService(BaseService):
    """Reminder use cases."""

    def _reminder_result(self, op: str, reminder: Any, warnings: list[str]) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ReminderPayload, reminder_to_dict(reminder)),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, cmd: CreateReminderCommand, ctx: RequestContext) -> ServiceResult:
        """Schedule a reminder for an active task."""
        op = "create_reminder"
        warnings: list[str] = []

        task = self._load_task(cmd.task_id, ctx)
        if isinstance(task, NotFoundError):
            return ServiceResult.failure(op, task)
        if task.status != TaskStatus.ACTIVE:
            return ServiceResult.failure(
                op,
                ValidationError(
                    field="task_id",
                    message=f"Cannot add a reminder to a task that is {task.status}",
                ),
            )

        now = self._store.clock.now()
        created = create_reminder(
            task.id,
            task.workspace_id,
            cmd.remind_at,
            now,
            reminder_id=self._store.ids.reminder_id(),
        )
        if isinstance(created, Err):
            return ServiceResult.failure(op, created.error)

        reminder = created.value
        self._store.reminders.save(reminder)
        self._dispatch_event(
            ReminderCreated(
                reminder_id=reminder.id,
                task_id=task.id,
                remind_at=reminder.remind_at,
                occurred_at=now,
            ),
            warnings,
        )
        return self._reminder_result(op, reminder, warnings)

    def update_time(self, cmd: UpdateReminderCommand, ctx: RequestContext) -> ServiceResult:
        op = "update_reminder"

        existing = self._load_reminder(cmd.reminder_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        updated = update_reminder_time(existing, cmd.remind_at, now)
        if isinstance(updated, Err):
            return ServiceResult.failure(op, updated.error)

        self._store.reminders.save(updated.value)
        return self._reminder_result(op, updated.value, [])

    def dismiss(self, cmd: DismissReminderCommand, ctx: RequestContext) -> ServiceResult:
        op = "dismiss_reminder"
        warnings: list[str] = []

        existing = self._load_reminder(cmd.reminder_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        dismissed = dismiss_reminder(existing, now)
        if isinstance(dismissed, Err):
            return ServiceResult.failure(op, dismissed.error)

        self._store.reminders.save(dismissed.value)
        self._dispatch_event(
            ReminderDismissed(reminder_id=existing.id, task_id=existing.task_id, occurred_at=now),
            warnings,
        )
        return self._reminder_result(op, dismissed.value, warnings)

    def delete(self, cmd: DeleteReminderCommand, ctx: RequestContext) -> ServiceResult:
        """Remove the reminder record outright."""
        op = "delete_reminder"

        existing = self._load_reminder(cmd.reminder_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        self._store.reminders.delete(existing.id)
        return ServiceResult(
            ok=True, op=op, data=dump_validated(ReminderDeletedData, {"id": existing.id})
        )

    def list_for_task(self, task_id: str, ctx: RequestContext) -> ServiceResult:
        op = "list_reminders"

        task = self._load_task(task_id, ctx)
        if isinstance(task, NotFoundError):
            return ServiceResult.failure(op, task)

        reminders = self._store.reminders.find_by_task(task.id, ctx.workspace_id)
        items = [reminder_to_dict(r) for r in sorted(reminders, key=lambda r: r.remind_at)]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                ReminderListData, {"task_id": task.id, "count": len(items), "items": items}
            ),
        )

    # ------------------------------------------------------------------
    # Due-reminder scan
    # ------------------------------------------------------------------

    def process_due(self) -> ServiceResult:
        """Triage and act on every reminder due now, across workspaces."""
        op = "process_due_reminders"
        warnings: list[str] = []
        now = self._store.clock.now()

        # ── GATHER ───────────────────────────────────────────
        due = self._store.reminders.find_due(now)
        tasks: dict[str, Task | None] = {}

        counts = {"send": 0, "dismiss": 0, "skip": 0, "failed": 0}
        items: list[dict[str, Any]] = []

        for reminder in due:
            item: dict[str, Any] = {
                "reminder_id": reminder.id,
                "task_id": reminder.task_id,
                "outcome": "failed",
                "reason": None,
            }
            try:
                if reminder.task_id not in tasks:
                    tasks[reminder.task_id] = self._store.tasks.find_by_id(reminder.task_id)

                # ── DECIDE ───────────────────────────────────
                outcome = triage_reminder(reminder, tasks[reminder.task_id], now)
                item["outcome"] = outcome.kind

                # ── ACT ──────────────────────────────────────
                match outcome:
                    case DismissReminder():
                        self._store.reminders.save(outcome.reminder)
                    case SendReminder():
                        self._store.notifier.send(outcome.reminder, outcome.task)
                        self._store.reminders.save(outcome.reminder)
                        self._dispatch_event(
                            ReminderTriggered(
                                reminder_id=reminder.id,
                                task_id=reminder.task_id,
                                occurred_at=now,
                            ),
                            warnings,
                        )
                    case SkipReminder():
                        item["reason"] = outcome.reason
            except Exception as exc:
                logger.warning(
                    "Reminder %s could not be processed", reminder.id, exc_info=True
                )
                item["outcome"] = "failed"
                item["reason"] = str(exc) or type(exc).__name__

            counts[item["outcome"]] += 1
            items.append(item)

        if due:
            logger.info(
                "Processed %d due reminder(s): %d sent, %d dismissed, %d skipped, %d failed",
                len(due),
                counts["send"],
                counts["dismiss"],
                counts["skip"],
                counts["failed"],
            )

        data = {
            "processed": len(due),
            "sent": counts["send"],
            "dismissed": counts["dismiss"],
            "skipped": counts["skip"],
            "failed": counts["failed"],
            "items": items,
        }
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ProcessDueData, data),
            warnings=warnings,
        )
