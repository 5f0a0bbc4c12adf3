"""Reminder entity, its lifecycle, and due-reminder triage.

:func:`triage_reminder` is the decision procedure run once for every
reminder the periodic scan finds due. It looks at the *current* state of
the targeted task and yields exactly one of :class:`SendReminder`,
:class:`DismissReminder`, or :class:`SkipReminder`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from todoctl.domain.calendar import as_utc
from todoctl.domain.errors import InvalidStateTransitionError, ValidationError, invalid_transition
from todoctl.domain.ids import ReminderId, TaskId, WorkspaceId
from todoctl.domain.lifecycle import ReminderStatus, TaskStatus
from todoctl.domain.result import Err, Ok, Result
from todoctl.domain.task import Task
from todoctl.domain.types import EntityKind


class Reminder(BaseModel):
    """A point in time at which the owner of a task wants a nudge."""

    model_config = ConfigDict(frozen=True)

    id: ReminderId
    task_id: TaskId
    workspace_id: WorkspaceId
    remind_at: datetime
    status: ReminderStatus = ReminderStatus.PENDING
    created_at: datetime
    updated_at: datetime

    @field_validator("remind_at", "created_at", "updated_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


def _require_future(remind_at: datetime, now: datetime) -> ValidationError | None:
    if as_utc(remind_at) <= as_utc(now):
        return ValidationError(field="remind_at", message="Reminder time must be in the future")
    return None


def create_reminder(
    task_id: TaskId,
    workspace_id: WorkspaceId,
    remind_at: datetime,
    now: datetime,
    *,
    reminder_id: ReminderId,
) -> Result[Reminder, ValidationError]:
    error = _require_future(remind_at, now)
    if error is not None:
        return Err(error)
    now = as_utc(now)
    return Ok(
        Reminder(
            id=reminder_id,
            task_id=task_id,
            workspace_id=workspace_id,
            remind_at=remind_at,
            status=ReminderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
    )


def update_reminder_time(
    reminder: Reminder, remind_at: datetime, now: datetime
) -> Result[Reminder, ValidationError | InvalidStateTransitionError]:
    """Move a pending reminder. Sent and dismissed reminders are frozen."""
    if reminder.status != ReminderStatus.PENDING:
        return Err(
            invalid_transition(
                EntityKind.REMINDER,
                reminder.status,
                ReminderStatus.PENDING,
                f"Cannot update a reminder that is {reminder.status}",
            )
        )
    error = _require_future(remind_at, now)
    if error is not None:
        return Err(error)
    return Ok(
        reminder.model_copy(update={"remind_at": as_utc(remind_at), "updated_at": as_utc(now)})
    )


def dismiss_reminder(
    reminder: Reminder, now: datetime
) -> Result[Reminder, InvalidStateTransitionError]:
    if reminder.status == ReminderStatus.DISMISSED:
        return Err(
            invalid_transition(
                EntityKind.REMINDER,
                ReminderStatus.DISMISSED,
                ReminderStatus.DISMISSED,
                "Reminder is already dismissed",
            )
        )
    return Ok(
        reminder.model_copy(update={"status": ReminderStatus.DISMISSED, "updated_at": as_utc(now)})
    )


def mark_reminder_sent(
    reminder: Reminder, now: datetime
) -> Result[Reminder, InvalidStateTransitionError]:
    if reminder.status != ReminderStatus.PENDING:
        return Err(
            invalid_transition(
                EntityKind.REMINDER,
                reminder.status,
                ReminderStatus.SENT,
                f"Cannot mark a {reminder.status} reminder as sent",
            )
        )
    return Ok(
        reminder.model_copy(update={"status": ReminderStatus.SENT, "updated_at": as_utc(now)})
    )


# --- Triage ---


@dataclass(frozen=True)
class SendReminder:
    """Deliver: the reminder is now ``sent`` and *task* is the notification subject."""

    reminder: Reminder
    task: Task
    kind: Literal["send"] = "send"


@dataclass(frozen=True)
class DismissReminder:
    """Suppress: the task is gone or no longer active; the reminder is ``dismissed``."""

    reminder: Reminder
    kind: Literal["dismiss"] = "dismiss"


@dataclass(frozen=True)
class SkipReminder:
    """Leave untouched: the mutator rejected the reminder's current status."""

    reminder: Reminder
    reason: str
    kind: Literal["skip"] = "skip"


type TriageOutcome = SendReminder | DismissReminder | SkipReminder


def is_task_eligible(task: Task | None) -> bool:
    """Only live, active tasks may still be notified about."""
    return task is not None and task.status == TaskStatus.ACTIVE and task.deleted_at is None


def triage_reminder(reminder: Reminder, task: Task | None, now: datetime) -> TriageOutcome:
    """Decide the fate of a due *reminder* given the current *task*."""
    if task is None or not is_task_eligible(task):
        dismissed = dismiss_reminder(reminder, now)
        if isinstance(dismissed, Err):
            return SkipReminder(reminder=reminder, reason=dismissed.error.message)
        return DismissReminder(reminder=dismissed.value)

    sent = mark_reminder_sent(reminder, now)
    if isinstance(sent, Err):
        return SkipReminder(reminder=reminder, reason=sent.error.message)
    return SendReminder(reminder=sent.value, task=task)
