"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer, so a renamed key (``due_today`` vs ``dueToday``) fails
fast in tests rather than in a renderer. Timestamps are ISO-8601 UTC
strings.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class TaskPayload(BaseModel):
    """One task as seen by adapters."""

    id: str
    title: str
    status: Literal["active", "completed", "canceled"]
    notes: str | None = None
    project_id: str | None = None
    due_at: str | None = None
    tag_ids: list[str]
    completed_at: str | None = None
    deleted_at: str | None = None
    recurrence_rule_id: str | None = None
    owner_user_id: str
    workspace_id: str
    created_at: str
    updated_at: str
    overdue: bool = False


class TaskCompletionData(TaskPayload):
    """Payload contract for ``TaskService.complete``."""

    next_task: TaskPayload | None = None


class TaskDeletedData(BaseModel):
    """Payload contract for ``TaskService.delete``."""

    id: str
    deleted_at: str


class ReminderPayload(BaseModel):
    id: str
    task_id: str
    workspace_id: str
    remind_at: str
    status: Literal["pending", "sent", "dismissed"]
    created_at: str
    updated_at: str


class ReminderListData(BaseModel):
    """Payload contract for ``ReminderService.list_for_task``."""

    task_id: str
    count: int
    items: list[ReminderPayload]


class ReminderDeletedData(BaseModel):
    id: str


class ProcessedReminder(BaseModel):
    """One reminder handled by a due-reminder scan."""

    reminder_id: str
    task_id: str
    outcome: Literal["send", "dismiss", "skip", "failed"]
    reason: str | None = None


class ProcessDueData(BaseModel):
    """Payload contract for ``ReminderService.process_due``."""

    processed: int
    sent: int
    dismissed: int
    skipped: int
    failed: int
    items: list[ProcessedReminder]


class RecurrenceRulePayload(BaseModel):
    id: str
    frequency: Literal["daily", "weekly", "monthly"]
    interval: int
    days_of_week: list[int] | None = None
    day_of_month: int | None = None
    mode: Literal["fixedSchedule", "fromCompletion"]
    created_at: str
    updated_at: str


class TaskRecurrenceData(BaseModel):
    """Payload contract for ``RecurrenceService.set_rule`` / ``get_rule``."""

    task_id: str
    rule: RecurrenceRulePayload | None = None
    next_due_at: str | None = None


class RecurrenceRemovedData(BaseModel):
    task_id: str
    removed_rule_id: str | None = None


class InboxData(BaseModel):
    """Payload contract for ``QueryService.inbox``."""

    count: int
    items: list[TaskPayload]


class TodayViewData(BaseModel):
    """Payload contract for ``QueryService.today``."""

    date: str
    overdue: list[TaskPayload]
    due_today: list[TaskPayload]


class UpcomingDayGroup(BaseModel):
    date: str
    tasks: list[TaskPayload]


class UpcomingViewData(BaseModel):
    """Payload contract for ``QueryService.upcoming``."""

    days: Literal[7, 14, 30]
    groups: list[UpcomingDayGroup]


class ProjectPayload(BaseModel):
    id: str
    workspace_id: str
    name: str
    color: str | None = None
    archived: bool
    created_at: str
    updated_at: str


class ProjectDetailData(ProjectPayload):
    """Payload contract for ``ProjectService.get``: the project and its tasks."""

    tasks: list[TaskPayload]


class ProjectListData(BaseModel):
    count: int
    items: list[ProjectPayload]


class ProjectDeletedData(BaseModel):
    id: str
    detached_task_ids: list[str]


class TagPayload(BaseModel):
    id: str
    workspace_id: str
    name: str
    color: str | None = None
    created_at: str
    updated_at: str


class TagListData(BaseModel):
    count: int
    items: list[TagPayload]


class TagDeletedData(BaseModel):
    id: str
    untagged_task_ids: list[str]


class TaggedTasksData(BaseModel):
    """Payload contract for ``QueryService.tasks_by_tag``."""

    tag: TagPayload
    count: int
    items: list[TaskPayload]


class SearchData(BaseModel):
    """Payload contract for ``QueryService.search``."""

    query: str
    count: int
    items: list[TaskPayload]
