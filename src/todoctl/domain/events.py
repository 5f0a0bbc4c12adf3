"""Domain events: informational records of a completed mutation.

Events carry ids and timestamps only, never full entity payloads. Each
event class names the pluggy hook it is dispatched to; the hook's
keyword arguments are the event's fields minus the ``type`` tag.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from todoctl.domain.calendar import as_utc
from todoctl.domain.ids import (
    ProjectId,
    RecurrenceRuleId,
    ReminderId,
    TagId,
    TaskId,
    UserId,
    WorkspaceId,
)


class DomainEvent(BaseModel):
    """Base for all events; ``occurred_at`` comes from the injected clock."""

    model_config = ConfigDict(frozen=True)

    hook_name: ClassVar[str] = ""

    type: str
    occurred_at: datetime

    @field_validator("occurred_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    def hook_payload(self) -> dict[str, Any]:
        """JSON-safe keyword arguments for the event's hook."""
        return self.model_dump(mode="json", exclude={"type"})


# --- Task events ---


class TaskCreated(DomainEvent):
    hook_name: ClassVar[str] = "post_task_created"

    type: Literal["TaskCreated"] = "TaskCreated"
    task_id: TaskId
    title: str
    workspace_id: WorkspaceId
    owner_user_id: UserId
    project_id: ProjectId | None = None


class TaskUpdated(DomainEvent):
    hook_name: ClassVar[str] = "post_task_updated"

    type: Literal["TaskUpdated"] = "TaskUpdated"
    task_id: TaskId
    fields_changed: list[str] = []


class TaskCompleted(DomainEvent):
    hook_name: ClassVar[str] = "post_task_completed"

    type: Literal["TaskCompleted"] = "TaskCompleted"
    task_id: TaskId
    completed_at: datetime
    next_task_id: TaskId | None = None


class TaskUncompleted(DomainEvent):
    hook_name: ClassVar[str] = "post_task_uncompleted"

    type: Literal["TaskUncompleted"] = "TaskUncompleted"
    task_id: TaskId


class TaskCanceled(DomainEvent):
    hook_name: ClassVar[str] = "post_task_canceled"

    type: Literal["TaskCanceled"] = "TaskCanceled"
    task_id: TaskId


class TaskDeleted(DomainEvent):
    hook_name: ClassVar[str] = "post_task_deleted"

    type: Literal["TaskDeleted"] = "TaskDeleted"
    task_id: TaskId


# --- Reminder events ---


class ReminderCreated(DomainEvent):
    hook_name: ClassVar[str] = "post_reminder_created"

    type: Literal["ReminderCreated"] = "ReminderCreated"
    reminder_id: ReminderId
    task_id: TaskId
    remind_at: datetime


class ReminderDismissed(DomainEvent):
    hook_name: ClassVar[str] = "post_reminder_dismissed"

    type: Literal["ReminderDismissed"] = "ReminderDismissed"
    reminder_id: ReminderId
    task_id: TaskId


class ReminderTriggered(DomainEvent):
    hook_name: ClassVar[str] = "post_reminder_triggered"

    type: Literal["ReminderTriggered"] = "ReminderTriggered"
    reminder_id: ReminderId
    task_id: TaskId


# --- Recurrence events ---


class RecurrenceRuleSet(DomainEvent):
    hook_name: ClassVar[str] = "post_recurrence_rule_set"

    type: Literal["RecurrenceRuleSet"] = "RecurrenceRuleSet"
    recurrence_rule_id: RecurrenceRuleId
    task_id: TaskId


class RecurrenceRuleRemoved(DomainEvent):
    hook_name: ClassVar[str] = "post_recurrence_rule_removed"

    type: Literal["RecurrenceRuleRemoved"] = "RecurrenceRuleRemoved"
    recurrence_rule_id: RecurrenceRuleId
    task_id: TaskId


# --- Project events ---


class ProjectCreated(DomainEvent):
    hook_name: ClassVar[str] = "post_project_created"

    type: Literal["ProjectCreated"] = "ProjectCreated"
    project_id: ProjectId
    name: str
    workspace_id: WorkspaceId


class ProjectUpdated(DomainEvent):
    hook_name: ClassVar[str] = "post_project_updated"

    type: Literal["ProjectUpdated"] = "ProjectUpdated"
    project_id: ProjectId
    fields_changed: list[str] = []


class ProjectArchived(DomainEvent):
    hook_name: ClassVar[str] = "post_project_archived"

    type: Literal["ProjectArchived"] = "ProjectArchived"
    project_id: ProjectId


class ProjectUnarchived(DomainEvent):
    hook_name: ClassVar[str] = "post_project_unarchived"

    type: Literal["ProjectUnarchived"] = "ProjectUnarchived"
    project_id: ProjectId


class ProjectDeleted(DomainEvent):
    hook_name: ClassVar[str] = "post_project_deleted"

    type: Literal["ProjectDeleted"] = "ProjectDeleted"
    project_id: ProjectId
    detached_task_ids: list[TaskId] = []


# --- Tag events ---


class TagCreated(DomainEvent):
    hook_name: ClassVar[str] = "post_tag_created"

    type: Literal["TagCreated"] = "TagCreated"
    tag_id: TagId
    name: str
    workspace_id: WorkspaceId


class TagUpdated(DomainEvent):
    hook_name: ClassVar[str] = "post_tag_updated"

    type: Literal["TagUpdated"] = "TagUpdated"
    tag_id: TagId
    fields_changed: list[str] = []


class TagDeleted(DomainEvent):
    hook_name: ClassVar[str] = "post_tag_deleted"

    type: Literal["TagDeleted"] = "TagDeleted"
    tag_id: TagId
    untagged_task_ids: list[TaskId] = []


EVENT_TYPES: tuple[type[DomainEvent], ...] = (
    TaskCreated,
    TaskUpdated,
    TaskCompleted,
    TaskUncompleted,
    TaskCanceled,
    TaskDeleted,
    ReminderCreated,
    ReminderDismissed,
    ReminderTriggered,
    RecurrenceRuleSet,
    RecurrenceRuleRemoved,
    ProjectCreated,
    ProjectUpdated,
    ProjectArchived,
    ProjectUnarchived,
    ProjectDeleted,
    TagCreated,
    TagUpdated,
    TagDeleted,
)
