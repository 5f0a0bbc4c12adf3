"""Inbound command shapes and the per-call request context.

Commands are plain data with no behavior beyond field conversion.
Update commands use the :data:`~todoctl.domain.types.UNSET` sentinel:
``UNSET`` leaves a field alone, ``None`` clears it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from todoctl.domain.ids import ProjectId, ReminderId, TagId, TaskId, UserId, WorkspaceId
from todoctl.domain.lifecycle import TaskStatus
from todoctl.domain.project import ProjectChanges
from todoctl.domain.tag import TagChanges
from todoctl.domain.task import TaskChanges
from todoctl.domain.types import UNSET, RecurrenceFrequency, RecurrenceMode, Unset


@dataclass(frozen=True)
class RequestContext:
    """Who is acting, and in which workspace."""

    user_id: UserId
    workspace_id: WorkspaceId


# --- Tasks ---


@dataclass(frozen=True)
class CreateTaskCommand:
    title: str
    project_id: ProjectId | None = None
    due_at: datetime | None = None
    notes: str | None = None
    tag_ids: tuple[TagId, ...] = ()


@dataclass(frozen=True)
class UpdateTaskCommand:
    task_id: TaskId
    title: str | Unset = UNSET
    notes: str | None | Unset = UNSET
    project_id: ProjectId | None | Unset = UNSET
    due_at: datetime | None | Unset = UNSET
    tag_ids: tuple[TagId, ...] | None | Unset = UNSET

    def changes(self) -> TaskChanges:
        return TaskChanges(
            title=self.title,
            notes=self.notes,
            project_id=self.project_id,
            due_at=self.due_at,
            tag_ids=self.tag_ids,
        )


@dataclass(frozen=True)
class CompleteTaskCommand:
    task_id: TaskId


@dataclass(frozen=True)
class UncompleteTaskCommand:
    task_id: TaskId


@dataclass(frozen=True)
class CancelTaskCommand:
    task_id: TaskId


@dataclass(frozen=True)
class DeleteTaskCommand:
    task_id: TaskId


# --- Recurrence ---


@dataclass(frozen=True)
class SetRecurrenceRuleCommand:
    task_id: TaskId
    frequency: RecurrenceFrequency | str
    interval: int = 1
    days_of_week: tuple[int, ...] | None = None
    day_of_month: int | None = None
    mode: RecurrenceMode | str = RecurrenceMode.FIXED_SCHEDULE


@dataclass(frozen=True)
class RemoveRecurrenceRuleCommand:
    task_id: TaskId


# --- Reminders ---


@dataclass(frozen=True)
class CreateReminderCommand:
    task_id: TaskId
    remind_at: datetime


@dataclass(frozen=True)
class UpdateReminderCommand:
    reminder_id: ReminderId
    remind_at: datetime


@dataclass(frozen=True)
class DismissReminderCommand:
    reminder_id: ReminderId


@dataclass(frozen=True)
class DeleteReminderCommand:
    reminder_id: ReminderId


# --- Projects ---


@dataclass(frozen=True)
class CreateProjectCommand:
    name: str
    color: str | None = None


@dataclass(frozen=True)
class UpdateProjectCommand:
    project_id: ProjectId
    name: str | Unset = UNSET
    color: str | None | Unset = UNSET

    def changes(self) -> ProjectChanges:
        return ProjectChanges(name=self.name, color=self.color)


@dataclass(frozen=True)
class ArchiveProjectCommand:
    project_id: ProjectId


@dataclass(frozen=True)
class UnarchiveProjectCommand:
    project_id: ProjectId


@dataclass(frozen=True)
class DeleteProjectCommand:
    project_id: ProjectId


# --- Tags ---


@dataclass(frozen=True)
class CreateTagCommand:
    name: str
    color: str | None = None


@dataclass(frozen=True)
class UpdateTagCommand:
    tag_id: TagId
    name: str | Unset = UNSET
    color: str | None | Unset = UNSET

    def changes(self) -> TagChanges:
        return TagChanges(name=self.name, color=self.color)


@dataclass(frozen=True)
class DeleteTagCommand:
    tag_id: TagId


# --- Queries ---


@dataclass(frozen=True)
class SearchTasksQuery:
    """Free-text task search. An unknown ``status`` string is ignored."""

    text: str
    project_id: ProjectId | None = None
    tag_ids: tuple[TagId, ...] = ()
    status: TaskStatus | str | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None


__all__ = [
    "ArchiveProjectCommand",
    "CancelTaskCommand",
    "CompleteTaskCommand",
    "CreateProjectCommand",
    "CreateReminderCommand",
    "CreateTagCommand",
    "CreateTaskCommand",
    "DeleteProjectCommand",
    "DeleteReminderCommand",
    "DeleteTagCommand",
    "DeleteTaskCommand",
    "DismissReminderCommand",
    "RemoveRecurrenceRuleCommand",
    "RequestContext",
    "SearchTasksQuery",
    "SetRecurrenceRuleCommand",
    "UnarchiveProjectCommand",
    "UncompleteTaskCommand",
    "UpdateProjectCommand",
    "UpdateReminderCommand",
    "UpdateTagCommand",
    "UpdateTaskCommand",
]
