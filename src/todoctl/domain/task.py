"""Task entity and its lifecycle operations.

Every operation is pure: it takes a :class:`Task` value plus an explicit
``now`` and returns a new value inside :class:`~todoctl.domain.result.Ok`
or a typed error inside :class:`~todoctl.domain.result.Err`. Tasks are
never mutated in place and never physically deleted here; deletion sets
``deleted_at``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator

from todoctl.domain.calendar import as_utc, same_utc_day
from todoctl.domain.errors import InvalidStateTransitionError, ValidationError, invalid_transition
from todoctl.domain.ids import ProjectId, RecurrenceRuleId, TagId, TaskId, UserId, WorkspaceId
from todoctl.domain.lifecycle import TASK_TRANSITIONS, TaskStatus, is_valid_transition
from todoctl.domain.result import Err, Ok, Result
from todoctl.domain.types import UNSET, EntityKind, Unset
from todoctl.domain.validation import validate_title


class Task(BaseModel):
    """A unit of work owned by one user inside one workspace."""

    model_config = ConfigDict(frozen=True)

    id: TaskId
    title: str
    status: TaskStatus = TaskStatus.ACTIVE
    notes: str | None = None
    project_id: ProjectId | None = None
    due_at: datetime | None = None
    tag_ids: tuple[TagId, ...] = ()
    completed_at: datetime | None = None
    deleted_at: datetime | None = None
    recurrence_rule_id: RecurrenceRuleId | None = None
    owner_user_id: UserId
    workspace_id: WorkspaceId
    created_at: datetime
    updated_at: datetime

    @field_validator("due_at", "completed_at", "deleted_at", "created_at", "updated_at")
    @classmethod
    def _normalize_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class CreateTaskParams:
    """Everything :func:`create_task` needs, as plain data."""

    task_id: TaskId
    title: str
    now: datetime
    owner_user_id: UserId
    workspace_id: WorkspaceId
    project_id: ProjectId | None = None
    due_at: datetime | None = None
    notes: str | None = None
    tag_ids: tuple[TagId, ...] = ()
    recurrence_rule_id: RecurrenceRuleId | None = None


@dataclass(frozen=True)
class TaskChanges:
    """Field updates for :func:`update_task`.

    ``UNSET`` leaves a field alone, ``None`` clears it, a value replaces it.
    ``title`` cannot be cleared. Clearing ``tag_ids`` leaves an empty tuple.
    """

    title: str | Unset = UNSET
    notes: str | None | Unset = UNSET
    project_id: ProjectId | None | Unset = UNSET
    due_at: datetime | None | Unset = UNSET
    tag_ids: tuple[TagId, ...] | None | Unset = field(default=UNSET)

    @property
    def is_empty(self) -> bool:
        return all(
            value is UNSET
            for value in (self.title, self.notes, self.project_id, self.due_at, self.tag_ids)
        )


def _normalize_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    trimmed = notes.strip()
    return trimmed or None


def _normalize_tags(tag_ids: Iterable[TagId] | None) -> tuple[TagId, ...]:
    if not tag_ids:
        return ()
    return tuple(dict.fromkeys(tag_ids))


# --- Construction ---


def create_task(
    title: str,
    now: datetime,
    owner_user_id: UserId,
    workspace_id: WorkspaceId,
    *,
    task_id: TaskId,
    project_id: ProjectId | None = None,
    due_at: datetime | None = None,
    notes: str | None = None,
    tag_ids: Iterable[TagId] = (),
    recurrence_rule_id: RecurrenceRuleId | None = None,
) -> Result[Task, ValidationError]:
    """Validate the title and build a new active task."""
    title_result = validate_title(title)
    if isinstance(title_result, Err):
        return title_result
    now = as_utc(now)
    return Ok(
        Task(
            id=task_id,
            title=title_result.value,
            status=TaskStatus.ACTIVE,
            notes=_normalize_notes(notes),
            project_id=project_id,
            due_at=due_at,
            tag_ids=_normalize_tags(tag_ids),
            recurrence_rule_id=recurrence_rule_id,
            owner_user_id=owner_user_id,
            workspace_id=workspace_id,
            created_at=now,
            updated_at=now,
        )
    )


def create_task_from_params(params: CreateTaskParams) -> Result[Task, ValidationError]:
    return create_task(
        params.title,
        params.now,
        params.owner_user_id,
        params.workspace_id,
        task_id=params.task_id,
        project_id=params.project_id,
        due_at=params.due_at,
        notes=params.notes,
        tag_ids=params.tag_ids,
        recurrence_rule_id=params.recurrence_rule_id,
    )


# --- Status transitions ---


def complete_task(task: Task, now: datetime) -> Result[Task, InvalidStateTransitionError]:
    if task.status != TaskStatus.ACTIVE:
        return Err(
            invalid_transition(
                EntityKind.TASK,
                task.status,
                TaskStatus.COMPLETED,
                f"Cannot complete a task that is {task.status}",
            )
        )
    now = as_utc(now)
    return Ok(
        task.model_copy(
            update={"status": TaskStatus.COMPLETED, "completed_at": now, "updated_at": now}
        )
    )


def uncomplete_task(task: Task, now: datetime) -> Result[Task, InvalidStateTransitionError]:
    if task.status != TaskStatus.COMPLETED:
        return Err(
            invalid_transition(
                EntityKind.TASK,
                task.status,
                TaskStatus.ACTIVE,
                f"Cannot uncomplete a task that is {task.status}",
            )
        )
    return Ok(
        task.model_copy(
            update={"status": TaskStatus.ACTIVE, "completed_at": None, "updated_at": as_utc(now)}
        )
    )


def cancel_task(task: Task, now: datetime) -> Result[Task, InvalidStateTransitionError]:
    """Cancel an active or completed task. ``completed_at`` is left as is."""
    if task.status == TaskStatus.CANCELED:
        return Err(
            invalid_transition(
                EntityKind.TASK,
                task.status,
                TaskStatus.CANCELED,
                "Task is already canceled",
            )
        )
    return Ok(task.model_copy(update={"status": TaskStatus.CANCELED, "updated_at": as_utc(now)}))


def delete_task(task: Task, now: datetime) -> Result[Task, InvalidStateTransitionError]:
    """Soft-delete *task*. Deletion is terminal."""
    if task.deleted_at is not None:
        return Err(
            invalid_transition(EntityKind.TASK, "deleted", "deleted", "Task is already deleted")
        )
    now = as_utc(now)
    return Ok(task.model_copy(update={"deleted_at": now, "updated_at": now}))


# --- Field updates ---


def update_task(
    task: Task, changes: TaskChanges, now: datetime
) -> Result[Task, ValidationError]:
    """Apply *changes* to *task*. Allowed in every status."""
    update: dict[str, object] = {"updated_at": as_utc(now)}

    if changes.title is not UNSET:
        title_result = validate_title(changes.title)
        if isinstance(title_result, Err):
            return title_result
        update["title"] = title_result.value
    if changes.notes is not UNSET:
        update["notes"] = _normalize_notes(changes.notes)
    if changes.project_id is not UNSET:
        update["project_id"] = changes.project_id
    if changes.due_at is not UNSET:
        update["due_at"] = as_utc(changes.due_at) if changes.due_at is not None else None
    if changes.tag_ids is not UNSET:
        update["tag_ids"] = _normalize_tags(changes.tag_ids)

    return Ok(task.model_copy(update=update))


def link_recurrence_rule(task: Task, rule_id: RecurrenceRuleId, now: datetime) -> Task:
    return task.model_copy(update={"recurrence_rule_id": rule_id, "updated_at": as_utc(now)})


def unlink_recurrence_rule(task: Task, now: datetime) -> Task:
    return task.model_copy(update={"recurrence_rule_id": None, "updated_at": as_utc(now)})


# --- Queries ---


def is_overdue(task: Task, now: datetime) -> bool:
    return (
        task.status == TaskStatus.ACTIVE
        and task.due_at is not None
        and task.due_at < as_utc(now)
    )


def is_due_on(task: Task, day: datetime | date) -> bool:
    """True when ``due_at`` falls on the UTC calendar day of *day*, any status."""
    if task.due_at is None:
        return False
    return same_utc_day(task.due_at, day)


def can_transition(current: TaskStatus | str, target: TaskStatus | str) -> bool:
    """Static transition check; ``cancel_task`` also accepts completed tasks."""
    return is_valid_transition(str(current), str(target), TASK_TRANSITIONS)
