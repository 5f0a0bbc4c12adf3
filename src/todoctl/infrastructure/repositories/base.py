"""Repository contracts shared by the memory and SQL backends.

Repositories hold whole entity values: ``save`` upserts, ``find_*``
returns current snapshots, and every backend gives read-your-writes
consistency. Soft-deleted tasks are invisible to every task finder.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from todoctl.domain.ids import (
    ProjectId,
    RecurrenceRuleId,
    ReminderId,
    TagId,
    TaskId,
    WorkspaceId,
)
from todoctl.domain.lifecycle import TaskStatus
from todoctl.domain.project import Project
from todoctl.domain.recurrence import RecurrenceRule, RuleRemoval, RuleReplacement
from todoctl.domain.reminder import Reminder
from todoctl.domain.tag import Tag
from todoctl.domain.task import Task


@dataclass(frozen=True)
class TaskSearchFilters:
    """Optional narrowing for :meth:`TaskRepository.search`.

    Every tag in ``tag_ids`` must be on the task. Either due bound, when
    given, excludes tasks without a due date; both bounds are inclusive.
    """

    project_id: ProjectId | None = None
    tag_ids: tuple[TagId, ...] = ()
    status: TaskStatus | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None


class TaskRepository(Protocol):
    def find_by_id(self, task_id: TaskId) -> Task | None: ...

    def save(self, task: Task) -> None: ...

    def save_all(self, tasks: Iterable[Task]) -> None: ...

    def delete(self, task_id: TaskId) -> None: ...

    def find_inbox(self, workspace_id: WorkspaceId) -> list[Task]:
        """Active tasks with no project, oldest first."""
        ...

    def find_due_on_or_before(self, workspace_id: WorkspaceId, before: datetime) -> list[Task]:
        """Active tasks with ``due_at <= before``, earliest due first."""
        ...

    def find_due_between(
        self, workspace_id: WorkspaceId, start: datetime, end: datetime
    ) -> list[Task]:
        """Active tasks with ``start <= due_at <= end``, earliest due first."""
        ...

    def find_by_project(self, project_id: ProjectId) -> list[Task]:
        """Tasks filed under *project_id* in any status, oldest first."""
        ...

    def find_by_tag(self, tag_id: TagId, workspace_id: WorkspaceId) -> list[Task]:
        """Tasks carrying *tag_id* in any status, oldest first."""
        ...

    def search(
        self, workspace_id: WorkspaceId, text: str, filters: TaskSearchFilters
    ) -> list[Task]:
        """Case-insensitive substring match on title or notes, earliest due first."""
        ...


class ProjectRepository(Protocol):
    def find_by_id(self, project_id: ProjectId) -> Project | None: ...

    def save(self, project: Project) -> None: ...

    def delete(self, project_id: ProjectId) -> None: ...

    def find_by_workspace(
        self, workspace_id: WorkspaceId, *, include_archived: bool = False
    ) -> list[Project]:
        """Newest first."""
        ...


class TagRepository(Protocol):
    def find_by_id(self, tag_id: TagId) -> Tag | None: ...

    def find_by_name(self, workspace_id: WorkspaceId, name: str) -> Tag | None: ...

    def save(self, tag: Tag) -> None: ...

    def delete(self, tag_id: TagId) -> None: ...

    def find_by_workspace(self, workspace_id: WorkspaceId) -> list[Tag]:
        """Alphabetical by name."""
        ...


class ReminderRepository(Protocol):
    def find_by_id(self, reminder_id: ReminderId) -> Reminder | None: ...

    def save(self, reminder: Reminder) -> None: ...

    def delete(self, reminder_id: ReminderId) -> None: ...

    def find_by_task(self, task_id: TaskId, workspace_id: WorkspaceId) -> list[Reminder]:
        """All reminders of a task, ascending ``remind_at``."""
        ...

    def find_due(self, before: datetime) -> list[Reminder]:
        """Pending reminders with ``remind_at <= before``, ascending ``remind_at``."""
        ...


class RecurrenceRuleRepository(Protocol):
    def find_by_id(self, rule_id: RecurrenceRuleId) -> RecurrenceRule | None: ...

    def save(self, rule: RecurrenceRule) -> None: ...

    def delete(self, rule_id: RecurrenceRuleId) -> None: ...


class RecurrenceRuleStore(Protocol):
    """Applies paired rule/task changes as one unit."""

    def replace_rule(self, plan: RuleReplacement) -> None: ...

    def remove_rule(self, plan: RuleRemoval) -> None: ...
