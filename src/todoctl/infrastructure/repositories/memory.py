"""Dict-backed repositories for tests and the ``memory`` store backend.

Each repository guards its dict with a lock so the reminder scheduler
thread and the caller can share one instance.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime

from todoctl.domain.ids import (
    ProjectId,
    RecurrenceRuleId,
    ReminderId,
    TagId,
    TaskId,
    WorkspaceId,
)
from todoctl.domain.lifecycle import ReminderStatus, TaskStatus
from todoctl.domain.project import Project
from todoctl.domain.recurrence import RecurrenceRule, RuleRemoval, RuleReplacement
from todoctl.domain.reminder import Reminder
from todoctl.domain.tag import Tag
from todoctl.domain.task import Task
from todoctl.infrastructure.repositories.base import TaskSearchFilters


def _by_due(task: Task) -> tuple[bool, datetime, str]:
    """Earliest due first; undated tasks sort last."""
    if task.due_at is None:
        return (True, task.created_at, task.id)
    return (False, task.due_at, task.id)


def _matches(task: Task, needle: str, filters: TaskSearchFilters) -> bool:
    if needle not in task.title.lower() and needle not in (task.notes or "").lower():
        return False
    if filters.project_id is not None and task.project_id != filters.project_id:
        return False
    if not set(filters.tag_ids) <= set(task.tag_ids):
        return False
    if filters.status is not None and task.status != filters.status:
        return False
    if filters.due_before is not None or filters.due_after is not None:
        if task.due_at is None:
            return False
        if filters.due_before is not None and task.due_at > filters.due_before:
            return False
        if filters.due_after is not None and task.due_at < filters.due_after:
            return False
    return True


class InMemoryTaskRepository:
    def __init__(self) -> None:
        self._tasks: dict[TaskId, Task] = {}
        self._lock = threading.RLock()

    def find_by_id(self, task_id: TaskId) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
        if task is not None and task.deleted_at is not None:
            return None
        return task

    def save(self, task: Task) -> None:
        with self._lock:
            self._tasks[task.id] = task

    def save_all(self, tasks: Iterable[Task]) -> None:
        with self._lock:
            for task in tasks:
                self._tasks[task.id] = task

    def delete(self, task_id: TaskId) -> None:
        with self._lock:
            self._tasks.pop(task_id, None)

    def _live(self, workspace_id: WorkspaceId) -> list[Task]:
        with self._lock:
            return [
                t
                for t in self._tasks.values()
                if t.workspace_id == workspace_id
                and t.deleted_at is None
                and t.status == TaskStatus.ACTIVE
            ]

    def find_inbox(self, workspace_id: WorkspaceId) -> list[Task]:
        found = [t for t in self._live(workspace_id) if t.project_id is None]
        return sorted(found, key=lambda t: t.created_at)

    def find_due_on_or_before(self, workspace_id: WorkspaceId, before: datetime) -> list[Task]:
        found = [
            t for t in self._live(workspace_id) if t.due_at is not None and t.due_at <= before
        ]
        return sorted(found, key=_by_due)

    def find_due_between(
        self, workspace_id: WorkspaceId, start: datetime, end: datetime
    ) -> list[Task]:
        found = [
            t for t in self._live(workspace_id) if t.due_at is not None and start <= t.due_at <= end
        ]
        return sorted(found, key=_by_due)

    def find_by_project(self, project_id: ProjectId) -> list[Task]:
        with self._lock:
            found = [
                t
                for t in self._tasks.values()
                if t.project_id == project_id and t.deleted_at is None
            ]
        return sorted(found, key=lambda t: (t.created_at, t.id))

    def find_by_tag(self, tag_id: TagId, workspace_id: WorkspaceId) -> list[Task]:
        with self._lock:
            found = [
                t
                for t in self._tasks.values()
                if t.workspace_id == workspace_id
                and t.deleted_at is None
                and tag_id in t.tag_ids
            ]
        return sorted(found, key=lambda t: (t.created_at, t.id))

    def search(
        self, workspace_id: WorkspaceId, text: str, filters: TaskSearchFilters
    ) -> list[Task]:
        needle = text.lower()
        with self._lock:
            candidates = [
                t
                for t in self._tasks.values()
                if t.workspace_id == workspace_id and t.deleted_at is None
            ]
        found = [t for t in candidates if _matches(t, needle, filters)]
        return sorted(found, key=_by_due)

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()


class InMemoryReminderRepository:
    def __init__(self) -> None:
        self._reminders: dict[ReminderId, Reminder] = {}
        self._lock = threading.RLock()

    def find_by_id(self, reminder_id: ReminderId) -> Reminder | None:
        with self._lock:
            return self._reminders.get(reminder_id)

    def save(self, reminder: Reminder) -> None:
        with self._lock:
            self._reminders[reminder.id] = reminder

    def delete(self, reminder_id: ReminderId) -> None:
        with self._lock:
            self._reminders.pop(reminder_id, None)

    def find_by_task(self, task_id: TaskId, workspace_id: WorkspaceId) -> list[Reminder]:
        with self._lock:
            found = [
                r
                for r in self._reminders.values()
                if r.task_id == task_id and r.workspace_id == workspace_id
            ]
        return sorted(found, key=lambda r: r.remind_at)

    def find_due(self, before: datetime) -> list[Reminder]:
        with self._lock:
            found = [
                r
                for r in self._reminders.values()
                if r.status == ReminderStatus.PENDING and r.remind_at <= before
            ]
        return sorted(found, key=lambda r: r.remind_at)

    def clear(self) -> None:
        with self._lock:
            self._reminders.clear()


class InMemoryRecurrenceRuleRepository:
    def __init__(self) -> None:
        self._rules: dict[RecurrenceRuleId, RecurrenceRule] = {}
        self._lock = threading.RLock()

    def find_by_id(self, rule_id: RecurrenceRuleId) -> RecurrenceRule | None:
        with self._lock:
            return self._rules.get(rule_id)

    def save(self, rule: RecurrenceRule) -> None:
        with self._lock:
            self._rules[rule.id] = rule

    def delete(self, rule_id: RecurrenceRuleId) -> None:
        with self._lock:
            self._rules.pop(rule_id, None)

    def clear(self) -> None:
        with self._lock:
            self._rules.clear()


class InMemoryRecurrenceRuleStore:
    """Applies rule plans against the two in-memory repositories under one lock."""

    def __init__(
        self, tasks: InMemoryTaskRepository, rules: InMemoryRecurrenceRuleRepository
    ) -> None:
        self._tasks = tasks
        self._rules = rules
        self._lock = threading.Lock()

    def replace_rule(self, plan: RuleReplacement) -> None:
        with self._lock:
            if plan.old_rule_id is not None:
                self._rules.delete(plan.old_rule_id)
            self._rules.save(plan.new_rule)
            self._tasks.save(plan.updated_task)

    def remove_rule(self, plan: RuleRemoval) -> None:
        with self._lock:
            self._rules.delete(plan.rule_id)
            self._tasks.save(plan.updated_task)


class InMemoryProjectRepository:
    def __init__(self) -> None:
        self._projects: dict[ProjectId, Project] = {}
        self._lock = threading.RLock()

    def find_by_id(self, project_id: ProjectId) -> Project | None:
        with self._lock:
            return self._projects.get(project_id)

    def save(self, project: Project) -> None:
        with self._lock:
            self._projects[project.id] = project

    def delete(self, project_id: ProjectId) -> None:
        with self._lock:
            self._projects.pop(project_id, None)

    def find_by_workspace(
        self, workspace_id: WorkspaceId, *, include_archived: bool = False
    ) -> list[Project]:
        with self._lock:
            found = [
                p
                for p in self._projects.values()
                if p.workspace_id == workspace_id and (include_archived or not p.archived)
            ]
        return sorted(found, key=lambda p: (p.created_at, p.id), reverse=True)

    def clear(self) -> None:
        with self._lock:
            self._projects.clear()


class InMemoryTagRepository:
    def __init__(self) -> None:
        self._tags: dict[TagId, Tag] = {}
        self._lock = threading.RLock()

    def find_by_id(self, tag_id: TagId) -> Tag | None:
        with self._lock:
            return self._tags.get(tag_id)

    def find_by_name(self, workspace_id: WorkspaceId, name: str) -> Tag | None:
        with self._lock:
            for tag in self._tags.values():
                if tag.workspace_id == workspace_id and tag.name == name:
                    return tag
        return None

    def save(self, tag: Tag) -> None:
        with self._lock:
            self._tags[tag.id] = tag

    def delete(self, tag_id: TagId) -> None:
        with self._lock:
            self._tags.pop(tag_id, None)

    def find_by_workspace(self, workspace_id: WorkspaceId) -> list[Tag]:
        with self._lock:
            found = [t for t in self._tags.values() if t.workspace_id == workspace_id]
        return sorted(found, key=lambda t: (t.name, t.id))

    def clear(self) -> None:
        with self._lock:
            self._tags.clear()
