"""Shared service-layer helper functions: entity → payload dicts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from todoctl.domain.project import Project
from todoctl.domain.recurrence import RecurrenceRule
from todoctl.domain.reminder import Reminder
from todoctl.domain.tag import Tag
from todoctl.domain.task import Task, is_overdue


def iso(value: datetime | None) -> str | None:
    """ISO 8601 text for *value*, or None."""
    return value.isoformat() if value is not None else None


def task_to_dict(task: Task, now: datetime | None = None) -> dict[str, Any]:
    """Plain dict for :class:`~todoctl.services.contracts.TaskPayload`.

    ``overdue`` is only computed when *now* is given.
    """
    return {
        "id": task.id,
        "title": task.title,
        "status": str(task.status),
        "notes": task.notes,
        "project_id": task.project_id,
        "due_at": iso(task.due_at),
        "tag_ids": list(task.tag_ids),
        "completed_at": iso(task.completed_at),
        "deleted_at": iso(task.deleted_at),
        "recurrence_rule_id": task.recurrence_rule_id,
        "owner_user_id": task.owner_user_id,
        "workspace_id": task.workspace_id,
        "created_at": iso(task.created_at),
        "updated_at": iso(task.updated_at),
        "overdue": is_overdue(task, now) if now is not None else False,
    }


def reminder_to_dict(reminder: Reminder) -> dict[str, Any]:
    return {
        "id": reminder.id,
        "task_id": reminder.task_id,
        "workspace_id": reminder.workspace_id,
        "remind_at": iso(reminder.remind_at),
        "status": str(reminder.status),
        "created_at": iso(reminder.created_at),
        "updated_at": iso(reminder.updated_at),
    }


def rule_to_dict(rule: RecurrenceRule) -> dict[str, Any]:
    return {
        "id": rule.id,
        "frequency": str(rule.frequency),
        "interval": rule.interval,
        "days_of_week": list(rule.days_of_week) if rule.days_of_week is not None else None,
        "day_of_month": rule.day_of_month,
        "mode": str(rule.mode),
        "created_at": iso(rule.created_at),
        "updated_at": iso(rule.updated_at),
    }


def changed_fields(before: Task, after: Task) -> list[str]:
    """Names of user-editable fields whose value differs."""
    fields = ("title", "notes", "project_id", "due_at", "tag_ids")
    return [name for name in fields if getattr(before, name) != getattr(after, name)]


def project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "workspace_id": project.workspace_id,
        "name": project.name,
        "color": project.color,
        "archived": project.archived,
        "created_at": iso(project.created_at),
        "updated_at": iso(project.updated_at),
    }


def tag_to_dict(tag: Tag) -> dict[str, Any]:
    return {
        "id": tag.id,
        "workspace_id": tag.workspace_id,
        "name": tag.name,
        "color": tag.color,
        "created_at": iso(tag.created_at),
        "updated_at": iso(tag.updated_at),
    }


def named_fields_changed(before: Project | Tag, after: Project | Tag) -> list[str]:
    """Changed ``name``/``color`` on a project or tag."""
    return [name for name in ("name", "color") if getattr(before, name) != getattr(after, name)]
