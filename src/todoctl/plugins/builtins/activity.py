"""Built-in activity log plugin.

Hooks every domain event and records it as a structured log line on the
``todoctl.activity`` logger, so ``-v`` shows what each command changed.
"""

from __future__ import annotations

from typing import Any

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("todoctl")


class ActivityLogPlugin:
    """Mirror domain events into the structured log."""

    def __init__(self, logger: Any | None = None) -> None:
        self._log = logger or structlog.get_logger("todoctl.activity")

    def _record(self, event: str, **fields: Any) -> None:
        self._log.debug(event, **{k: v for k, v in fields.items() if v is not None})

    @hookimpl
    def post_task_created(
        self,
        task_id: str,
        title: str,
        workspace_id: str,
        owner_user_id: str,
        project_id: str | None,
        occurred_at: str,
    ) -> None:
        self._record(
            "task.created",
            task_id=task_id,
            title=title,
            workspace_id=workspace_id,
            project_id=project_id,
            occurred_at=occurred_at,
        )

    @hookimpl
    def post_task_updated(self, task_id: str, fields_changed: list[str], occurred_at: str) -> None:
        self._record(
            "task.updated", task_id=task_id, fields=fields_changed, occurred_at=occurred_at
        )

    @hookimpl
    def post_task_completed(
        self,
        task_id: str,
        completed_at: str,
        next_task_id: str | None,
        occurred_at: str,
    ) -> None:
        self._record(
            "task.completed", task_id=task_id, next_task_id=next_task_id, occurred_at=occurred_at
        )

    @hookimpl
    def post_task_uncompleted(self, task_id: str, occurred_at: str) -> None:
        self._record("task.reopened", task_id=task_id, occurred_at=occurred_at)

    @hookimpl
    def post_task_canceled(self, task_id: str, occurred_at: str) -> None:
        self._record("task.canceled", task_id=task_id, occurred_at=occurred_at)

    @hookimpl
    def post_task_deleted(self, task_id: str, occurred_at: str) -> None:
        self._record("task.deleted", task_id=task_id, occurred_at=occurred_at)

    @hookimpl
    def post_reminder_created(
        self, reminder_id: str, task_id: str, remind_at: str, occurred_at: str
    ) -> None:
        self._record(
            "reminder.created",
            reminder_id=reminder_id,
            task_id=task_id,
            remind_at=remind_at,
            occurred_at=occurred_at,
        )

    @hookimpl
    def post_reminder_dismissed(self, reminder_id: str, task_id: str, occurred_at: str) -> None:
        self._record(
            "reminder.dismissed", reminder_id=reminder_id, task_id=task_id, occurred_at=occurred_at
        )

    @hookimpl
    def post_reminder_triggered(self, reminder_id: str, task_id: str, occurred_at: str) -> None:
        self._record(
            "reminder.triggered", reminder_id=reminder_id, task_id=task_id, occurred_at=occurred_at
        )

    @hookimpl
    def post_recurrence_rule_set(
        self, recurrence_rule_id: str, task_id: str, occurred_at: str
    ) -> None:
        self._record(
            "recurrence.set", rule_id=recurrence_rule_id, task_id=task_id, occurred_at=occurred_at
        )

    @hookimpl
    def post_recurrence_rule_removed(
        self, recurrence_rule_id: str, task_id: str, occurred_at: str
    ) -> None:
        self._record(
            "recurrence.removed",
            rule_id=recurrence_rule_id,
            task_id=task_id,
            occurred_at=occurred_at,
        )

    @hookimpl
    def post_project_created(
        self, project_id: str, name: str, workspace_id: str, occurred_at: str
    ) -> None:
        self._record(
            "project.created",
            project_id=project_id,
            name=name,
            workspace_id=workspace_id,
            occurred_at=occurred_at,
        )

    @hookimpl
    def post_project_updated(
        self, project_id: str, fields_changed: list[str], occurred_at: str
    ) -> None:
        self._record(
            "project.updated", project_id=project_id, fields=fields_changed, occurred_at=occurred_at
        )

    @hookimpl
    def post_project_archived(self, project_id: str, occurred_at: str) -> None:
        self._record("project.archived", project_id=project_id, occurred_at=occurred_at)

    @hookimpl
    def post_project_unarchived(self, project_id: str, occurred_at: str) -> None:
        self._record("project.unarchived", project_id=project_id, occurred_at=occurred_at)

    @hookimpl
    def post_project_deleted(
        self, project_id: str, detached_task_ids: list[str], occurred_at: str
    ) -> None:
        self._record(
            "project.deleted",
            project_id=project_id,
            detached=len(detached_task_ids),
            occurred_at=occurred_at,
        )

    @hookimpl
    def post_tag_created(self, tag_id: str, name: str, workspace_id: str, occurred_at: str) -> None:
        self._record(
            "tag.created",
            tag_id=tag_id,
            name=name,
            workspace_id=workspace_id,
            occurred_at=occurred_at,
        )

    @hookimpl
    def post_tag_updated(self, tag_id: str, fields_changed: list[str], occurred_at: str) -> None:
        self._record("tag.updated", tag_id=tag_id, fields=fields_changed, occurred_at=occurred_at)

    @hookimpl
    def post_tag_deleted(self, tag_id: str, untagged_task_ids: list[str], occurred_at: str) -> None:
        self._record(
            "tag.deleted", tag_id=tag_id, untagged=len(untagged_task_ids), occurred_at=occurred_at
        )
