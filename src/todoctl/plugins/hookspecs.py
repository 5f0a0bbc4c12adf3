"""Pluggy hook specifications for todoctl domain events and notifications.

Nineteen ``post_*`` hooks mirror the domain events one-to-one; each hook
receives the event's fields as keyword arguments, with timestamps as
ISO-8601 strings. ``notify_reminder`` is called synchronously for every
reminder the periodic scan decides to send.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("todoctl")


class TodoctlHookSpec:
    """Hook specifications for the todoctl plugin system."""

    # --- Tasks ---

    @hookspec
    def post_task_created(
        self,
        task_id: str,
        title: str,
        workspace_id: str,
        owner_user_id: str,
        project_id: str | None,
        occurred_at: str,
    ) -> None:
        """Called after a task is created (including recurring successors)."""

    @hookspec
    def post_task_updated(self, task_id: str, fields_changed: list[str], occurred_at: str) -> None:
        """Called after task fields change."""

    @hookspec
    def post_task_completed(
        self,
        task_id: str,
        completed_at: str,
        next_task_id: str | None,
        occurred_at: str,
    ) -> None:
        """Called after a task is completed."""

    @hookspec
    def post_task_uncompleted(self, task_id: str, occurred_at: str) -> None:
        """Called after a completed task is reopened."""

    @hookspec
    def post_task_canceled(self, task_id: str, occurred_at: str) -> None:
        """Called after a task is canceled."""

    @hookspec
    def post_task_deleted(self, task_id: str, occurred_at: str) -> None:
        """Called after a task is soft-deleted."""

    # --- Reminders ---

    @hookspec
    def post_reminder_created(
        self, reminder_id: str, task_id: str, remind_at: str, occurred_at: str
    ) -> None:
        """Called after a reminder is scheduled."""

    @hookspec
    def post_reminder_dismissed(self, reminder_id: str, task_id: str, occurred_at: str) -> None:
        """Called after a reminder is dismissed by the user."""

    @hookspec
    def post_reminder_triggered(self, reminder_id: str, task_id: str, occurred_at: str) -> None:
        """Called after a due reminder has been delivered."""

    # --- Recurrence ---

    @hookspec
    def post_recurrence_rule_set(
        self, recurrence_rule_id: str, task_id: str, occurred_at: str
    ) -> None:
        """Called after a task's recurrence rule is installed or replaced."""

    @hookspec
    def post_recurrence_rule_removed(
        self, recurrence_rule_id: str, task_id: str, occurred_at: str
    ) -> None:
        """Called after a task's recurrence rule is removed."""

    # --- Projects ---

    @hookspec
    def post_project_created(
        self, project_id: str, name: str, workspace_id: str, occurred_at: str
    ) -> None:
        """Called after a project is created."""

    @hookspec
    def post_project_updated(
        self, project_id: str, fields_changed: list[str], occurred_at: str
    ) -> None:
        """Called after a project is renamed or recolored."""

    @hookspec
    def post_project_archived(self, project_id: str, occurred_at: str) -> None:
        """Called after a project is archived."""

    @hookspec
    def post_project_unarchived(self, project_id: str, occurred_at: str) -> None:
        """Called after an archived project is restored."""

    @hookspec
    def post_project_deleted(
        self, project_id: str, detached_task_ids: list[str], occurred_at: str
    ) -> None:
        """Called after a project is deleted and its tasks moved back to the inbox."""

    # --- Tags ---

    @hookspec
    def post_tag_created(self, tag_id: str, name: str, workspace_id: str, occurred_at: str) -> None:
        """Called after a tag is created."""

    @hookspec
    def post_tag_updated(self, tag_id: str, fields_changed: list[str], occurred_at: str) -> None:
        """Called after a tag is renamed or recolored."""

    @hookspec
    def post_tag_deleted(self, tag_id: str, untagged_task_ids: list[str], occurred_at: str) -> None:
        """Called after a tag is deleted and removed from its tasks."""

    # --- Delivery ---

    @hookspec
    def notify_reminder(
        self,
        reminder_id: str,
        task_id: str,
        title: str,
        remind_at: str,
        due_at: str | None,
    ) -> None:
        """Deliver a due reminder. Exceptions leave the reminder pending."""
