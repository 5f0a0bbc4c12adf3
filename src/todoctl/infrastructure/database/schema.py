"""SQLAlchemy Core table definitions for the todoctl database.

Timestamps are stored as fixed-width ISO-8601 UTC text (microsecond
precision) so that lexical order matches chronological order and range
filters can run in SQL.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

tasks = Table(
    "tasks",
    metadata,
    Column("id", Text, primary_key=True),
    Column("title", Text, nullable=False),
    Column("status", Text, nullable=False),
    Column("notes", Text),
    Column("project_id", Text),
    Column("due_at", Text),
    Column("completed_at", Text),
    Column("deleted_at", Text),
    Column("recurrence_rule_id", Text),
    Column("owner_user_id", Text, nullable=False),
    Column("workspace_id", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

task_tags = Table(
    "task_tags",
    metadata,
    Column("task_id", Text, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
    Column("tag_id", Text, nullable=False),
    Column("position", Integer, nullable=False),
    UniqueConstraint("task_id", "tag_id"),
)

projects = Table(
    "projects",
    metadata,
    Column("id", Text, primary_key=True),
    Column("workspace_id", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("color", Text),
    Column("archived", Boolean, nullable=False, default=False, server_default="0"),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

tags = Table(
    "tags",
    metadata,
    Column("id", Text, primary_key=True),
    Column("workspace_id", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("color", Text),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
    UniqueConstraint("workspace_id", "name"),
)

recurrence_rules = Table(
    "recurrence_rules",
    metadata,
    Column("id", Text, primary_key=True),
    Column("frequency", Text, nullable=False),
    Column("interval", Integer, nullable=False, default=1, server_default="1"),
    Column("days_of_week", Text),  # JSON array
    Column("day_of_month", Integer),
    Column("mode", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

# task_id is a weak reference: a reminder may outlive its task.
reminders = Table(
    "reminders",
    metadata,
    Column("id", Text, primary_key=True),
    Column("task_id", Text, nullable=False),
    Column("workspace_id", Text, nullable=False),
    Column("remind_at", Text, nullable=False),
    Column("status", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

event_wal = Table(
    "event_wal",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False),
    Column("error", Text),
    Column("retries", Integer, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("completed", Text),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_tasks_workspace_status", tasks.c.workspace_id, tasks.c.status)
Index("ix_tasks_due_at", tasks.c.due_at)
Index("ix_tasks_project", tasks.c.project_id)
Index("ix_task_tags_task", task_tags.c.task_id)
Index("ix_task_tags_tag", task_tags.c.tag_id)
Index("ix_projects_workspace", projects.c.workspace_id, projects.c.archived)
Index("ix_reminders_status_remind_at", reminders.c.status, reminders.c.remind_at)
Index("ix_reminders_task", reminders.c.task_id)
Index("ix_event_wal_status", event_wal.c.status)
