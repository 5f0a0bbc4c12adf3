"""SQLite database engine and schema via SQLAlchemy Core."""

from todoctl.infrastructure.database.engine import create_db_engine, init_database
from todoctl.infrastructure.database.schema import (
    event_wal,
    metadata,
    projects,
    recurrence_rules,
    reminders,
    tags,
    task_tags,
    tasks,
)

__all__ = [
    "create_db_engine",
    "event_wal",
    "init_database",
    "metadata",
    "projects",
    "recurrence_rules",
    "reminders",
    "tags",
    "task_tags",
    "tasks",
]
