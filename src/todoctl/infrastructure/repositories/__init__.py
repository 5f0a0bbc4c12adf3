"""Task, reminder, recurrence-rule, project and tag repositories (memory and SQLite)."""

from todoctl.infrastructure.repositories.base import (
    ProjectRepository,
    RecurrenceRuleRepository,
    RecurrenceRuleStore,
    ReminderRepository,
    TagRepository,
    TaskRepository,
    TaskSearchFilters,
)
from todoctl.infrastructure.repositories.memory import (
    InMemoryProjectRepository,
    InMemoryRecurrenceRuleRepository,
    InMemoryRecurrenceRuleStore,
    InMemoryReminderRepository,
    InMemoryTagRepository,
    InMemoryTaskRepository,
)
from todoctl.infrastructure.repositories.sql import (
    SqlProjectRepository,
    SqlRecurrenceRuleRepository,
    SqlRecurrenceRuleStore,
    SqlReminderRepository,
    SqlTagRepository,
    SqlTaskRepository,
)

__all__ = [
    "InMemoryProjectRepository",
    "InMemoryRecurrenceRuleRepository",
    "InMemoryRecurrenceRuleStore",
    "InMemoryReminderRepository",
    "InMemoryTagRepository",
    "InMemoryTaskRepository",
    "ProjectRepository",
    "RecurrenceRuleRepository",
    "RecurrenceRuleStore",
    "ReminderRepository",
    "SqlProjectRepository",
    "SqlRecurrenceRuleRepository",
    "SqlRecurrenceRuleStore",
    "SqlReminderRepository",
    "SqlTagRepository",
    "SqlTaskRepository",
    "TagRepository",
    "TaskRepository",
    "TaskSearchFilters",
]
