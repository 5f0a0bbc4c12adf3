"""Shared domain enums and the "not provided" sentinel.

Update commands carry tri-state fields: :data:`UNSET` leaves a field
alone, ``None`` clears it, and any other value replaces it. ``UNSET`` is
a single-member enum so it narrows cleanly under a type checker.
"""

from __future__ import annotations

from enum import Enum, StrEnum
from typing import Literal


class EntityKind(StrEnum):
    """Entity names used in errors and events."""

    TASK = "Task"
    REMINDER = "Reminder"
    RECURRENCE_RULE = "RecurrenceRule"
    PROJECT = "Project"
    TAG = "Tag"


class RecurrenceFrequency(StrEnum):
    """How often a recurring task repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RecurrenceMode(StrEnum):
    """Which instant the next occurrence is anchored to."""

    FIXED_SCHEDULE = "fixedSchedule"
    FROM_COMPLETION = "fromCompletion"


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset.UNSET

type Unset = Literal[_Unset.UNSET]
