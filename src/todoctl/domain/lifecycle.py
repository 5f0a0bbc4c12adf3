"""Task and reminder status lifecycles.

The transition maps are the static tables queried by
:func:`is_valid_transition`. The task mutators in
:mod:`todoctl.domain.task` are the enforcement surface and are
deliberately a little more permissive: ``cancel_task`` accepts a
completed task even though ``completed -> canceled`` is not listed here.
"""

from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    """Lifecycle status for tasks."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELED = "canceled"


class ReminderStatus(StrEnum):
    """Delivery status for reminders."""

    PENDING = "pending"
    SENT = "sent"
    DISMISSED = "dismissed"


# --- Transition maps ---

TASK_TRANSITIONS: dict[str, list[str]] = {
    "active": ["completed", "canceled"],
    "completed": ["active"],
    "canceled": ["active"],
}

REMINDER_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["sent", "dismissed"],
    "sent": ["dismissed"],
    "dismissed": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
