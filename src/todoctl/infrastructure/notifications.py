"""Notification channels for due reminders.

A channel is called only for a triage ``send`` outcome. Raising from
``send`` marks the delivery as failed; the reminder then stays pending
and is retried on the next scan.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

from todoctl.config.logging import DELIVERY_EVENT, DELIVERY_LOGGER
from todoctl.domain.reminder import Reminder
from todoctl.domain.task import Task

if TYPE_CHECKING:
    from todoctl.plugins.manager import PluginManager


class NotificationChannel(Protocol):
    def send(self, reminder: Reminder, task: Task) -> None: ...


class LogNotificationChannel:
    """Write each delivery as a structured ``reminder.due`` log line."""

    def __init__(self, logger: Any | None = None) -> None:
        self._log = logger or structlog.get_logger(DELIVERY_LOGGER)

    def send(self, reminder: Reminder, task: Task) -> None:
        self._log.info(
            DELIVERY_EVENT,
            reminder_id=reminder.id,
            task_id=task.id,
            title=task.title,
            remind_at=reminder.remind_at.isoformat(),
        )


class PluginNotificationChannel:
    """Deliver through the ``notify_reminder`` hook of every loaded plugin."""

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager

    def send(self, reminder: Reminder, task: Task) -> None:
        self._pm.hook.notify_reminder(
            reminder_id=reminder.id,
            task_id=task.id,
            title=task.title,
            remind_at=reminder.remind_at.isoformat(),
            due_at=task.due_at.isoformat() if task.due_at is not None else None,
        )
