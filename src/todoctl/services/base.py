"""BaseService: abstract foundation for all todoctl services.

Every service receives a :class:`Store` at construction time. The Store
provides the repositories, the clock, id generation, the event bus, and
the notification channel.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from todoctl.domain.errors import NotFoundError
from todoctl.domain.project import Project
from todoctl.domain.reminder import Reminder
from todoctl.domain.tag import Tag
from todoctl.domain.task import Task
from todoctl.domain.types import EntityKind

if TYPE_CHECKING:
    from todoctl.domain.events import DomainEvent
    from todoctl.infrastructure.store import Store
    from todoctl.services.commands import RequestContext

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Services follow GATHER → DECIDE → ACT: load entities through the
    store, run pure domain rules, then persist and publish.

    Usage::

        class TaskService(BaseService):
            def complete(self, cmd, ctx) -> ServiceResult:
                task = self._load_task(cmd.task_id, ctx)
                ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    def _load_task(self, task_id: str, ctx: RequestContext) -> Task | NotFoundError:
        """The live task, or NOT_FOUND when missing, deleted, or in another workspace."""
        task = self._store.tasks.find_by_id(task_id)  # type: ignore[arg-type]
        if task is None or task.workspace_id != ctx.workspace_id:
            return NotFoundError(entity=EntityKind.TASK, id=task_id)
        return task

    def _load_reminder(self, reminder_id: str, ctx: RequestContext) -> Reminder | NotFoundError:
        reminder = self._store.reminders.find_by_id(reminder_id)  # type: ignore[arg-type]
        if reminder is None or reminder.workspace_id != ctx.workspace_id:
            return NotFoundError(entity=EntityKind.REMINDER, id=reminder_id)
        return reminder

    def _load_project(self, project_id: str, ctx: RequestContext) -> Project | NotFoundError:
        project = self._store.projects.find_by_id(project_id)  # type: ignore[arg-type]
        if project is None or project.workspace_id != ctx.workspace_id:
            return NotFoundError(entity=EntityKind.PROJECT, id=project_id)
        return project

    def _load_tag(self, tag_id: str, ctx: RequestContext) -> Tag | NotFoundError:
        tag = self._store.tags.find_by_id(tag_id)  # type: ignore[arg-type]
        if tag is None or tag.workspace_id != ctx.workspace_id:
            return NotFoundError(entity=EntityKind.TAG, id=tag_id)
        return tag

    def _dispatch_event(self, event: DomainEvent, warnings: list[str]) -> None:
        """Publish a domain event. No-op if event bus not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._store.event_bus
        if bus is None:
            return
        try:
            bus.publish(event)
        except Exception:
            logger.debug("Event dispatch failed for %s", event.type, exc_info=True)
            warnings.append(f"Event dispatch failed for {event.hook_name}")
