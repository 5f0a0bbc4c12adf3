"""Store: the single collaborator bundle injected into every service.

A Store owns the repositories, the recurrence-rule store, the clock,
the id generator, the event bus, and the notification channel. Two
backends exist:

- **sqlite**: SQLAlchemy Core repositories over one WAL-mode database,
  with the WAL-backed :class:`~todoctl.plugins.event_bus.EventBus`.
- **memory**: dict-backed repositories and an
  :class:`~todoctl.plugins.event_bus.InMemoryEventBus`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from todoctl.infrastructure.clock import Clock, SystemClock
from todoctl.infrastructure.ids import IdGenerator, UuidIdGenerator
from todoctl.infrastructure.notifications import (
    LogNotificationChannel,
    NotificationChannel,
    PluginNotificationChannel,
)
from todoctl.infrastructure.repositories.base import (
    ProjectRepository,
    RecurrenceRuleRepository,
    RecurrenceRuleStore,
    ReminderRepository,
    TagRepository,
    TaskRepository,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from todoctl.config.settings import TodoSettings
    from todoctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass
class Store:
    """Repositories plus the clock, ids, event bus, and notification channel."""

    tasks: TaskRepository
    reminders: ReminderRepository
    rules: RecurrenceRuleRepository
    rule_store: RecurrenceRuleStore
    projects: ProjectRepository
    tags: TagRepository
    clock: Clock = field(default_factory=SystemClock)
    ids: IdGenerator = field(default_factory=UuidIdGenerator)
    event_bus: Any | None = None
    notifier: NotificationChannel = field(default_factory=LogNotificationChannel)
    engine: Engine | None = None
    plugin_manager: PluginManager | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def in_memory(
        cls,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        notifier: NotificationChannel | None = None,
        event_bus: Any | None = None,
    ) -> Store:
        """Dict-backed store. Events are recorded by an InMemoryEventBus."""
        from todoctl.infrastructure.repositories.memory import (
            InMemoryProjectRepository,
            InMemoryRecurrenceRuleRepository,
            InMemoryRecurrenceRuleStore,
            InMemoryReminderRepository,
            InMemoryTagRepository,
            InMemoryTaskRepository,
        )
        from todoctl.plugins.event_bus import InMemoryEventBus

        tasks = InMemoryTaskRepository()
        rules = InMemoryRecurrenceRuleRepository()
        return cls(
            tasks=tasks,
            reminders=InMemoryReminderRepository(),
            rules=rules,
            rule_store=InMemoryRecurrenceRuleStore(tasks, rules),
            projects=InMemoryProjectRepository(),
            tags=InMemoryTagRepository(),
            clock=clock or SystemClock(),
            ids=ids or UuidIdGenerator(),
            event_bus=event_bus if event_bus is not None else InMemoryEventBus(),
            notifier=notifier or LogNotificationChannel(),
        )

    @classmethod
    def sqlite(
        cls,
        engine: Engine,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        notifier: NotificationChannel | None = None,
    ) -> Store:
        """SQLite-backed store. Call :meth:`init_event_bus` to enable events."""
        from todoctl.infrastructure.repositories.sql import (
            SqlProjectRepository,
            SqlRecurrenceRuleRepository,
            SqlRecurrenceRuleStore,
            SqlReminderRepository,
            SqlTagRepository,
            SqlTaskRepository,
        )

        return cls(
            tasks=SqlTaskRepository(engine),
            reminders=SqlReminderRepository(engine),
            rules=SqlRecurrenceRuleRepository(engine),
            rule_store=SqlRecurrenceRuleStore(engine),
            projects=SqlProjectRepository(engine),
            tags=SqlTagRepository(engine),
            clock=clock or SystemClock(),
            ids=ids or UuidIdGenerator(),
            notifier=notifier or LogNotificationChannel(),
            engine=engine,
        )

    @classmethod
    def from_settings(cls, settings: TodoSettings, *, clock: Clock | None = None) -> Store:
        """Build the configured backend and wire plugins and events."""
        if settings.store.backend == "memory":
            store = cls.in_memory(clock=clock)
        else:
            from todoctl.infrastructure.database.engine import init_database

            store = cls.sqlite(init_database(settings.db_path), clock=clock)
        store.init_event_bus(settings)
        return store

    def init_event_bus(self, settings: TodoSettings) -> None:
        """Load plugins, register built-ins, and wire the event bus.

        The notification channel switches to the plugin hook when
        ``[reminders] channel = "plugin"`` and at least one loaded plugin
        implements ``notify_reminder``; otherwise deliveries stay on the log.
        """
        from todoctl.plugins.builtins.activity import ActivityLogPlugin
        from todoctl.plugins.event_bus import EventBus, InMemoryEventBus
        from todoctl.plugins.manager import PluginManager

        pm = PluginManager()
        if settings.plugins.enabled:
            pm.discover_and_load(local_dir=settings.plugins_dir)
        pm.register_plugin(ActivityLogPlugin(), name="activity-builtin")
        self.plugin_manager = pm

        if self.engine is not None:
            self.event_bus = EventBus(
                self.engine,
                pm,
                sync=settings.sync,
                max_retries=settings.events.max_retries,
                max_workers=settings.events.max_workers,
                clock=self.clock,
            )
        else:
            self.event_bus = InMemoryEventBus(pm)

        if settings.reminders.channel == "plugin":
            if pm.delivery_plugins():
                self.notifier = PluginNotificationChannel(pm)
            else:
                logger.warning(
                    "reminders.channel is \"plugin\" but no plugin implements "
                    "notify_reminder; delivering to the log instead"
                )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Retry undelivered events, stop the event bus, and dispose of the engine."""
        if self.event_bus is not None:
            try:
                self.event_bus.drain()
                self.event_bus.shutdown()
            except Exception:
                logger.warning("Event bus shutdown failed", exc_info=True)
        if self.engine is not None:
            self.engine.dispose()
