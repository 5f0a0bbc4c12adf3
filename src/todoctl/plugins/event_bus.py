"""Event buses: WAL-backed async dispatch and an in-memory recorder.

:class:`EventBus` appends every event to ``event_wal`` before any hook
runs. Each delivery attempt settles the row as ``completed``, ``failed``
(retried by :meth:`EventBus.drain`) or, after ``max_retries`` attempts,
``dead_letter``. Hooks run on a small thread pool unless ``sync`` is set;
finished futures are released immediately, so ``remind watch`` can run
for days without accumulating them.

:class:`InMemoryEventBus` keeps published events in a list and calls
hooks inline. It backs the ``memory`` store and the test suite.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from todoctl.infrastructure.clock import Clock, SystemClock
from todoctl.infrastructure.database.schema import event_wal

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from todoctl.domain.events import DomainEvent
    from todoctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT_SECONDS = 30.0


class WalStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"


_RETRYABLE = (WalStatus.PENDING.value, WalStatus.FAILED.value)


def run_hook(plugin_manager: PluginManager, hook_name: str, payload: dict[str, Any]) -> str | None:
    """Call every implementation of *hook_name*; the error text, or ``None``.

    A hook nobody declared has nothing to deliver to and counts as success.
    """
    hook_fn = getattr(plugin_manager.hook, hook_name, None)
    if hook_fn is None:
        return None
    try:
        hook_fn(**payload)
    except Exception as exc:
        logger.debug("Hook %s raised", hook_name, exc_info=True)
        return str(exc) or exc.__class__.__name__
    return None


class EventBus:
    """WAL-backed event dispatch via pluggy and a ThreadPoolExecutor.

    Parameters:
        engine: SQLAlchemy engine with the ``event_wal`` table.
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Run hooks inline (``--sync`` and tests).
        max_retries: Attempts before an event is marked ``dead_letter``.
        max_workers: Thread pool size for async dispatch.
        clock: Source of the WAL ``created``/``completed`` timestamps.
    """

    def __init__(
        self,
        engine: Engine,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_retries: int = 3,
        max_workers: int = 2,
        clock: Clock | None = None,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._clock = clock or SystemClock()
        self._max_retries = max_retries
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._in_flight: set[Future[WalStatus]] = set()
        self._lock = threading.Lock()

    def publish(self, event: DomainEvent) -> int:
        """Record *event* and deliver it to its hook. Returns the WAL row id."""
        return self.dispatch(event.hook_name, event.hook_payload())

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> int:
        event_id = self._append(hook_name, payload)
        if self._executor is None:
            self._deliver(event_id, hook_name, payload)
            return event_id

        future = self._executor.submit(self._deliver, event_id, hook_name, payload)
        with self._lock:
            self._in_flight.add(future)
        future.add_done_callback(self._release)
        return event_id

    def drain(self) -> list[dict[str, Any]]:
        """Wait for in-flight deliveries, then retry pending and failed rows inline.

        Returns ``{id, hook_name, status}`` for each retried row.
        """
        self._wait_in_flight()
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(event_wal.c.id, event_wal.c.hook_name, event_wal.c.payload)
                .where(event_wal.c.status.in_(_RETRYABLE))
                .order_by(event_wal.c.id)
            ).fetchall()

        return [
            {
                "id": row.id,
                "hook_name": row.hook_name,
                "status": self._deliver(row.id, row.hook_name, json.loads(row.payload)).value,
            }
            for row in rows
        ]

    def shutdown(self) -> None:
        self._wait_in_flight()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # WAL
    # ------------------------------------------------------------------

    def _timestamp(self) -> str:
        return self._clock.now().isoformat()

    def _append(self, hook_name: str, payload: dict[str, Any]) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(event_wal).values(
                    hook_name=hook_name,
                    payload=json.dumps(payload),
                    status=WalStatus.PENDING.value,
                    retries=0,
                    created=self._timestamp(),
                )
            )
            return int(result.inserted_primary_key[0])

    def _deliver(self, event_id: int, hook_name: str, payload: dict[str, Any]) -> WalStatus:
        return self._settle(event_id, hook_name, run_hook(self._pm, hook_name, payload))

    def _settle(self, event_id: int, hook_name: str, error: str | None) -> WalStatus:
        row = event_wal.c
        with self._engine.begin() as conn:
            if error is None:
                conn.execute(
                    update(event_wal)
                    .where(row.id == event_id)
                    .values(status=WalStatus.COMPLETED.value, completed=self._timestamp())
                )
                return WalStatus.COMPLETED

            attempts = conn.execute(select(row.retries).where(row.id == event_id)).scalar_one() + 1
            exhausted = attempts >= self._max_retries
            status = WalStatus.DEAD_LETTER if exhausted else WalStatus.FAILED
            conn.execute(
                update(event_wal)
                .where(row.id == event_id)
                .values(
                    status=status.value,
                    error=error,
                    retries=attempts,
                    completed=self._timestamp() if exhausted else None,
                )
            )

        if exhausted:
            logger.warning(
                "Giving up on %s (event %d) after %d attempts: %s",
                hook_name,
                event_id,
                attempts,
                error,
            )
        return status

    # ------------------------------------------------------------------
    # Futures
    # ------------------------------------------------------------------

    def _release(self, future: Future[WalStatus]) -> None:
        with self._lock:
            self._in_flight.discard(future)
        exc = future.exception()
        if exc is not None:
            logger.warning("Event delivery crashed: %s", exc)

    def _wait_in_flight(self) -> None:
        with self._lock:
            pending = list(self._in_flight)
        if not pending:
            return
        _, not_done = wait(pending, timeout=SHUTDOWN_TIMEOUT_SECONDS)
        if not_done:
            logger.warning("%d event hook(s) still running after shutdown timeout", len(not_done))


class InMemoryEventBus:
    """Records published events; dispatches hooks inline when a manager is given."""

    def __init__(self, plugin_manager: PluginManager | None = None) -> None:
        self._pm = plugin_manager
        self._events: list[DomainEvent] = []
        self._lock = threading.Lock()

    @property
    def events(self) -> list[DomainEvent]:
        with self._lock:
            return list(self._events)

    def types(self) -> list[str]:
        """Event ``type`` tags in publish order."""
        return [event.type for event in self.events]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            self._events.append(event)
        if self._pm is None:
            return
        error = run_hook(self._pm, event.hook_name, event.hook_payload())
        if error is not None:
            logger.warning("Hook %s failed: %s", event.hook_name, error)

    def drain(self) -> list[dict[str, Any]]:
        return []

    def shutdown(self) -> None:
        return None
