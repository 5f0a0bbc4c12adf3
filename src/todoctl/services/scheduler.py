"""ReminderScheduler: drives the due-reminder scan on a fixed interval.

The scan runs on a daemon thread. At most one scan is in flight: a tick
that fires while the previous one is still running is skipped, not
queued. A scan that raises is logged and the loop keeps going.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from todoctl.services.reminders import ReminderService
    from todoctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Call ``ReminderService.process_due`` every *interval_seconds*."""

    def __init__(self, service: ReminderService, interval_seconds: float = 60.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._service = service
        self._interval = float(interval_seconds)
        self._running = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> ServiceResult | None:
        """Run one scan now. ``None`` when a scan is already in flight."""
        if not self._running.acquire(blocking=False):
            logger.debug("Reminder scan already running; tick skipped")
            return None
        try:
            return self._service.process_due()
        finally:
            self._running.release()

    def start(self) -> None:
        """Start the background loop. The first scan runs immediately."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="todoctl-reminders", daemon=True
        )
        self._thread.start()
        logger.debug("Reminder scheduler started (interval=%ss)", self._interval)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to exit and wait for the current scan to finish."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None
        logger.debug("Reminder scheduler stopped")

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Reminder scan failed")
            self._stop.wait(self._interval)
