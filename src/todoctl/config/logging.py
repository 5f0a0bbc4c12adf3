"""structlog setup for todoctl.

Everything goes to stderr through one stdlib handler; stdout stays reserved
for command output. ``--log-json`` switches the renderer to JSON lines.

The ``todoctl`` tree logs at WARNING (DEBUG with ``--verbose``), with one
exception: ``todoctl.notifications`` always logs at INFO, because with the
log channel its ``reminder.due`` records *are* the reminder deliveries.
Those records pass through :func:`format_reminder_delivery`, which turns
them into a readable line in console mode and tags them in both modes.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

DELIVERY_LOGGER = "todoctl.notifications"
DELIVERY_EVENT = "reminder.due"

_QUIET_LIBRARIES = ("sqlalchemy", "pluggy")


def format_reminder_delivery(*, human: bool) -> structlog.types.Processor:
    """Processor for ``reminder.due`` records from the delivery logger.

    Adds ``kind="reminder"`` so log shippers can pick deliveries out of the
    stream. With *human*, the event text becomes ``Reminder: <title>`` and
    the ids move behind it; JSON output keeps the machine event name.
    """

    def processor(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        if event_dict.get("logger") != DELIVERY_LOGGER:
            return event_dict
        if event_dict.get("event") != DELIVERY_EVENT:
            return event_dict
        event_dict["kind"] = "reminder"
        if human:
            title = event_dict.pop("title", None) or event_dict.get("task_id", "?")
            event_dict["event"] = f"Reminder: {title}"
        return event_dict

    return processor


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Configure structlog and stdlib logging for one CLI run.

    Safe to call repeatedly: the root handler is replaced, not stacked.
    """
    shared = _shared_processors()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                format_reminder_delivery(human=not log_json),
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    app_level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("todoctl").setLevel(app_level)
    logging.getLogger(DELIVERY_LOGGER).setLevel(min(app_level, logging.INFO))
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
