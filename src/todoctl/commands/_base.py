"""Shared Click building blocks for todoctl commands.

* :class:`TodoCommand` / :class:`TodoGroup` take an ``examples`` string,
  shown by ``--examples`` and hinted at in ``--help``.
* :data:`DATETIME` parses due dates and reminder times into UTC.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import click

_RELATIVE = re.compile(r"^\+(\d+)([mhdw])$")
_UNITS = {"m": "minutes", "h": "hours", "d": "days", "w": "weeks"}
_FORMATS = ("%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S")


class UtcDateTime(click.ParamType):
    """Absolute or relative time, always returned timezone-aware in UTC.

    Absolute: ``2025-03-01``, ``2025-03-01 08:00``, ``2025-03-01T08:00[:00]``
    (read as UTC). Relative: ``today`` / ``tomorrow`` (midnight UTC) or
    ``+<n><unit>`` with unit ``m``, ``h``, ``d`` or ``w`` (``+2h``).
    """

    name = "datetime"

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self._now = now or (lambda: datetime.now(UTC))

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if isinstance(value, datetime):
            return value if value.tzinfo else value.replace(tzinfo=UTC)

        text = str(value).strip().lower()
        now = self._now().astimezone(UTC)
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        if text == "today":
            return midnight
        if text == "tomorrow":
            return midnight + timedelta(days=1)
        match = _RELATIVE.match(text)
        if match:
            amount, unit = match.groups()
            return now + timedelta(**{_UNITS[unit]: int(amount)})

        for fmt in _FORMATS:
            try:
                return datetime.strptime(str(value).strip(), fmt).replace(tzinfo=UTC)
            except ValueError:
                continue
        self.fail(
            f"{value!r} is not a date. Use YYYY-MM-DD[ HH:MM], today, tomorrow, or +N(m|h|d|w).",
            param,
            ctx,
        )


DATETIME = UtcDateTime()


class _ExamplesMixin:
    """Adds the eager ``--examples`` flag and a help-epilog hint."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        command: click.Command = self  # type: ignore[assignment]
        if not command.epilog:
            command.epilog = "Run with --examples for usage examples."
        command.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._show_examples,
                help="Show usage examples.",
            )
        )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value and self.examples:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


class TodoCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class TodoGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`TodoCommand` by default."""

    command_class = TodoCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
