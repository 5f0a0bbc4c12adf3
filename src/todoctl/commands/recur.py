"""Command group: recurrence rules (set, clear, show)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from todoctl.commands._base import TodoGroup

if TYPE_CHECKING:
    from todoctl.commands._context import AppContext

WEEKDAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

_RECUR_EXAMPLES = """\
  todoctl recur set task_3f2a9c1b7d4e daily
  todoctl recur set task_3f2a9c1b7d4e weekly --on mon --on thu
  todoctl recur set task_3f2a9c1b7d4e monthly --day 31 --interval 3
  todoctl recur set task_3f2a9c1b7d4e daily --interval 2 --from-completion
  todoctl recur show task_3f2a9c1b7d4e
  todoctl recur clear task_3f2a9c1b7d4e"""


def _parse_weekdays(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> tuple[int, ...] | None:
    """``--on`` accepts ``sun``..``sat`` or ``0``..``6`` (0 = Sunday)."""
    if not values:
        return None
    days: list[int] = []
    for value in values:
        token = value.strip().lower()
        if token.lstrip("-").isdigit():
            days.append(int(token))
        elif len(token) >= 3 and any(name.startswith(token) for name in WEEKDAY_NAMES):
            days.append(next(i for i, name in enumerate(WEEKDAY_NAMES) if name.startswith(token)))
        else:
            raise click.BadParameter(f"{value!r} is not a weekday name or number 0-6")
    return tuple(days)


@click.group(cls=TodoGroup, examples=_RECUR_EXAMPLES)
def recur() -> None:
    """Make tasks repeat."""


@recur.command(
    "set",
    examples="""\
  todoctl recur set task_3f2a9c1b7d4e weekly --on fri
  todoctl recur set task_3f2a9c1b7d4e monthly --day 15""",
)
@click.argument("task_id")
@click.argument("frequency", type=click.Choice(["daily", "weekly", "monthly"]))
@click.option("--interval", type=int, default=1, show_default=True, help="Repeat every N units.")
@click.option(
    "--on",
    "days_of_week",
    multiple=True,
    callback=_parse_weekdays,
    help="Weekday for weekly rules (repeatable): sun..sat or 0..6.",
)
@click.option("--day", "day_of_month", type=int, default=None, help="Day of month (1-31).")
@click.option(
    "--from-completion",
    is_flag=True,
    help="Count from the completion time instead of the previous due date.",
)
@click.pass_obj
def set_rule(
    app: AppContext,
    task_id: str,
    frequency: str,
    interval: int,
    days_of_week: tuple[int, ...] | None,
    day_of_month: int | None,
    from_completion: bool,
) -> None:
    """Attach a recurrence rule, replacing any existing one."""
    from todoctl.domain.types import RecurrenceMode
    from todoctl.services.commands import SetRecurrenceRuleCommand
    from todoctl.services.recurrence import RecurrenceService

    mode = RecurrenceMode.FROM_COMPLETION if from_completion else RecurrenceMode.FIXED_SCHEDULE
    cmd = SetRecurrenceRuleCommand(
        task_id=task_id,  # type: ignore[arg-type]
        frequency=frequency,
        interval=interval,
        days_of_week=days_of_week,
        day_of_month=day_of_month,
        mode=mode,
    )
    app.emit(RecurrenceService(app.store).set_rule(cmd, app.request))


@recur.command(examples="  todoctl recur clear task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def clear(app: AppContext, task_id: str) -> None:
    """Stop a task from repeating."""
    from todoctl.services.commands import RemoveRecurrenceRuleCommand
    from todoctl.services.recurrence import RecurrenceService

    cmd = RemoveRecurrenceRuleCommand(task_id=task_id)  # type: ignore[arg-type]
    app.emit(RecurrenceService(app.store).remove_rule(cmd, app.request))


@recur.command(examples="  todoctl recur show task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def show(app: AppContext, task_id: str) -> None:
    """Show a task's rule and its next due date."""
    from todoctl.services.recurrence import RecurrenceService

    app.emit(RecurrenceService(app.store).get_rule(task_id, app.request))
