"""Command group: reminders (add, move, dismiss, delete, list, process, watch)."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import TYPE_CHECKING

import click

from todoctl.commands._base import DATETIME, TodoGroup

if TYPE_CHECKING:
    from todoctl.commands._context import AppContext

_REMIND_EXAMPLES = """\
  todoctl remind add task_3f2a9c1b7d4e "2025-03-01 08:00"
  todoctl remind move rem_9b1c0d2e3f4a "2025-03-01 09:30"
  todoctl remind list task_3f2a9c1b7d4e
  todoctl remind dismiss rem_9b1c0d2e3f4a
  todoctl remind process
  todoctl remind watch --interval 30"""


@click.group(cls=TodoGroup, examples=_REMIND_EXAMPLES)
def remind() -> None:
    """Schedule and deliver reminders for tasks."""


@remind.command(examples='  todoctl remind add task_3f2a9c1b7d4e "2025-03-01 08:00"')
@click.argument("task_id")
@click.argument("remind_at", type=DATETIME)
@click.pass_obj
def add(app: AppContext, task_id: str, remind_at: datetime) -> None:
    """Remind about an active task at a future time (UTC)."""
    from todoctl.services.commands import CreateReminderCommand
    from todoctl.services.reminders import ReminderService

    cmd = CreateReminderCommand(task_id=task_id, remind_at=remind_at)  # type: ignore[arg-type]
    app.emit(ReminderService(app.store).create(cmd, app.request))


@remind.command(examples='  todoctl remind move rem_9b1c0d2e3f4a "2025-03-02 08:00"')
@click.argument("reminder_id")
@click.argument("remind_at", type=DATETIME)
@click.pass_obj
def move(app: AppContext, reminder_id: str, remind_at: datetime) -> None:
    """Reschedule a pending reminder."""
    from todoctl.services.commands import UpdateReminderCommand
    from todoctl.services.reminders import ReminderService

    cmd = UpdateReminderCommand(
        reminder_id=reminder_id,  # type: ignore[arg-type]
        remind_at=remind_at,
    )
    app.emit(ReminderService(app.store).update_time(cmd, app.request))


@remind.command(examples="  todoctl remind dismiss rem_9b1c0d2e3f4a")
@click.argument("reminder_id")
@click.pass_obj
def dismiss(app: AppContext, reminder_id: str) -> None:
    """Dismiss a reminder so it is never delivered."""
    from todoctl.services.commands import DismissReminderCommand
    from todoctl.services.reminders import ReminderService

    cmd = DismissReminderCommand(reminder_id=reminder_id)  # type: ignore[arg-type]
    app.emit(ReminderService(app.store).dismiss(cmd, app.request))


@remind.command(examples="  todoctl remind delete rem_9b1c0d2e3f4a")
@click.argument("reminder_id")
@click.pass_obj
def delete(app: AppContext, reminder_id: str) -> None:
    """Delete a reminder."""
    from todoctl.services.commands import DeleteReminderCommand
    from todoctl.services.reminders import ReminderService

    cmd = DeleteReminderCommand(reminder_id=reminder_id)  # type: ignore[arg-type]
    app.emit(ReminderService(app.store).delete(cmd, app.request))


@remind.command("list", examples="  todoctl remind list task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def list_cmd(app: AppContext, task_id: str) -> None:
    """List a task's reminders, earliest first."""
    from todoctl.services.reminders import ReminderService

    app.emit(ReminderService(app.store).list_for_task(task_id, app.request))


@remind.command(examples="  todoctl remind process")
@click.pass_obj
def process(app: AppContext) -> None:
    """Run one due-reminder scan now."""
    from todoctl.services.reminders import ReminderService

    app.emit(ReminderService(app.store).process_due())


@remind.command(
    examples="""\
  todoctl remind watch
  todoctl remind watch --interval 15"""
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between scans (default: [reminders] interval_seconds).",
)
@click.pass_obj
def watch(app: AppContext, interval: float | None) -> None:
    """Scan for due reminders on a fixed interval until interrupted."""
    from todoctl.services.reminders import ReminderService
    from todoctl.services.scheduler import ReminderScheduler

    seconds = interval or app.settings.reminders.interval_seconds
    scheduler = ReminderScheduler(ReminderService(app.store), interval_seconds=seconds)
    stop = threading.Event()

    if not app.settings.quiet:
        click.echo(f"Watching reminders every {seconds:g}s. Press Ctrl+C to stop.", err=True)
    scheduler.start()
    try:
        stop.wait()
    except KeyboardInterrupt:
        click.echo("Stopping reminder watch.", err=True)
    finally:
        scheduler.stop()
