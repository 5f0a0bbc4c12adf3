"""Command group: task lifecycle (add, show, edit, done, reopen, cancel, delete)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from todoctl.commands._base import DATETIME, TodoGroup

if TYPE_CHECKING:
    from todoctl.commands._context import AppContext

_TASK_EXAMPLES = """\
  todoctl task add "Pay rent" --due 2025-03-01 --tag finance
  todoctl task show task_3f2a9c1b7d4e
  todoctl task edit task_3f2a9c1b7d4e --title "Pay rent (March)" --no-due
  todoctl task done task_3f2a9c1b7d4e
  todoctl task reopen task_3f2a9c1b7d4e
  todoctl task cancel task_3f2a9c1b7d4e
  todoctl task delete task_3f2a9c1b7d4e"""


@click.group(cls=TodoGroup, examples=_TASK_EXAMPLES)
def task() -> None:
    """Create tasks and move them through their lifecycle."""


@task.command(
    examples="""\
  todoctl task add "Buy milk"
  todoctl task add "Quarterly report" --due "2025-03-31 17:00" --project proj_work
  todoctl task add "Water plants" --notes "Balcony too" --tag home --tag weekly"""
)
@click.argument("title")
@click.option("--due", "due_at", type=DATETIME, default=None, help="Due date/time (UTC).")
@click.option("--project", "project_id", default=None, help="Project id.")
@click.option("--notes", default=None, help="Free-form notes.")
@click.option("--tag", "tags", multiple=True, help="Tag id (repeatable).")
@click.pass_obj
def add(
    app: AppContext,
    title: str,
    due_at: datetime | None,
    project_id: str | None,
    notes: str | None,
    tags: tuple[str, ...],
) -> None:
    """Create a task."""
    from todoctl.services.commands import CreateTaskCommand
    from todoctl.services.tasks import TaskService

    cmd = CreateTaskCommand(
        title=title,
        project_id=project_id,  # type: ignore[arg-type]
        due_at=due_at,
        notes=notes,
        tag_ids=tags,  # type: ignore[arg-type]
    )
    app.emit(TaskService(app.store).create(cmd, app.request))


@task.command(examples="  todoctl task show task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def show(app: AppContext, task_id: str) -> None:
    """Show one task."""
    from todoctl.services.tasks import TaskService

    app.emit(TaskService(app.store).get(task_id, app.request))


@task.command(
    examples="""\
  todoctl task edit task_3f2a9c1b7d4e --title "New title"
  todoctl task edit task_3f2a9c1b7d4e --due 2025-04-01 --tag urgent
  todoctl task edit task_3f2a9c1b7d4e --no-due --no-project --clear-tags"""
)
@click.argument("task_id")
@click.option("--title", default=None, help="New title.")
@click.option("--notes", default=None, help="Replace notes (empty string clears).")
@click.option("--due", "due_at", type=DATETIME, default=None, help="New due date/time (UTC).")
@click.option("--no-due", is_flag=True, help="Clear the due date.")
@click.option("--project", "project_id", default=None, help="Move to project.")
@click.option("--no-project", is_flag=True, help="Remove from its project.")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable).")
@click.option("--clear-tags", is_flag=True, help="Remove all tags.")
@click.pass_obj
def edit(
    app: AppContext,
    task_id: str,
    title: str | None,
    notes: str | None,
    due_at: datetime | None,
    no_due: bool,
    project_id: str | None,
    no_project: bool,
    tags: tuple[str, ...],
    clear_tags: bool,
) -> None:
    """Edit a task's title, notes, due date, project, or tags."""
    from todoctl.domain.types import UNSET
    from todoctl.services.commands import UpdateTaskCommand
    from todoctl.services.tasks import TaskService

    if due_at is not None and no_due:
        raise click.UsageError("--due and --no-due are mutually exclusive.")
    if project_id is not None and no_project:
        raise click.UsageError("--project and --no-project are mutually exclusive.")
    if tags and clear_tags:
        raise click.UsageError("--tag and --clear-tags are mutually exclusive.")

    changes: dict[str, object] = {}
    if title is not None:
        changes["title"] = title
    if notes is not None:
        changes["notes"] = notes
    if due_at is not None or no_due:
        changes["due_at"] = due_at
    if project_id is not None or no_project:
        changes["project_id"] = project_id
    if tags or clear_tags:
        changes["tag_ids"] = tags if tags else None

    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    cmd = UpdateTaskCommand(
        task_id=task_id,  # type: ignore[arg-type]
        title=changes.get("title", UNSET),  # type: ignore[arg-type]
        notes=changes.get("notes", UNSET),  # type: ignore[arg-type]
        project_id=changes.get("project_id", UNSET),  # type: ignore[arg-type]
        due_at=changes.get("due_at", UNSET),  # type: ignore[arg-type]
        tag_ids=changes.get("tag_ids", UNSET),  # type: ignore[arg-type]
    )
    app.emit(TaskService(app.store).update(cmd, app.request))


@task.command(examples="  todoctl task done task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def done(app: AppContext, task_id: str) -> None:
    """Complete a task. Recurring tasks schedule their next occurrence."""
    from todoctl.services.commands import CompleteTaskCommand
    from todoctl.services.tasks import TaskService

    cmd = CompleteTaskCommand(task_id=task_id)  # type: ignore[arg-type]
    app.emit(TaskService(app.store).complete(cmd, app.request))


@task.command(examples="  todoctl task reopen task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def reopen(app: AppContext, task_id: str) -> None:
    """Reopen a completed task."""
    from todoctl.services.commands import UncompleteTaskCommand
    from todoctl.services.tasks import TaskService

    cmd = UncompleteTaskCommand(task_id=task_id)  # type: ignore[arg-type]
    app.emit(TaskService(app.store).uncomplete(cmd, app.request))


@task.command(examples="  todoctl task cancel task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def cancel(app: AppContext, task_id: str) -> None:
    """Cancel a task."""
    from todoctl.services.commands import CancelTaskCommand
    from todoctl.services.tasks import TaskService

    cmd = CancelTaskCommand(task_id=task_id)  # type: ignore[arg-type]
    app.emit(TaskService(app.store).cancel(cmd, app.request))


@task.command(examples="  todoctl task delete task_3f2a9c1b7d4e")
@click.argument("task_id")
@click.pass_obj
def delete(app: AppContext, task_id: str) -> None:
    """Delete a task. Deleted tasks disappear from every view."""
    from todoctl.services.commands import DeleteTaskCommand
    from todoctl.services.tasks import TaskService

    cmd = DeleteTaskCommand(task_id=task_id)  # type: ignore[arg-type]
    app.emit(TaskService(app.store).delete(cmd, app.request))
