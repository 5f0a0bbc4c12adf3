"""Standalone view commands: inbox, today, upcoming, search."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from todoctl.commands._base import DATETIME, TodoCommand

if TYPE_CHECKING:
    from todoctl.commands._context import AppContext


@click.command(cls=TodoCommand, examples="  todoctl inbox\n  todoctl --json inbox")
@click.pass_obj
def inbox(app: AppContext) -> None:
    """Active tasks that belong to no project."""
    from todoctl.services.query import QueryService

    app.emit(QueryService(app.store).inbox(app.request))


@click.command(cls=TodoCommand, examples="  todoctl today\n  todoctl -q today")
@click.pass_obj
def today(app: AppContext) -> None:
    """Overdue tasks and tasks due today (UTC)."""
    from todoctl.services.query import QueryService

    app.emit(QueryService(app.store).today(app.request))


@click.command(cls=TodoCommand, examples="  todoctl upcoming\n  todoctl upcoming --days 30")
@click.option(
    "--days",
    type=click.Choice(["7", "14", "30"]),
    default="7",
    show_default=True,
    help="How far ahead to look.",
)
@click.pass_obj
def upcoming(app: AppContext, days: str) -> None:
    """Tasks due in the coming days, grouped by date."""
    from todoctl.services.query import QueryService

    app.emit(QueryService(app.store).upcoming(app.request, days=int(days)))


@click.command(
    cls=TodoCommand,
    examples="""\
  todoctl search dentist
  todoctl search report --tag tag_8d1f0a3c6e2b --status active
  todoctl search invoice --due-after 2025-03-01 --due-before 2025-03-31""",
)
@click.argument("text")
@click.option("--project", "project_id", default=None, help="Only tasks in this project.")
@click.option("--tag", "tags", multiple=True, help="Require this tag id (repeatable).")
@click.option(
    "--status",
    type=click.Choice(["active", "completed", "canceled"]),
    default=None,
    help="Only tasks in this status.",
)
@click.option("--due-before", type=DATETIME, default=None, help="Due at or before (UTC).")
@click.option("--due-after", type=DATETIME, default=None, help="Due at or after (UTC).")
@click.pass_obj
def search(
    app: AppContext,
    text: str,
    project_id: str | None,
    tags: tuple[str, ...],
    status: str | None,
    due_before: datetime | None,
    due_after: datetime | None,
) -> None:
    """Find tasks whose title or notes contain TEXT (case-insensitive)."""
    from todoctl.services.commands import SearchTasksQuery
    from todoctl.services.query import QueryService

    query = SearchTasksQuery(
        text=text,
        project_id=project_id,  # type: ignore[arg-type]
        tag_ids=tags,  # type: ignore[arg-type]
        status=status,
        due_before=due_before,
        due_after=due_after,
    )
    app.emit(QueryService(app.store).search(query, app.request))
