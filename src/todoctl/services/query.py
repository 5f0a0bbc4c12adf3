"""QueryService: read-only task views and lookups.

The date views (inbox, today, upcoming) use UTC day boundaries and show
only live, active tasks of the caller's workspace. ``tasks_by_tag`` and
``search`` cover every status; soft-deleted tasks never appear.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from todoctl.domain.calendar import (
    add_days,
    as_utc,
    end_of_utc_day,
    start_of_utc_day,
    utc_date,
)
from todoctl.domain.errors import NotFoundError, ValidationError
from todoctl.domain.lifecycle import TaskStatus
from todoctl.domain.task import Task, is_due_on, is_overdue
from todoctl.infrastructure.repositories.base import TaskSearchFilters
from todoctl.services._helpers import tag_to_dict, task_to_dict
from todoctl.services.base import BaseService
from todoctl.services.commands import RequestContext, SearchTasksQuery
from todoctl.services.contracts import (
    InboxData,
    SearchData,
    TaggedTasksData,
    TodayViewData,
    UpcomingViewData,
    dump_validated,
)
from todoctl.services.result import ServiceResult

UPCOMING_WINDOWS: tuple[int, ...] = (7, 14, 30)


def _parse_status(value: TaskStatus | str | None) -> TaskStatus | None:
    """Known statuses only; anything else means no status filter."""
    if value is None:
        return None
    try:
        return TaskStatus(value)
    except ValueError:
        return None


class QueryService(BaseService):
    """Task views for the CLI."""

    def inbox(self, ctx: RequestContext) -> ServiceResult:
        """Active tasks not filed under any project."""
        op = "inbox"
        now = self._store.clock.now()
        tasks = self._store.tasks.find_inbox(ctx.workspace_id)
        items = [task_to_dict(t, now) for t in tasks]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(InboxData, {"count": len(items), "items": items}),
        )

    def today(self, ctx: RequestContext) -> ServiceResult:
        """Overdue tasks from earlier days, and tasks due today."""
        op = "today"
        now = self._store.clock.now()
        tasks = self._store.tasks.find_due_on_or_before(ctx.workspace_id, end_of_utc_day(now))

        overdue: list[dict[str, Any]] = []
        due_today: list[dict[str, Any]] = []
        for task in tasks:
            if is_due_on(task, now):
                due_today.append(task_to_dict(task, now))
            elif is_overdue(task, now):
                overdue.append(task_to_dict(task, now))

        data = {
            "date": utc_date(now).isoformat(),
            "overdue": overdue,
            "due_today": due_today,
        }
        return ServiceResult(ok=True, op=op, data=dump_validated(TodayViewData, data))

    def upcoming(self, ctx: RequestContext, days: int = 7) -> ServiceResult:
        """Tasks due from today through *days* days ahead, grouped by date."""
        op = "upcoming"
        if isinstance(days, bool) or days not in UPCOMING_WINDOWS:
            return ServiceResult.failure(
                op, ValidationError(field="days", message="days must be one of 7, 14, 30")
            )

        now = self._store.clock.now()
        start = start_of_utc_day(now)
        end = end_of_utc_day(add_days(now, days))
        tasks = self._store.tasks.find_due_between(ctx.workspace_id, start, end)

        by_date: dict[str, list[Task]] = defaultdict(list)
        for task in tasks:
            if task.due_at is not None:
                by_date[utc_date(task.due_at).isoformat()].append(task)

        groups = [
            {"date": date, "tasks": [task_to_dict(t, now) for t in by_date[date]]}
            for date in sorted(by_date)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(UpcomingViewData, {"days": days, "groups": groups}),
        )

    def tasks_by_tag(self, tag_id: str, ctx: RequestContext) -> ServiceResult:
        op = "tasks_by_tag"
        tag = self._load_tag(tag_id, ctx)
        if isinstance(tag, NotFoundError):
            return ServiceResult.failure(op, tag)

        now = self._store.clock.now()
        tasks = self._store.tasks.find_by_tag(tag.id, ctx.workspace_id)
        items = [task_to_dict(t, now) for t in tasks]
        data = {"tag": tag_to_dict(tag), "count": len(items), "items": items}
        return ServiceResult(ok=True, op=op, data=dump_validated(TaggedTasksData, data))

    def search(self, query: SearchTasksQuery, ctx: RequestContext) -> ServiceResult:
        """Tasks whose title or notes contain ``query.text``, ignoring case."""
        op = "search_tasks"
        text = query.text.strip() if isinstance(query.text, str) else ""
        if not text:
            return ServiceResult.failure(
                op, ValidationError(field="q", message="Search query cannot be empty")
            )

        filters = TaskSearchFilters(
            project_id=query.project_id,
            tag_ids=tuple(dict.fromkeys(query.tag_ids)),
            status=_parse_status(query.status),
            due_before=as_utc(query.due_before) if query.due_before is not None else None,
            due_after=as_utc(query.due_after) if query.due_after is not None else None,
        )
        now = self._store.clock.now()
        tasks = self._store.tasks.search(ctx.workspace_id, text, filters)
        items = [task_to_dict(t, now) for t in tasks]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(SearchData, {"query": text, "count": len(items), "items": items}),
        )
