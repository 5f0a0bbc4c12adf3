"""SQLite-backed repositories via SQLAlchemy Core.

Row writers take a ``Connection`` so a caller that owns a transaction
(``engine.begin()``) can combine several writes atomically, as
:class:`SqlRecurrenceRuleStore` does.
"""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Text, delete, func, or_, select
from sqlalchemy.dialects.sqlite import insert

from todoctl.domain.calendar import as_utc
from todoctl.domain.ids import (
    ProjectId,
    RecurrenceRuleId,
    ReminderId,
    TagId,
    TaskId,
    WorkspaceId,
)
from todoctl.domain.lifecycle import ReminderStatus, TaskStatus
from todoctl.domain.project import Project
from todoctl.domain.recurrence import RecurrenceRule, RuleRemoval, RuleReplacement
from todoctl.domain.reminder import Reminder
from todoctl.domain.tag import Tag
from todoctl.domain.task import Task
from todoctl.infrastructure.database.schema import (
    projects,
    recurrence_rules,
    reminders,
    tags,
    task_tags,
    tasks,
)
from todoctl.infrastructure.repositories.base import TaskSearchFilters

if TYPE_CHECKING:
    from sqlalchemy import Connection, Select
    from sqlalchemy.engine import Engine


# ---------------------------------------------------------------------------
# Timestamp codec
# ---------------------------------------------------------------------------


def to_db_time(value: datetime | None) -> str | None:
    """Fixed-width UTC ISO text (lexical order == time order)."""
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="microseconds")


def from_db_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed.astimezone(UTC)


def _upsert(conn: Connection, table: Any, values: dict[str, Any]) -> None:
    stmt = insert(table).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.id],
        set_={k: v for k, v in values.items() if k != "id"},
    )
    conn.execute(stmt)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def write_task(conn: Connection, task: Task) -> None:
    """Upsert *task* and replace its tag rows."""
    _upsert(
        conn,
        tasks,
        {
            "id": task.id,
            "title": task.title,
            "status": str(task.status),
            "notes": task.notes,
            "project_id": task.project_id,
            "due_at": to_db_time(task.due_at),
            "completed_at": to_db_time(task.completed_at),
            "deleted_at": to_db_time(task.deleted_at),
            "recurrence_rule_id": task.recurrence_rule_id,
            "owner_user_id": task.owner_user_id,
            "workspace_id": task.workspace_id,
            "created_at": to_db_time(task.created_at),
            "updated_at": to_db_time(task.updated_at),
        },
    )
    conn.execute(delete(task_tags).where(task_tags.c.task_id == task.id))
    if task.tag_ids:
        conn.execute(
            task_tags.insert(),
            [
                {"task_id": task.id, "tag_id": tag_id, "position": position}
                for position, tag_id in enumerate(task.tag_ids)
            ],
        )


def _load_tags(conn: Connection, task_ids: Sequence[str]) -> dict[str, list[str]]:
    tags: defaultdict[str, list[str]] = defaultdict(list)
    if not task_ids:
        return tags
    rows = conn.execute(
        select(task_tags.c.task_id, task_tags.c.tag_id)
        .where(task_tags.c.task_id.in_(task_ids))
        .order_by(task_tags.c.task_id, task_tags.c.position)
    ).fetchall()
    for row in rows:
        tags[row.task_id].append(row.tag_id)
    return tags


def _row_to_task(row: Any, tag_ids: list[str]) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        status=TaskStatus(row.status),
        notes=row.notes,
        project_id=row.project_id,
        due_at=from_db_time(row.due_at),
        tag_ids=tuple(tag_ids),
        completed_at=from_db_time(row.completed_at),
        deleted_at=from_db_time(row.deleted_at),
        recurrence_rule_id=row.recurrence_rule_id,
        owner_user_id=row.owner_user_id,
        workspace_id=row.workspace_id,
        created_at=from_db_time(row.created_at),
        updated_at=from_db_time(row.updated_at),
    )


class SqlTaskRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch(self, stmt: Select[Any]) -> list[Task]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
            tags = _load_tags(conn, [row.id for row in rows])
        return [_row_to_task(row, tags.get(row.id, [])) for row in rows]

    def _live(self, workspace_id: WorkspaceId) -> Select[Any]:
        return select(tasks).where(
            tasks.c.workspace_id == workspace_id,
            tasks.c.status == str(TaskStatus.ACTIVE),
            tasks.c.deleted_at.is_(None),
        )

    def find_by_id(self, task_id: TaskId) -> Task | None:
        found = self._fetch(
            select(tasks).where(tasks.c.id == task_id, tasks.c.deleted_at.is_(None))
        )
        return found[0] if found else None

    def save(self, task: Task) -> None:
        with self._engine.begin() as conn:
            write_task(conn, task)

    def save_all(self, items: Iterable[Task]) -> None:
        with self._engine.begin() as conn:
            for task in items:
                write_task(conn, task)

    def delete(self, task_id: TaskId) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(task_tags).where(task_tags.c.task_id == task_id))
            conn.execute(delete(tasks).where(tasks.c.id == task_id))

    def find_inbox(self, workspace_id: WorkspaceId) -> list[Task]:
        return self._fetch(
            self._live(workspace_id)
            .where(tasks.c.project_id.is_(None))
            .order_by(tasks.c.created_at, tasks.c.id)
        )

    def find_due_on_or_before(self, workspace_id: WorkspaceId, before: datetime) -> list[Task]:
        return self._fetch(
            self._live(workspace_id)
            .where(tasks.c.due_at.is_not(None), tasks.c.due_at <= to_db_time(before))
            .order_by(tasks.c.due_at, tasks.c.id)
        )

    def find_due_between(
        self, workspace_id: WorkspaceId, start: datetime, end: datetime
    ) -> list[Task]:
        return self._fetch(
            self._live(workspace_id)
            .where(
                tasks.c.due_at.is_not(None),
                tasks.c.due_at >= to_db_time(start),
                tasks.c.due_at <= to_db_time(end),
            )
            .order_by(tasks.c.due_at, tasks.c.id)
        )

    def find_by_project(self, project_id: ProjectId) -> list[Task]:
        return self._fetch(
            select(tasks)
            .where(tasks.c.project_id == project_id, tasks.c.deleted_at.is_(None))
            .order_by(tasks.c.created_at, tasks.c.id)
        )

    def find_by_tag(self, tag_id: TagId, workspace_id: WorkspaceId) -> list[Task]:
        tagged = select(task_tags.c.task_id).where(task_tags.c.tag_id == tag_id)
        return self._fetch(
            select(tasks)
            .where(
                tasks.c.workspace_id == workspace_id,
                tasks.c.deleted_at.is_(None),
                tasks.c.id.in_(tagged),
            )
            .order_by(tasks.c.created_at, tasks.c.id)
        )

    def search(
        self, workspace_id: WorkspaceId, text: str, filters: TaskSearchFilters
    ) -> list[Task]:
        needle = text.lower()
        stmt = select(tasks).where(
            tasks.c.workspace_id == workspace_id,
            tasks.c.deleted_at.is_(None),
            or_(
                func.lower(tasks.c.title, type_=Text).contains(needle, autoescape=True),
                func.lower(func.coalesce(tasks.c.notes, ""), type_=Text).contains(
                    needle, autoescape=True
                ),
            ),
        )
        if filters.project_id is not None:
            stmt = stmt.where(tasks.c.project_id == filters.project_id)
        for tag_id in filters.tag_ids:
            stmt = stmt.where(
                select(task_tags.c.task_id)
                .where(task_tags.c.task_id == tasks.c.id, task_tags.c.tag_id == tag_id)
                .exists()
            )
        if filters.status is not None:
            stmt = stmt.where(tasks.c.status == str(filters.status))
        if filters.due_before is not None:
            stmt = stmt.where(tasks.c.due_at <= to_db_time(filters.due_before))
        if filters.due_after is not None:
            stmt = stmt.where(tasks.c.due_at >= to_db_time(filters.due_after))
        return self._fetch(
            stmt.order_by(
                tasks.c.due_at.is_(None),
                func.coalesce(tasks.c.due_at, tasks.c.created_at),
                tasks.c.id,
            )
        )


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


def _row_to_reminder(row: Any) -> Reminder:
    return Reminder(
        id=row.id,
        task_id=row.task_id,
        workspace_id=row.workspace_id,
        remind_at=from_db_time(row.remind_at),
        status=ReminderStatus(row.status),
        created_at=from_db_time(row.created_at),
        updated_at=from_db_time(row.updated_at),
    )


class SqlReminderRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch(self, stmt: Select[Any]) -> list[Reminder]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_reminder(row) for row in rows]

    def find_by_id(self, reminder_id: ReminderId) -> Reminder | None:
        found = self._fetch(select(reminders).where(reminders.c.id == reminder_id))
        return found[0] if found else None

    def save(self, reminder: Reminder) -> None:
        with self._engine.begin() as conn:
            _upsert(
                conn,
                reminders,
                {
                    "id": reminder.id,
                    "task_id": reminder.task_id,
                    "workspace_id": reminder.workspace_id,
                    "remind_at": to_db_time(reminder.remind_at),
                    "status": str(reminder.status),
                    "created_at": to_db_time(reminder.created_at),
                    "updated_at": to_db_time(reminder.updated_at),
                },
            )

    def delete(self, reminder_id: ReminderId) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(reminders).where(reminders.c.id == reminder_id))

    def find_by_task(self, task_id: TaskId, workspace_id: WorkspaceId) -> list[Reminder]:
        return self._fetch(
            select(reminders)
            .where(reminders.c.task_id == task_id, reminders.c.workspace_id == workspace_id)
            .order_by(reminders.c.remind_at, reminders.c.id)
        )

    def find_due(self, before: datetime) -> list[Reminder]:
        return self._fetch(
            select(reminders)
            .where(
                reminders.c.status == str(ReminderStatus.PENDING),
                reminders.c.remind_at <= to_db_time(before),
            )
            .order_by(reminders.c.remind_at, reminders.c.id)
        )


# ---------------------------------------------------------------------------
# Recurrence rules
# ---------------------------------------------------------------------------


def write_rule(conn: Connection, rule: RecurrenceRule) -> None:
    _upsert(
        conn,
        recurrence_rules,
        {
            "id": rule.id,
            "frequency": str(rule.frequency),
            "interval": rule.interval,
            "days_of_week": (
                json.dumps(list(rule.days_of_week)) if rule.days_of_week is not None else None
            ),
            "day_of_month": rule.day_of_month,
            "mode": str(rule.mode),
            "created_at": to_db_time(rule.created_at),
            "updated_at": to_db_time(rule.updated_at),
        },
    )


def delete_rule(conn: Connection, rule_id: RecurrenceRuleId) -> None:
    conn.execute(delete(recurrence_rules).where(recurrence_rules.c.id == rule_id))


def _row_to_rule(row: Any) -> RecurrenceRule:
    days = json.loads(row.days_of_week) if row.days_of_week is not None else None
    return RecurrenceRule(
        id=row.id,
        frequency=row.frequency,
        interval=row.interval,
        days_of_week=tuple(days) if days is not None else None,
        day_of_month=row.day_of_month,
        mode=row.mode,
        created_at=from_db_time(row.created_at),
        updated_at=from_db_time(row.updated_at),
    )


class SqlRecurrenceRuleRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def find_by_id(self, rule_id: RecurrenceRuleId) -> RecurrenceRule | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(recurrence_rules).where(recurrence_rules.c.id == rule_id)
            ).first()
        return _row_to_rule(row) if row is not None else None

    def save(self, rule: RecurrenceRule) -> None:
        with self._engine.begin() as conn:
            write_rule(conn, rule)

    def delete(self, rule_id: RecurrenceRuleId) -> None:
        with self._engine.begin() as conn:
            delete_rule(conn, rule_id)


class SqlRecurrenceRuleStore:
    """Applies rule plans in a single database transaction."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def replace_rule(self, plan: RuleReplacement) -> None:
        with self._engine.begin() as conn:
            if plan.old_rule_id is not None:
                delete_rule(conn, plan.old_rule_id)
            write_rule(conn, plan.new_rule)
            write_task(conn, plan.updated_task)

    def remove_rule(self, plan: RuleRemoval) -> None:
        with self._engine.begin() as conn:
            delete_rule(conn, plan.rule_id)
            write_task(conn, plan.updated_task)


# ---------------------------------------------------------------------------
# Projects and tags
# ---------------------------------------------------------------------------


def _row_to_project(row: Any) -> Project:
    return Project(
        id=row.id,
        workspace_id=row.workspace_id,
        name=row.name,
        color=row.color,
        archived=bool(row.archived),
        created_at=from_db_time(row.created_at),
        updated_at=from_db_time(row.updated_at),
    )


class SqlProjectRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch(self, stmt: Select[Any]) -> list[Project]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_project(row) for row in rows]

    def find_by_id(self, project_id: ProjectId) -> Project | None:
        found = self._fetch(select(projects).where(projects.c.id == project_id))
        return found[0] if found else None

    def save(self, project: Project) -> None:
        with self._engine.begin() as conn:
            _upsert(
                conn,
                projects,
                {
                    "id": project.id,
                    "workspace_id": project.workspace_id,
                    "name": project.name,
                    "color": project.color,
                    "archived": project.archived,
                    "created_at": to_db_time(project.created_at),
                    "updated_at": to_db_time(project.updated_at),
                },
            )

    def delete(self, project_id: ProjectId) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(projects).where(projects.c.id == project_id))

    def find_by_workspace(
        self, workspace_id: WorkspaceId, *, include_archived: bool = False
    ) -> list[Project]:
        stmt = select(projects).where(projects.c.workspace_id == workspace_id)
        if not include_archived:
            stmt = stmt.where(projects.c.archived.is_(False))
        return self._fetch(stmt.order_by(projects.c.created_at.desc(), projects.c.id.desc()))


def _row_to_tag(row: Any) -> Tag:
    return Tag(
        id=row.id,
        workspace_id=row.workspace_id,
        name=row.name,
        color=row.color,
        created_at=from_db_time(row.created_at),
        updated_at=from_db_time(row.updated_at),
    )


class SqlTagRepository:
    """Tag names are unique per workspace at the schema level as well."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch(self, stmt: Select[Any]) -> list[Tag]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_tag(row) for row in rows]

    def find_by_id(self, tag_id: TagId) -> Tag | None:
        found = self._fetch(select(tags).where(tags.c.id == tag_id))
        return found[0] if found else None

    def find_by_name(self, workspace_id: WorkspaceId, name: str) -> Tag | None:
        found = self._fetch(
            select(tags).where(tags.c.workspace_id == workspace_id, tags.c.name == name)
        )
        return found[0] if found else None

    def save(self, tag: Tag) -> None:
        with self._engine.begin() as conn:
            _upsert(
                conn,
                tags,
                {
                    "id": tag.id,
                    "workspace_id": tag.workspace_id,
                    "name": tag.name,
                    "color": tag.color,
                    "created_at": to_db_time(tag.created_at),
                    "updated_at": to_db_time(tag.updated_at),
                },
            )

    def delete(self, tag_id: TagId) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(tags).where(tags.c.id == tag_id))

    def find_by_workspace(self, workspace_id: WorkspaceId) -> list[Tag]:
        return self._fetch(
            select(tags).where(tags.c.workspace_id == workspace_id).order_by(tags.c.name, tags.c.id)
        )
