"""Recurrence rules and the next-occurrence engine.

A rule says how a task repeats; :func:`compute_next_due_date` turns it
into a concrete instant. Two anchor semantics exist:

- ``fixedSchedule``: anchor on the previous due date (calendar-regular
  cadence regardless of when the task was done).
- ``fromCompletion``: anchor on the actual completion instant.

Weekdays are numbered 0 = Sunday .. 6 = Saturday. All arithmetic is UTC
and keeps the anchor's time of day.

Replacing or removing a task's rule is expressed as a plan
(:class:`RuleReplacement` / :class:`RuleRemoval`) that a
``RecurrenceRuleStore`` applies atomically.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from todoctl.domain.calendar import add_days, add_months, as_utc, utc_weekday
from todoctl.domain.errors import ValidationError
from todoctl.domain.ids import RecurrenceRuleId, TaskId
from todoctl.domain.result import Err, Ok, Result
from todoctl.domain.task import CreateTaskParams, Task, link_recurrence_rule, unlink_recurrence_rule
from todoctl.domain.types import RecurrenceFrequency, RecurrenceMode
from todoctl.domain.validation import validate_int_range, validate_int_set

DAYS_PER_WEEK = 7


class RecurrenceRule(BaseModel):
    """How a task repeats."""

    model_config = ConfigDict(frozen=True)

    id: RecurrenceRuleId
    frequency: RecurrenceFrequency
    interval: int = 1
    days_of_week: tuple[int, ...] | None = None
    day_of_month: int | None = None
    mode: RecurrenceMode = RecurrenceMode.FIXED_SCHEDULE
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


def create_recurrence_rule(
    frequency: RecurrenceFrequency | str,
    now: datetime,
    *,
    rule_id: RecurrenceRuleId,
    interval: object = 1,
    days_of_week: Iterable[object] | None = None,
    day_of_month: object | None = None,
    mode: RecurrenceMode | str = RecurrenceMode.FIXED_SCHEDULE,
) -> Result[RecurrenceRule, ValidationError]:
    """Validate the rule fields and build a :class:`RecurrenceRule`.

    ``days_of_week`` is stored sorted ascending with duplicates collapsed.
    """
    try:
        freq = RecurrenceFrequency(frequency)
    except ValueError:
        return Err(
            ValidationError(
                field="frequency", message="frequency must be one of daily, weekly, monthly"
            )
        )
    try:
        rule_mode = RecurrenceMode(mode)
    except ValueError:
        return Err(
            ValidationError(
                field="mode", message="mode must be one of fixedSchedule, fromCompletion"
            )
        )

    interval_result = validate_int_range(
        interval, "interval", minimum=1, message="Interval must be a positive integer"
    )
    if isinstance(interval_result, Err):
        return interval_result

    days: tuple[int, ...] | None = None
    if days_of_week is not None:
        days_result = validate_int_set(
            days_of_week,
            "days_of_week",
            minimum=0,
            maximum=6,
            message="days_of_week values must be integers 0-6",
        )
        if isinstance(days_result, Err):
            return days_result
        days = days_result.value

    month_day: int | None = None
    if day_of_month is not None:
        day_result = validate_int_range(
            day_of_month,
            "day_of_month",
            minimum=1,
            maximum=31,
            message="day_of_month must be an integer 1-31",
        )
        if isinstance(day_result, Err):
            return day_result
        month_day = day_result.value

    now = as_utc(now)
    return Ok(
        RecurrenceRule(
            id=rule_id,
            frequency=freq,
            interval=interval_result.value,
            days_of_week=days,
            day_of_month=month_day,
            mode=rule_mode,
            created_at=now,
            updated_at=now,
        )
    )


# --- Next occurrence ---


def anchor_date(
    rule: RecurrenceRule, current_due_date: datetime | None, completed_at: datetime
) -> datetime:
    """The instant the next occurrence is counted from."""
    if rule.mode == RecurrenceMode.FIXED_SCHEDULE and current_due_date is not None:
        return as_utc(current_due_date)
    return as_utc(completed_at)


def _next_weekly(rule: RecurrenceRule, anchor: datetime) -> datetime:
    if not rule.days_of_week:
        return add_days(anchor, DAYS_PER_WEEK * rule.interval)

    weekday = utc_weekday(anchor)
    days = sorted(rule.days_of_week)
    for day in days:
        if day > weekday:
            return add_days(anchor, day - weekday)

    # wrap to the first listed day of a later week
    offset = (DAYS_PER_WEEK - weekday + days[0]) + (rule.interval - 1) * DAYS_PER_WEEK
    return add_days(anchor, offset)


def _next_monthly(rule: RecurrenceRule, anchor: datetime) -> datetime:
    return add_months(anchor, rule.interval, day=rule.day_of_month)


def compute_next_due_date(
    rule: RecurrenceRule, current_due_date: datetime | None, completed_at: datetime
) -> datetime:
    anchor = anchor_date(rule, current_due_date, completed_at)
    match rule.frequency:
        case RecurrenceFrequency.DAILY:
            return add_days(anchor, rule.interval)
        case RecurrenceFrequency.WEEKLY:
            return _next_weekly(rule, anchor)
        case RecurrenceFrequency.MONTHLY:
            return _next_monthly(rule, anchor)
    raise AssertionError(f"unhandled frequency: {rule.frequency}")


def build_next_recurring_task(
    completed_task: Task,
    rule: RecurrenceRule,
    next_task_id: TaskId,
    completed_at: datetime,
) -> CreateTaskParams:
    """Parameters for the successor of *completed_task*. Creates nothing."""
    return CreateTaskParams(
        task_id=next_task_id,
        title=completed_task.title,
        now=as_utc(completed_at),
        owner_user_id=completed_task.owner_user_id,
        workspace_id=completed_task.workspace_id,
        project_id=completed_task.project_id,
        due_at=compute_next_due_date(rule, completed_task.due_at, completed_at),
        notes=completed_task.notes,
        tag_ids=completed_task.tag_ids,
        recurrence_rule_id=completed_task.recurrence_rule_id,
    )


# --- Paired rule changes ---


@dataclass(frozen=True)
class RuleReplacement:
    """Delete *old_rule_id* (if any), insert *new_rule*, save *updated_task*."""

    old_rule_id: RecurrenceRuleId | None
    new_rule: RecurrenceRule
    updated_task: Task


@dataclass(frozen=True)
class RuleRemoval:
    """Delete *rule_id* and save *updated_task* with the link cleared."""

    rule_id: RecurrenceRuleId
    updated_task: Task


def plan_rule_replacement(task: Task, new_rule: RecurrenceRule, now: datetime) -> RuleReplacement:
    return RuleReplacement(
        old_rule_id=task.recurrence_rule_id,
        new_rule=new_rule,
        updated_task=link_recurrence_rule(task, new_rule.id, now),
    )


def plan_rule_removal(task: Task, now: datetime) -> RuleRemoval | None:
    """``None`` when *task* has no rule to remove."""
    if task.recurrence_rule_id is None:
        return None
    return RuleRemoval(
        rule_id=task.recurrence_rule_id,
        updated_task=unlink_recurrence_rule(task, now),
    )
