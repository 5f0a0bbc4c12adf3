"""RecurrenceService: attach, replace, inspect, and remove task rules.

A task owns at most one rule. Replacing or removing it changes two
records (the rule and the task link), so both go through the store's
``RecurrenceRuleStore`` in a single transaction.
"""

from __future__ import annotations

from todoctl.domain.errors import NotFoundError
from todoctl.domain.events import RecurrenceRuleRemoved, RecurrenceRuleSet
from todoctl.domain.recurrence import (
    compute_next_due_date,
    create_recurrence_rule,
    plan_rule_removal,
    plan_rule_replacement,
)
from todoctl.domain.result import Err
from todoctl.services._helpers import iso, rule_to_dict
from todoctl.services.base import BaseService
from todoctl.services.commands import (
    RemoveRecurrenceRuleCommand,
    RequestContext,
    SetRecurrenceRuleCommand,
)
from todoctl.services.contracts import (
    RecurrenceRemovedData,
    TaskRecurrenceData,
    dump_validated,
)
from todoctl.services.result import ServiceResult


class RecurrenceService(BaseService):
    """Recurrence rule use cases."""

    def set_rule(self, cmd: SetRecurrenceRuleCommand, ctx: RequestContext) -> ServiceResult:
        """Attach a rule to a task, replacing any rule it already has."""
        op = "set_recurrence_rule"
        warnings: list[str] = []

        task = self._load_task(cmd.task_id, ctx)
        if isinstance(task, NotFoundError):
            return ServiceResult.failure(op, task)

        now = self._store.clock.now()
        created = create_recurrence_rule(
            cmd.frequency,
            now,
            rule_id=self._store.ids.recurrence_rule_id(),
            interval=cmd.interval,
            days_of_week=cmd.days_of_week,
            day_of_month=cmd.day_of_month,
            mode=cmd.mode,
        )
        if isinstance(created, Err):
            return ServiceResult.failure(op, created.error)

        rule = created.value
        plan = plan_rule_replacement(task, rule, now)
        self._store.rule_store.replace_rule(plan)

        self._dispatch_event(
            RecurrenceRuleSet(recurrence_rule_id=rule.id, task_id=task.id, occurred_at=now),
            warnings,
        )
        data = {
            "task_id": task.id,
            "rule": rule_to_dict(rule),
            "next_due_at": iso(compute_next_due_date(rule, task.due_at, now)),
        }
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(TaskRecurrenceData, data),
            warnings=warnings,
            meta={"replaced_rule_id": plan.old_rule_id},
        )

    def get_rule(self, task_id: str, ctx: RequestContext) -> ServiceResult:
        """The task's rule and the due date completing it now would produce."""
        op = "get_recurrence_rule"
        task = self._load_task(task_id, ctx)
        if isinstance(task, NotFoundError):
            return ServiceResult.failure(op, task)

        data: dict = {"task_id": task.id, "rule": None, "next_due_at": None}
        if task.recurrence_rule_id is not None:
            rule = self._store.rules.find_by_id(task.recurrence_rule_id)
            if rule is not None:
                now = self._store.clock.now()
                data["rule"] = rule_to_dict(rule)
                data["next_due_at"] = iso(compute_next_due_date(rule, task.due_at, now))
        return ServiceResult(ok=True, op=op, data=dump_validated(TaskRecurrenceData, data))

    def remove_rule(self, cmd: RemoveRecurrenceRuleCommand, ctx: RequestContext) -> ServiceResult:
        """Detach and delete the task's rule. No rule is not an error."""
        op = "remove_recurrence_rule"
        warnings: list[str] = []

        task = self._load_task(cmd.task_id, ctx)
        if isinstance(task, NotFoundError):
            return ServiceResult.failure(op, task)

        now = self._store.clock.now()
        plan = plan_rule_removal(task, now)
        if plan is None:
            return ServiceResult(
                ok=True,
                op=op,
                data=dump_validated(
                    RecurrenceRemovedData, {"task_id": task.id, "removed_rule_id": None}
                ),
            )

        self._store.rule_store.remove_rule(plan)
        self._dispatch_event(
            RecurrenceRuleRemoved(
                recurrence_rule_id=plan.rule_id, task_id=task.id, occurred_at=now
            ),
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                RecurrenceRemovedData, {"task_id": task.id, "removed_rule_id": plan.rule_id}
            ),
            warnings=warnings,
        )
