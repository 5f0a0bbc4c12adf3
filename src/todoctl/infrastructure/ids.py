"""Identifier generation.

``UuidIdGenerator`` draws 12 hex chars from a random UUID4.
``SequentialIdGenerator`` counts up per entity, for deterministic tests
and fixtures: ``task_000000000001``, ``task_000000000002``, ...
"""

from __future__ import annotations

import threading
import uuid
from collections import defaultdict
from typing import Protocol

from todoctl.domain.ids import ProjectId, RecurrenceRuleId, ReminderId, TagId, TaskId, format_id


class IdGenerator(Protocol):
    def task_id(self) -> TaskId: ...

    def reminder_id(self) -> ReminderId: ...

    def recurrence_rule_id(self) -> RecurrenceRuleId: ...

    def project_id(self) -> ProjectId: ...

    def tag_id(self) -> TagId: ...


class UuidIdGenerator:
    """Random prefixed ids (``task_``, ``rem_``, ``proj_`` and so on, + 12 hex chars)."""

    def _new(self, entity: str) -> str:
        return format_id(entity, uuid.uuid4().hex)

    def task_id(self) -> TaskId:
        return TaskId(self._new("task"))

    def reminder_id(self) -> ReminderId:
        return ReminderId(self._new("reminder"))

    def recurrence_rule_id(self) -> RecurrenceRuleId:
        return RecurrenceRuleId(self._new("recurrence_rule"))

    def project_id(self) -> ProjectId:
        return ProjectId(self._new("project"))

    def tag_id(self) -> TagId:
        return TagId(self._new("tag"))


class SequentialIdGenerator:
    """Gap-free per-entity counters. Thread-safe."""

    def __init__(self) -> None:
        self._counters: defaultdict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def _next(self, entity: str) -> str:
        with self._lock:
            self._counters[entity] += 1
            value = self._counters[entity]
        return format_id(entity, f"{value:012x}")

    def task_id(self) -> TaskId:
        return TaskId(self._next("task"))

    def reminder_id(self) -> ReminderId:
        return ReminderId(self._next("reminder"))

    def recurrence_rule_id(self) -> RecurrenceRuleId:
        return RecurrenceRuleId(self._next("recurrence_rule"))

    def project_id(self) -> ProjectId:
        return ProjectId(self._next("project"))

    def tag_id(self) -> TagId:
        return TagId(self._next("tag"))
