"""Opaque identifiers, prefixes, and validation.

Each entity gets a distinct ``NewType`` over ``str`` so a type checker
rejects passing a ``ReminderId`` where a ``TaskId`` is expected. At
runtime they are plain strings.

Generated ids are ``{prefix}{12 hex chars}``; external ids (users,
workspaces) are accepted verbatim.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
from typing import NewType

TaskId = NewType("TaskId", str)
ReminderId = NewType("ReminderId", str)
RecurrenceRuleId = NewType("RecurrenceRuleId", str)
ProjectId = NewType("ProjectId", str)
TagId = NewType("TagId", str)
UserId = NewType("UserId", str)
WorkspaceId = NewType("WorkspaceId", str)

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "task": re.compile(r"^task_[0-9a-f]{12}$"),
    "reminder": re.compile(r"^rem_[0-9a-f]{12}$"),
    "recurrence_rule": re.compile(r"^rule_[0-9a-f]{12}$"),
    "project": re.compile(r"^proj_[0-9a-f]{12}$"),
    "tag": re.compile(r"^tag_[0-9a-f]{12}$"),
}

TYPE_PREFIXES: dict[str, str] = {
    "task": "task_",
    "reminder": "rem_",
    "recurrence_rule": "rule_",
    "project": "proj_",
    "tag": "tag_",
}


def format_id(entity: str, token: str) -> str:
    """Compose an id from an entity kind and a hex *token*.

    Raises:
        KeyError: If *entity* has no registered prefix.
    """
    return f"{TYPE_PREFIXES[entity]}{token[:12].lower()}"


def validate_id(value: str, entity: str) -> bool:
    """Check whether *value* matches the expected pattern for *entity*."""
    pattern = ID_PATTERNS.get(entity)
    if pattern is None:
        return False
    return pattern.match(value) is not None
