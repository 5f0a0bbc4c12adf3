"""Project entity: a named, optionally colored container for tasks.

A project is either active or archived. Archiving only hides the project
from the default listing; its tasks are untouched. Operations follow the
task module's shape: explicit ``now``, new value out, errors as values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from todoctl.domain.calendar import as_utc
from todoctl.domain.errors import InvalidStateTransitionError, ValidationError, invalid_transition
from todoctl.domain.ids import ProjectId, WorkspaceId
from todoctl.domain.result import Err, Ok, Result
from todoctl.domain.types import UNSET, EntityKind, Unset
from todoctl.domain.validation import validate_name


class Project(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: ProjectId
    workspace_id: WorkspaceId
    name: str
    color: str | None = None
    archived: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


@dataclass(frozen=True)
class ProjectChanges:
    """``UNSET`` keeps a field; ``color=None`` clears the color."""

    name: str | Unset = UNSET
    color: str | None | Unset = UNSET

    @property
    def is_empty(self) -> bool:
        return self.name is UNSET and self.color is UNSET


def normalize_color(color: str | None) -> str | None:
    """Trimmed color label; blank means no color. Shared with tags."""
    if color is None:
        return None
    trimmed = color.strip()
    return trimmed or None


def _validate_project_name(name: str) -> Result[str, ValidationError]:
    return validate_name(name, label="Project name")


def create_project(
    name: str,
    now: datetime,
    workspace_id: WorkspaceId,
    *,
    project_id: ProjectId,
    color: str | None = None,
) -> Result[Project, ValidationError]:
    name_result = _validate_project_name(name)
    if isinstance(name_result, Err):
        return name_result
    now = as_utc(now)
    return Ok(
        Project(
            id=project_id,
            workspace_id=workspace_id,
            name=name_result.value,
            color=normalize_color(color),
            created_at=now,
            updated_at=now,
        )
    )


def update_project(
    project: Project, changes: ProjectChanges, now: datetime
) -> Result[Project, ValidationError]:
    """Rename or recolor *project*. Archived projects may be edited too."""
    update: dict[str, object] = {"updated_at": as_utc(now)}
    if changes.name is not UNSET:
        name_result = _validate_project_name(changes.name)
        if isinstance(name_result, Err):
            return name_result
        update["name"] = name_result.value
    if changes.color is not UNSET:
        update["color"] = normalize_color(changes.color)
    return Ok(project.model_copy(update=update))


def archive_project(
    project: Project, now: datetime
) -> Result[Project, InvalidStateTransitionError]:
    if project.archived:
        return Err(
            invalid_transition(
                EntityKind.PROJECT, "archived", "archived", "Project is already archived"
            )
        )
    return Ok(project.model_copy(update={"archived": True, "updated_at": as_utc(now)}))


def unarchive_project(
    project: Project, now: datetime
) -> Result[Project, InvalidStateTransitionError]:
    if not project.archived:
        return Err(
            invalid_transition(EntityKind.PROJECT, "active", "active", "Project is not archived")
        )
    return Ok(project.model_copy(update={"archived": False, "updated_at": as_utc(now)}))
