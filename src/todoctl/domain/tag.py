"""Tag entity. Names are unique per workspace; the service enforces that."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from todoctl.domain.calendar import as_utc
from todoctl.domain.errors import ValidationError
from todoctl.domain.ids import TagId, WorkspaceId
from todoctl.domain.project import normalize_color
from todoctl.domain.result import Err, Ok, Result
from todoctl.domain.types import UNSET, Unset
from todoctl.domain.validation import TAG_NAME_MAX_LENGTH, validate_name


class Tag(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: TagId
    workspace_id: WorkspaceId
    name: str
    color: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


@dataclass(frozen=True)
class TagChanges:
    name: str | Unset = UNSET
    color: str | None | Unset = UNSET

    @property
    def is_empty(self) -> bool:
        return self.name is UNSET and self.color is UNSET


def validate_tag_name(name: str) -> Result[str, ValidationError]:
    return validate_name(name, max_length=TAG_NAME_MAX_LENGTH, label="Tag name")


def create_tag(
    name: str,
    now: datetime,
    workspace_id: WorkspaceId,
    *,
    tag_id: TagId,
    color: str | None = None,
) -> Result[Tag, ValidationError]:
    name_result = validate_tag_name(name)
    if isinstance(name_result, Err):
        return name_result
    now = as_utc(now)
    return Ok(
        Tag(
            id=tag_id,
            workspace_id=workspace_id,
            name=name_result.value,
            color=normalize_color(color),
            created_at=now,
            updated_at=now,
        )
    )


def update_tag(tag: Tag, changes: TagChanges, now: datetime) -> Result[Tag, ValidationError]:
    update: dict[str, object] = {"updated_at": as_utc(now)}
    if changes.name is not UNSET:
        name_result = validate_tag_name(changes.name)
        if isinstance(name_result, Err):
            return name_result
        update["name"] = name_result.value
    if changes.color is not UNSET:
        update["color"] = normalize_color(changes.color)
    return Ok(tag.model_copy(update=update))
