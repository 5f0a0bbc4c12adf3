"""Domain error taxonomy: flat, tagged, pure data.

Errors are values returned inside :class:`~todoctl.domain.result.Err`,
never exceptions. The ``type`` literal is the discriminator callers
match on; the service layer maps it to a ``ServiceError.code``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _DomainErrorBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ValidationError(_DomainErrorBase):
    """Malformed input to a constructor or field update. Never retried."""

    type: Literal["ValidationError"] = "ValidationError"
    field: str
    message: str


class InvalidStateTransitionError(_DomainErrorBase):
    """A transition the entity's state machine forbids."""

    type: Literal["InvalidStateTransitionError"] = "InvalidStateTransitionError"
    entity: str
    from_status: str = Field(alias="from")
    to_status: str = Field(alias="to")
    message: str


class NotFoundError(_DomainErrorBase):
    """A referenced entity is missing. Produced by orchestration only."""

    type: Literal["NotFoundError"] = "NotFoundError"
    entity: str
    id: str


class ConflictError(_DomainErrorBase):
    """A uniqueness violation. Produced by orchestration only."""

    type: Literal["ConflictError"] = "ConflictError"
    entity: str
    message: str


type DomainError = ValidationError | InvalidStateTransitionError | NotFoundError | ConflictError


def invalid_transition(
    entity: str, from_status: str, to_status: str, message: str
) -> InvalidStateTransitionError:
    """Build an :class:`InvalidStateTransitionError` without alias juggling."""
    return InvalidStateTransitionError(
        entity=entity,
        from_status=from_status,
        to_status=to_status,
        message=message,
    )
