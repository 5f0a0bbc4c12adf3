"""ServiceResult: what every service method returns.

Domain errors arrive as typed values and leave as a ServiceError with a
stable ``code`` (see ``ERROR_CODES``); the CLI maps ``ok=False`` to exit 1.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from todoctl.domain.errors import (
    ConflictError,
    DomainError,
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)

ERROR_CODES: dict[type[BaseModel], str] = {
    ValidationError: "VALIDATION_FAILED",
    InvalidStateTransitionError: "INVALID_TRANSITION",
    NotFoundError: "NOT_FOUND",
    ConflictError: "CONFLICT",
}


class ServiceError(BaseModel):
    """``code`` is stable for scripts; ``detail`` is the domain error as JSON."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, error: DomainError) -> ServiceError:
        """Map a typed domain error to its service error code."""
        if isinstance(error, NotFoundError):
            message = f"No {error.entity} found with ID: {error.id}"
        else:
            message = error.message
        return cls(
            code=ERROR_CODES[type(error)],
            message=message,
            detail=error.model_dump(mode="json", by_alias=True),
        )


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: False exactly when ``error`` is set.
        op: Operation name, e.g. ``"create_task"``; selects the renderer.
        data: Validated payload (see :mod:`todoctl.services.contracts`).
        warnings: Plugin or event-dispatch problems that did not stop the call.
        error: Set on failure.
        meta: Extra counts for verbose output, e.g. ``task_count``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls, op: str, error: DomainError, *, warnings: list[str] | None = None
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError.from_domain(error),
            warnings=warnings or [],
        )
