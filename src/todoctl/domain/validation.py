"""Validation primitives: bounded strings and numeric ranges.

Every validator returns ``Ok(normalized_value)`` or
``Err(ValidationError)``. None of them raise.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from todoctl.domain.errors import ValidationError
from todoctl.domain.result import Err, Ok, Result

TITLE_MAX_LENGTH = 200
PROJECT_NAME_MAX_LENGTH = 100
TAG_NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_bounded_string(
    value: str,
    field: str,
    *,
    min_length: int = 1,
    max_length: int,
    label: str | None = None,
) -> Result[str, ValidationError]:
    """Trim *value* and check ``min_length <= len <= max_length``."""
    name = label or field.capitalize()
    if not isinstance(value, str):
        return Err(ValidationError(field=field, message=f"{name} must be a string"))
    trimmed = value.strip()
    if len(trimmed) < min_length:
        return Err(ValidationError(field=field, message=f"{name} must not be empty"))
    if len(trimmed) > max_length:
        return Err(
            ValidationError(
                field=field,
                message=f"{name} must not exceed {max_length} characters",
            )
        )
    return Ok(trimmed)


def validate_title(title: str) -> Result[str, ValidationError]:
    return validate_bounded_string(title, "title", max_length=TITLE_MAX_LENGTH)


def validate_name(
    name: str, *, max_length: int = PROJECT_NAME_MAX_LENGTH, label: str = "Name"
) -> Result[str, ValidationError]:
    """Project and tag names (tags pass ``max_length=TAG_NAME_MAX_LENGTH``)."""
    return validate_bounded_string(name, "name", max_length=max_length, label=label)


def validate_email(email: str) -> Result[str, ValidationError]:
    """Lower-cased, trimmed address of the form ``local@domain.tld``."""
    normalized = email.strip().lower() if isinstance(email, str) else ""
    if not _EMAIL_PATTERN.match(normalized):
        return Err(ValidationError(field="email", message="Invalid email address"))
    return Ok(normalized)


def validate_password(password: str) -> Result[str, ValidationError]:
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return Err(
            ValidationError(
                field="password",
                message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            )
        )
    return Ok(password)


def is_strict_int(value: object) -> bool:
    """True for real integers; ``bool`` and integral floats do not count."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_int_range(
    value: object,
    field: str,
    *,
    minimum: int,
    maximum: int | None = None,
    message: str | None = None,
) -> Result[int, ValidationError]:
    """Check *value* is an integer within ``[minimum, maximum]``."""
    in_range = is_strict_int(value) and value >= minimum  # type: ignore[operator]
    if in_range and maximum is not None:
        in_range = value <= maximum  # type: ignore[operator]
    if not in_range:
        if message is None:
            bound = f"{minimum}-{maximum}" if maximum is not None else f">= {minimum}"
            message = f"{field} must be an integer {bound}"
        return Err(ValidationError(field=field, message=message))
    return Ok(int(value))  # type: ignore[arg-type]


def validate_int_set(
    values: Iterable[object],
    field: str,
    *,
    minimum: int,
    maximum: int,
    message: str,
) -> Result[tuple[int, ...], ValidationError]:
    """Non-empty collection of integers in range, returned sorted and de-duplicated."""
    items = list(values)
    if not items:
        return Err(
            ValidationError(field=field, message=f"{field} must not be empty when provided")
        )
    for item in items:
        if not is_strict_int(item) or not minimum <= item <= maximum:  # type: ignore[operator]
            return Err(ValidationError(field=field, message=message))
    return Ok(tuple(sorted(set(items))))  # type: ignore[arg-type]
