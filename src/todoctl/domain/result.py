"""Result: tagged success/error union for every fallible domain function.

INVARIANT: Domain functions never raise for expected failures. They return
``Ok(value)`` or ``Err(error)`` and callers pattern-match on the outcome::

    match complete_task(task, now):
        case Ok(value=done):
            ...
        case Err(error=err):
            ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying *value*."""

    value: T

    @property
    def ok(self) -> Literal[True]:
        return True


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying a typed *error*."""

    error: E

    @property
    def ok(self) -> Literal[False]:
        return False


type Result[T, E] = Ok[T] | Err[E]


def map_result[T, U, E](result: Result[T, E], fn: Callable[[T], U]) -> Result[U, E]:
    """Apply *fn* to the success value, passing errors through untouched."""
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def and_then[T, U, E](result: Result[T, E], fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
    """Chain a fallible step; short-circuits on the first error."""
    if isinstance(result, Ok):
        return fn(result.value)
    return result
