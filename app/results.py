"""Tagged success/failure values used for expected failure paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeGuard, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome wrapping ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome wrapping ``error``."""

    error: E


Result = Union[Err[E], Ok[T]]


def ok(value: T) -> Ok[T]:
    return Ok(value)


def err(error: E) -> Err[E]:
    return Err(error)


def is_ok(result: Result[E, T]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err(result: Result[E, T]) -> TypeGuard[Err[E]]:
    return isinstance(result, Err)


def map_result(result: Result[E, T], fn: Callable[[T], U]) -> Result[E, U]:
    """Apply ``fn`` to a success value, leaving failures untouched."""

    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def map_error(result: Result[E, T], fn: Callable[[E], F]) -> Result[F, T]:
    """Apply ``fn`` to a failure payload, leaving successes untouched."""

    if isinstance(result, Err):
        return Err(fn(result.error))
    return result


def combine_all(results: Iterable[Result[E, T]]) -> Result[list[E], list[T]]:
    """Collapse many results into one.

    Returns ``Ok`` with every success value when nothing failed, otherwise an
    ``Err`` carrying every failure payload. Input order is kept either way.
    """

    values: list[T] = []
    errors: list[E] = []
    for result in results:
        if isinstance(result, Ok):
            values.append(result.value)
        else:
            errors.append(result.error)
    if errors:
        return Err(errors)
    return Ok(values)
