"""Typed Result container for explicit success/failure returns.

Motivation
----------
Event-triggered collections have no caller waiting on them, so a reader
failure would otherwise vanish. Instead of dropping it, the collector hands
back a `Result[Snapshot, CollectionError]` that the event binder (or any
other caller) can inspect:

- `Ok(value)` / `Err(error)` variants,
- `is_ok` / `is_err` checks,
- `unwrap` / `unwrap_err` accessors.

Example
-------
>>> from envsnap.core.result import ok, err, Result
>>> def parse_port(x: str) -> Result[int, str]:
...     return ok(int(x)) if x.isdigit() else err("not a port")
>>> parse_port("8080").unwrap()
8080
>>> parse_port("http").unwrap_err()
'not a port'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, cast

T = TypeVar("T")
E = TypeVar("E")


class Result(Generic[T, E]):
    """Sum type representing either success (`Ok[T]`) or failure (`Err[E]`)."""

    def is_ok(self) -> bool:
        """Return ``True`` if this is an :class:`Ok` value."""
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` if this is an :class:`Err` value."""
        return isinstance(self, Err)

    def unwrap(self) -> T:
        """Return the inner value if ``Ok``.

        On ``Err`` the wrapped error is re-raised when it is an exception,
        otherwise a :class:`RuntimeError` describing it is raised.
        """
        if isinstance(self, Ok):
            return cast(Ok[T, E], self).value
        error = cast(Err[T, E], self).error
        if isinstance(error, BaseException):
            raise error
        raise RuntimeError(f"Attempted to unwrap Err: {self!r}")

    def unwrap_err(self) -> E:
        """Return the error value if ``Err``, else raise."""
        if isinstance(self, Err):
            return cast(Err[T, E], self).error
        raise RuntimeError(f"Attempted to unwrap_err on Ok: {self!r}")


@dataclass(frozen=True)
class Ok(Result[T, E]):
    """Successful result wrapping a value of type ``T``."""

    value: T


@dataclass(frozen=True)
class Err(Result[T, E]):
    """Failed result wrapping an error payload of type ``E``."""

    error: E


def ok(value: T) -> Result[T, E]:
    """Construct :class:`Ok` with better type inference at call sites."""
    return Ok(value)


def err(error: E) -> Result[T, E]:
    """Construct :class:`Err` with better type inference at call sites."""
    return Err(error)


__all__ = ["Result", "Ok", "Err", "ok", "err"]
