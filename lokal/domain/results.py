"""Explicit success/failure values returned by application services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Coarse failure classification shared by services and routes."""

    NOT_FOUND = "not_found"
    STORE = "store"
    DELIVERY = "delivery"
    INVALID = "invalid"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a service call that never raises past its boundary.

    ``ok`` with a ``None`` value is a legitimate empty answer; a failure always
    carries an ``error_kind``.
    """

    ok: bool
    value: T | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "OperationResult[T]":
        return cls(ok=False, error_kind=kind, error=error)

    def __bool__(self) -> bool:
        return self.ok


__all__ = ["ErrorKind", "OperationResult"]
