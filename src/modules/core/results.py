"""Explicit outcome of a service-layer operation.

Transactional operations return a ``ServiceResult`` instead of letting
domain exceptions escape: the transaction boundary inspects the result
and rolls back whenever it carries an error, and the API layer maps the
error kind onto an HTTP status.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""

    NOT_FOUND = "not_found"
    RECONCILIATION = "reconciliation"


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    detail: str
    code: str = "invalid"
    attr: Optional[str] = None


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Either a value (success) or a ``ServiceError`` (failure)."""

    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> ServiceResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ServiceError) -> ServiceResult[T]:
        return cls(error=error)
