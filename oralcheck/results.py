"""
oralcheck.results - Outcome type for request/response boundaries.

An Outcome carries either a value or a Failure. Failures are classified as
validation (bad input), upstream (provider error) or internal (local fault),
and map to HTTP status codes and JSON error payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


_STATUS_CODES = {
    FailureKind.VALIDATION: 400,
    FailureKind.UPSTREAM: 500,
    FailureKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class Failure:
    """A classified failure with a short message and optional diagnostic detail."""

    kind: FailureKind
    message: str
    detail: str | None = None

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def to_payload(self, detail_key: str = "detail") -> dict[str, Any]:
        """JSON error body: {"error": message, detail_key: detail}."""
        payload: dict[str, Any] = {"error": self.message}
        if self.detail:
            payload[detail_key] = self.detail
        return payload


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a successful value or a Failure."""

    value: T | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def validation(cls, message: str, detail: str | None = None) -> Outcome[T]:
        return cls(failure=Failure(FailureKind.VALIDATION, message, detail))

    @classmethod
    def upstream(cls, message: str, detail: str | None = None) -> Outcome[T]:
        return cls(failure=Failure(FailureKind.UPSTREAM, message, detail))

    @classmethod
    def internal(cls, message: str, detail: str | None = None) -> Outcome[T]:
        return cls(failure=Failure(FailureKind.INTERNAL, message, detail))
