"""Error records and exceptions for the idempotent executor."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ErrorDetail:
    """Most recent terminal failure recorded for one idempotent id."""

    id: str
    title: str
    exception: str
    can_skip: bool = False
    attempts: int = 0

    def to_dict(self) -> dict[str, object]:
        """Serialize for job reports."""

        return {
            "id": self.id,
            "title": self.title,
            "exception": self.exception,
            "can_skip": self.can_skip,
            "attempts": self.attempts,
        }


class IdempotentExecutorError(Exception):
    """Base class for executor usage errors."""


class UnknownIdempotentIdError(IdempotentExecutorError, LookupError):
    """Raised when a cached value is requested for an id that never succeeded."""

    def __init__(self, idempotent_id: str, known_ids: Iterable[str]) -> None:
        self.idempotent_id = idempotent_id
        self.known_ids = tuple(sorted(known_ids))
        super().__init__(
            f"{idempotent_id} is not a known key, known keys: {', '.join(self.known_ids)}",
        )


class CachedValueTypeError(IdempotentExecutorError, TypeError):
    """Raised when a cached value does not have the type the caller expects."""

    def __init__(self, idempotent_id: str, expected: type, actual: object) -> None:
        self.idempotent_id = idempotent_id
        self.expected = expected
        self.actual_type = type(actual)
        super().__init__(
            f"Cached value for {idempotent_id} is {self.actual_type.__name__}, "
            f"expected {expected.__name__}",
        )
