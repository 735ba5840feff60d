"""Caller-facing contract for idempotent import executors."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable
from uuid import UUID

from idempotent_import.executor.models import ErrorDetail

T = TypeVar("T")


@runtime_checkable
class IdempotentExecutor(Protocol):
    """Executes each idempotent id at most once per job and records failures."""

    def execute_or_throw(
        self,
        idempotent_id: str,
        item_name: str,
        work: Callable[[], T],
        *,
        result_type: type[T] | None = None,
    ) -> T | None:
        """Return the cached result or run ``work``; ``None`` means the item was skipped."""

    def execute_and_swallow(
        self,
        idempotent_id: str,
        item_name: str,
        work: Callable[[], T],
        *,
        result_type: type[T] | None = None,
    ) -> T | None:
        """Like ``execute_or_throw`` but terminal failures become ``None``."""

    def get_cached_value(self, idempotent_id: str, result_type: type[T] | None = None) -> T:
        """Return the cached result for an id that is known to have succeeded."""

    def is_key_cached(self, idempotent_id: str) -> bool:
        """Return whether ``idempotent_id`` has a cached result."""

    def get_errors(self) -> list[ErrorDetail]:
        """Return a copy of all recorded failures."""

    def get_recent_errors(self) -> list[ErrorDetail]:
        """Return a copy of the failures recorded since the last reset."""

    def reset_recent_errors(self) -> None:
        """Clear the recent failure buffer."""

    def drain_recent_errors(self) -> list[ErrorDetail]:
        """Return the recent failures and clear the buffer atomically."""

    def set_job_id(self, job_id: UUID | str | None) -> None:
        """Bind the job identifier used for log prefixes."""
