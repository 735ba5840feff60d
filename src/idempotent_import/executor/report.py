"""Error ledger reporting for end-of-job summaries and progress checkpoints."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from idempotent_import.executor.base import IdempotentExecutor
from idempotent_import.executor.models import ErrorDetail


@dataclass(slots=True, frozen=True)
class ErrorReport:
    """Aggregated view over a set of recorded failures."""

    total: int
    skippable: int
    fatal: int
    errors: tuple[ErrorDetail, ...]

    @classmethod
    def from_errors(cls, errors: Iterable[ErrorDetail]) -> ErrorReport:
        items = tuple(errors)
        skippable = sum(1 for item in items if item.can_skip)
        return cls(
            total=len(items),
            skippable=skippable,
            fatal=len(items) - skippable,
            errors=items,
        )

    @property
    def has_fatal(self) -> bool:
        return self.fatal > 0

    def summary_line(self) -> str:
        """One-line summary for logs and progress output."""

        if self.total == 0:
            return "No import errors."
        return f"Import errors: total={self.total} skippable={self.skippable} fatal={self.fatal}"

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "skippable": self.skippable,
            "fatal": self.fatal,
            "errors": [item.to_dict() for item in self.errors],
        }


def build_error_report(executor: IdempotentExecutor) -> ErrorReport:
    """Full-job failure ledger."""

    return ErrorReport.from_errors(executor.get_errors())


def checkpoint_recent_errors(executor: IdempotentExecutor) -> ErrorReport:
    """Failures since the previous checkpoint; the recent buffer is cleared."""

    return ErrorReport.from_errors(executor.drain_recent_errors())
