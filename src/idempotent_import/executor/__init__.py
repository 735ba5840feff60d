"""Idempotent executor: per-job result cache with retry and error bookkeeping."""

from idempotent_import.executor.base import IdempotentExecutor
from idempotent_import.executor.in_memory import RetryingInMemoryIdempotentExecutor
from idempotent_import.executor.models import (
    CachedValueTypeError,
    ErrorDetail,
    IdempotentExecutorError,
    UnknownIdempotentIdError,
)
from idempotent_import.executor.report import (
    ErrorReport,
    build_error_report,
    checkpoint_recent_errors,
)

__all__ = [
    "CachedValueTypeError",
    "ErrorDetail",
    "ErrorReport",
    "IdempotentExecutor",
    "IdempotentExecutorError",
    "RetryingInMemoryIdempotentExecutor",
    "UnknownIdempotentIdError",
    "build_error_report",
    "checkpoint_recent_errors",
]
