"""Shared test fixtures."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

import pytest

from idempotent_import.executor.in_memory import RetryingInMemoryIdempotentExecutor
from idempotent_import.retry.library import RetryMapping, RetryStrategyLibrary
from idempotent_import.retry.strategies import NoRetryStrategy, UniformRetryStrategy


class SkippableImportError(Exception):
    """Failure the test retry library treats as skippable."""


class FatalImportError(Exception):
    """Failure the test retry library treats as fatal."""


class TransientImportError(Exception):
    """Failure the test retry library retries."""


@dataclass
class RecordingMonitor:
    """Monitor that evaluates suppliers eagerly and keeps the messages."""

    debugs: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)
    severes: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def debug(self, supplier) -> None:
        with self._lock:
            self.debugs.append(supplier())

    def info(self, supplier) -> None:
        with self._lock:
            self.infos.append(supplier())

    def severe(self, supplier) -> None:
        with self._lock:
            self.severes.append(supplier())


@pytest.fixture()
def monitor() -> RecordingMonitor:
    return RecordingMonitor()


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def retry_library() -> RetryStrategyLibrary:
    """Skippable and fatal errors fail immediately; transient errors get three attempts."""

    return RetryStrategyLibrary(
        [
            RetryMapping(
                strategy=NoRetryStrategy(),
                name="skippable",
                exception_types=(SkippableImportError,),
                can_skip=True,
            ),
            RetryMapping(
                strategy=NoRetryStrategy(),
                name="fatal",
                exception_types=(FatalImportError,),
            ),
            RetryMapping(
                strategy=UniformRetryStrategy(max_attempts=3, interval_seconds=0.5),
                name="transient",
                exception_types=(TransientImportError,),
            ),
        ],
        NoRetryStrategy(),
    )


@pytest.fixture()
def executor(monitor, retry_library, sleeps) -> RetryingInMemoryIdempotentExecutor:
    return RetryingInMemoryIdempotentExecutor(monitor, retry_library, sleep=sleeps.append)
