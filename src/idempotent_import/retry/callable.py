"""Retrying wrapper that runs a unit of work under a retry strategy library."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Generic, TypeVar

from idempotent_import.monitor import Monitor
from idempotent_import.retry.library import RetryStrategyLibrary

T = TypeVar("T")


class RetryError(Exception):
    """Terminal failure after the retry strategy gave up."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        attempts: int,
        cause: Exception,
        can_skip: bool,
        policy_name: str,
        elapsed_seconds: float = 0.0,
    ) -> None:
        super().__init__(
            f"Gave up after {attempts} attempt(s) under policy {policy_name!r}: "
            f"{type(cause).__name__}: {cause}",
        )
        self.attempts = attempts
        self.cause = cause
        self.can_skip = can_skip
        self.policy_name = policy_name
        self.elapsed_seconds = elapsed_seconds


class RetryingCallable(Generic[T]):
    """Call ``work`` until it succeeds or the selected strategy stops retrying."""

    def __init__(
        self,
        work: Callable[[], T],
        library: RetryStrategyLibrary,
        monitor: Monitor,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._work = work
        self._library = library
        self._monitor = monitor
        self._sleep = sleep
        self._clock = clock
        self._attempts = 0

    @property
    def attempts(self) -> int:
        return self._attempts

    def call(self) -> T:
        """Run the work, retrying per library; raise ``RetryError`` on exhaustion."""

        started = self._clock()
        while True:
            self._attempts += 1
            try:
                return self._work()
            except Exception as exc:  # noqa: BLE001
                error = exc
                decision = self._library.checkout(error)
                attempts = self._attempts
                if not decision.strategy.should_retry(attempts):
                    raise RetryError(
                        attempts=attempts,
                        cause=error,
                        can_skip=decision.can_skip,
                        policy_name=decision.name,
                        elapsed_seconds=self._clock() - started,
                    ) from error
                delay = decision.strategy.get_remaining_interval_until_next_retry(attempts)
                self._monitor.debug(
                    _retry_message(attempts, error, decision.name, delay),
                )
                if delay > 0:
                    self._sleep(delay)


def _retry_message(
    attempts: int,
    error: Exception,
    policy_name: str,
    delay: float,
) -> Callable[[], str]:
    # Values are bound per attempt; suppliers may be consumed after the loop moves on.
    return lambda: (
        f"Attempt {attempts} failed with {type(error).__name__}: {error}; "
        f"retrying under policy {policy_name!r} in {delay:.3f}s"
    )
