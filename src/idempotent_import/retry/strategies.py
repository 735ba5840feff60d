"""Retry strategies deciding whether and when to re-run a failed operation."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod


class RetryStrategy(ABC):
    """Decides retry eligibility and delay from the number of attempts made so far."""

    @abstractmethod
    def should_retry(self, attempts: int) -> bool:
        """Return whether another attempt is allowed after ``attempts`` failures."""

    @abstractmethod
    def get_remaining_interval_until_next_retry(self, attempts: int) -> float:
        """Return seconds to wait before the next attempt."""


class NoRetryStrategy(RetryStrategy):
    """Fail on the first error."""

    def should_retry(self, attempts: int) -> bool:
        return False

    def get_remaining_interval_until_next_retry(self, attempts: int) -> float:
        return 0.0

    def __repr__(self) -> str:
        return "NoRetryStrategy()"


class UniformRetryStrategy(RetryStrategy):
    """Retry up to ``max_attempts`` total attempts with a fixed interval."""

    def __init__(self, *, max_attempts: int, interval_seconds: float) -> None:
        _validate_max_attempts(max_attempts)
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0.")
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds

    def should_retry(self, attempts: int) -> bool:
        return attempts < self.max_attempts

    def get_remaining_interval_until_next_retry(self, attempts: int) -> float:
        return self.interval_seconds

    def __repr__(self) -> str:
        return (
            f"UniformRetryStrategy(max_attempts={self.max_attempts}, "
            f"interval_seconds={self.interval_seconds})"
        )


class ExponentialBackoffStrategy(RetryStrategy):
    """Retry with exponentially growing, optionally capped and jittered, intervals.

    The interval after attempt ``n`` is ``initial * multiplier ** (n - 1)``,
    capped at ``max_interval_seconds``. With ``jitter`` enabled the delay is
    drawn uniformly from ``[0, interval]``.
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        max_attempts: int,
        initial_interval_seconds: float,
        multiplier: float = 2.0,
        max_interval_seconds: float | None = None,
        jitter: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        _validate_max_attempts(max_attempts)
        if initial_interval_seconds < 0:
            raise ValueError("initial_interval_seconds must be >= 0.")
        if multiplier < 1:
            raise ValueError("multiplier must be >= 1.")
        if max_interval_seconds is not None and max_interval_seconds < initial_interval_seconds:
            raise ValueError("max_interval_seconds must be >= initial_interval_seconds.")
        self.max_attempts = max_attempts
        self.initial_interval_seconds = initial_interval_seconds
        self.multiplier = multiplier
        self.max_interval_seconds = max_interval_seconds
        self.jitter = jitter
        self._random = rng or random.Random()

    def should_retry(self, attempts: int) -> bool:
        return attempts < self.max_attempts

    def get_remaining_interval_until_next_retry(self, attempts: int) -> float:
        interval = self.initial_interval_seconds * (self.multiplier ** max(attempts - 1, 0))
        if self.max_interval_seconds is not None:
            interval = min(interval, self.max_interval_seconds)
        if self.jitter:
            return self._random.uniform(0, interval)
        return interval

    def __repr__(self) -> str:
        return (
            f"ExponentialBackoffStrategy(max_attempts={self.max_attempts}, "
            f"initial_interval_seconds={self.initial_interval_seconds}, "
            f"multiplier={self.multiplier}, max_interval_seconds={self.max_interval_seconds}, "
            f"jitter={self.jitter})"
        )


def _validate_max_attempts(max_attempts: int) -> None:
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1.")
