from __future__ import annotations

import random

import allure
import pytest

from idempotent_import.retry.strategies import (
    ExponentialBackoffStrategy,
    NoRetryStrategy,
    UniformRetryStrategy,
)

pytestmark = [
    allure.epic("Retry Policy"),
    allure.feature("Strategies"),
]


def test_no_retry_strategy_never_retries() -> None:
    strategy = NoRetryStrategy()
    assert not strategy.should_retry(1)
    assert strategy.get_remaining_interval_until_next_retry(1) == 0.0


def test_uniform_strategy_counts_total_attempts() -> None:
    strategy = UniformRetryStrategy(max_attempts=3, interval_seconds=2.0)
    assert strategy.should_retry(1)
    assert strategy.should_retry(2)
    assert not strategy.should_retry(3)
    assert strategy.get_remaining_interval_until_next_retry(2) == 2.0


def test_exponential_strategy_grows_and_caps() -> None:
    strategy = ExponentialBackoffStrategy(
        max_attempts=6,
        initial_interval_seconds=1.0,
        multiplier=3.0,
        max_interval_seconds=10.0,
    )
    intervals = [strategy.get_remaining_interval_until_next_retry(n) for n in range(1, 5)]
    assert intervals == [1.0, 3.0, 9.0, 10.0]
    assert strategy.should_retry(5)
    assert not strategy.should_retry(6)


def test_exponential_strategy_full_jitter_stays_within_bound() -> None:
    strategy = ExponentialBackoffStrategy(
        max_attempts=4,
        initial_interval_seconds=2.0,
        jitter=True,
        rng=random.Random(7),
    )
    for attempt in range(1, 4):
        delay = strategy.get_remaining_interval_until_next_retry(attempt)
        assert 0 <= delay <= 2.0 * 2 ** (attempt - 1)


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"max_attempts": 0, "initial_interval_seconds": 1.0}, "max_attempts"),
        ({"max_attempts": 2, "initial_interval_seconds": -1.0}, "initial_interval_seconds"),
        ({"max_attempts": 2, "initial_interval_seconds": 1.0, "multiplier": 0.5}, "multiplier"),
        (
            {"max_attempts": 2, "initial_interval_seconds": 2.0, "max_interval_seconds": 1.0},
            "max_interval_seconds",
        ),
    ],
)
def test_exponential_strategy_rejects_invalid_parameters(kwargs, message) -> None:
    with pytest.raises(ValueError, match=message):
        ExponentialBackoffStrategy(**kwargs)


def test_uniform_strategy_rejects_negative_interval() -> None:
    with pytest.raises(ValueError, match="interval_seconds"):
        UniformRetryStrategy(max_attempts=2, interval_seconds=-0.1)
