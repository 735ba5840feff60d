from __future__ import annotations

import allure

from idempotent_import.config import RetrySettings
from idempotent_import.retry.library import (
    DEFAULT_POLICY_NAME,
    SKIPPABLE_POLICY_NAME,
    RetryMapping,
    RetryStrategyLibrary,
)
from idempotent_import.retry.strategies import (
    ExponentialBackoffStrategy,
    NoRetryStrategy,
    UniformRetryStrategy,
)

pytestmark = [
    allure.epic("Retry Policy"),
    allure.feature("Strategy Library"),
]


class DestinationQuotaError(Exception):
    pass


def test_mapping_matches_exception_subclasses() -> None:
    mapping = RetryMapping(
        strategy=NoRetryStrategy(),
        name="io",
        exception_types=(OSError,),
    )
    assert mapping.matches(ConnectionResetError("reset"))
    assert not mapping.matches(ValueError("nope"))


def test_mapping_regex_sees_class_name_and_message() -> None:
    mapping = RetryMapping(
        strategy=NoRetryStrategy(),
        name="quota",
        regexes=(r"^DestinationQuota", r"too many requests"),
    )
    assert mapping.matches(DestinationQuotaError("daily limit"))
    assert mapping.matches(RuntimeError("HTTP 429: Too Many Requests"))
    assert not mapping.matches(RuntimeError("HTTP 500"))


def test_empty_mapping_matches_nothing() -> None:
    mapping = RetryMapping(strategy=NoRetryStrategy(), name="empty")
    assert not mapping.matches(Exception("anything"))


def test_first_matching_mapping_wins() -> None:
    uniform = UniformRetryStrategy(max_attempts=2, interval_seconds=1.0)
    library = RetryStrategyLibrary(
        [
            RetryMapping(
                strategy=NoRetryStrategy(),
                name="media",
                regexes=("unsupported media",),
                can_skip=True,
            ),
            RetryMapping(strategy=uniform, name="runtime", exception_types=(RuntimeError,)),
        ],
        NoRetryStrategy(),
    )

    decision = library.checkout(RuntimeError("unsupported media type"))
    assert decision.name == "media"
    assert decision.can_skip is True

    decision = library.checkout(RuntimeError("boom"))
    assert decision.name == "runtime"
    assert decision.strategy is uniform
    assert decision.can_skip is False


def test_unmatched_failure_uses_default_decision() -> None:
    library = RetryStrategyLibrary([], NoRetryStrategy(), default_can_skip=True)

    decision = library.checkout(KeyError("x"))

    assert decision == library.default_decision
    assert decision.name == DEFAULT_POLICY_NAME
    assert decision.can_skip is True


def test_from_settings_puts_skip_patterns_first() -> None:
    extra = RetryMapping(
        strategy=UniformRetryStrategy(max_attempts=2, interval_seconds=0.1),
        name="extra",
        exception_types=(RuntimeError,),
    )
    library = RetryStrategyLibrary.from_settings(
        RetrySettings(max_attempts=4, skip_patterns=("item deleted",)),
        extra_mappings=[extra],
    )

    assert [mapping.name for mapping in library.mappings] == [SKIPPABLE_POLICY_NAME, "extra"]
    skipped = library.checkout(RuntimeError("Item deleted on source"))
    assert skipped.can_skip is True
    assert isinstance(skipped.strategy, NoRetryStrategy)
    default = library.default_decision.strategy
    assert isinstance(default, ExponentialBackoffStrategy)
    assert default.max_attempts == 4


def test_from_settings_without_skip_patterns_has_no_mappings() -> None:
    library = RetryStrategyLibrary.from_settings(RetrySettings(skip_by_default=True))

    assert library.mappings == ()
    assert library.default_decision.can_skip is True
