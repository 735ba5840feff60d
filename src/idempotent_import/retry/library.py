"""Named retry policies keyed by failure category."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from idempotent_import.retry.strategies import (
    ExponentialBackoffStrategy,
    NoRetryStrategy,
    RetryStrategy,
)

if TYPE_CHECKING:
    from idempotent_import.config import RetrySettings

DEFAULT_POLICY_NAME = "default"
SKIPPABLE_POLICY_NAME = "skippable"


@dataclass(slots=True, frozen=True)
class RetryDecision:
    """Strategy selected for one failure."""

    name: str
    strategy: RetryStrategy
    can_skip: bool


@dataclass(slots=True)
class RetryMapping:
    """Binds a strategy to failures matched by exception type or message regex."""

    strategy: RetryStrategy
    name: str
    regexes: tuple[str, ...] = ()
    exception_types: tuple[type[BaseException], ...] = ()
    can_skip: bool = False
    _compiled: tuple[re.Pattern[str], ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        self._compiled = tuple(re.compile(pattern, re.IGNORECASE) for pattern in self.regexes)

    def matches(self, error: BaseException) -> bool:
        """Return whether this mapping handles ``error``."""

        if self.exception_types and isinstance(error, self.exception_types):
            return True
        if not self._compiled:
            return False
        haystack = _describe(error)
        return any(pattern.search(haystack) for pattern in self._compiled)


class RetryStrategyLibrary:
    """Ordered retry mappings with a default fallback; first match wins."""

    def __init__(
        self,
        mappings: Sequence[RetryMapping],
        default_strategy: RetryStrategy,
        *,
        default_can_skip: bool = False,
    ) -> None:
        self._mappings = tuple(mappings)
        self._default = RetryDecision(
            name=DEFAULT_POLICY_NAME,
            strategy=default_strategy,
            can_skip=default_can_skip,
        )

    @property
    def mappings(self) -> tuple[RetryMapping, ...]:
        return self._mappings

    @property
    def default_decision(self) -> RetryDecision:
        return self._default

    def checkout(self, error: BaseException) -> RetryDecision:
        """Select the retry decision for ``error``."""

        for mapping in self._mappings:
            if mapping.matches(error):
                return RetryDecision(
                    name=mapping.name,
                    strategy=mapping.strategy,
                    can_skip=mapping.can_skip,
                )
        return self._default

    @classmethod
    def no_retry(cls, *, can_skip: bool = False) -> RetryStrategyLibrary:
        """Library that fails every operation on its first error."""

        return cls((), NoRetryStrategy(), default_can_skip=can_skip)

    @classmethod
    def from_settings(
        cls,
        settings: RetrySettings,
        *,
        extra_mappings: Iterable[RetryMapping] = (),
    ) -> RetryStrategyLibrary:
        """Build the default library: configured skip patterns, extras, then backoff."""

        mappings: list[RetryMapping] = []
        if settings.skip_patterns:
            mappings.append(
                RetryMapping(
                    strategy=NoRetryStrategy(),
                    name=SKIPPABLE_POLICY_NAME,
                    regexes=settings.skip_patterns,
                    can_skip=True,
                ),
            )
        mappings.extend(extra_mappings)
        default_strategy = ExponentialBackoffStrategy(
            max_attempts=settings.max_attempts,
            initial_interval_seconds=settings.initial_interval_seconds,
            multiplier=settings.multiplier,
            max_interval_seconds=settings.max_interval_seconds,
            jitter=settings.jitter,
        )
        return cls(mappings, default_strategy, default_can_skip=settings.skip_by_default)


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"
