"""Retry policy collaborator: strategies, named policy library and retrying callable."""

from idempotent_import.retry.callable import RetryError, RetryingCallable
from idempotent_import.retry.library import RetryDecision, RetryMapping, RetryStrategyLibrary
from idempotent_import.retry.strategies import (
    ExponentialBackoffStrategy,
    NoRetryStrategy,
    RetryStrategy,
    UniformRetryStrategy,
)

__all__ = [
    "ExponentialBackoffStrategy",
    "NoRetryStrategy",
    "RetryDecision",
    "RetryError",
    "RetryMapping",
    "RetryStrategy",
    "RetryStrategyLibrary",
    "RetryingCallable",
    "UniformRetryStrategy",
]
