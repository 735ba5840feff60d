"""In-memory idempotent executor with retry integration and error bookkeeping."""

from __future__ import annotations

import threading
import time
import traceback
from collections.abc import Callable
from typing import Any, TypeVar, cast
from uuid import UUID

from idempotent_import.executor.models import (
    CachedValueTypeError,
    ErrorDetail,
    UnknownIdempotentIdError,
)
from idempotent_import.monitor import Monitor
from idempotent_import.retry.callable import RetryError, RetryingCallable
from idempotent_import.retry.library import RetryStrategyLibrary

T = TypeVar("T")


class RetryingInMemoryIdempotentExecutor:
    """Per-job cache that runs each idempotent id at most once.

    Successful results are cached by id for the lifetime of the executor.
    Terminal failures are recorded in a persistent error log and in a recent
    error buffer that callers reset between progress checkpoints. Skippable
    failures return ``None``; other failures are re-raised as ``RetryError``.

    Concurrent calls for the same id are serialized by a per-id lock held
    around the check, the work and the recording, so ``work`` never runs twice
    for one id. Calls for distinct ids only contend on the short state lock.
    """

    def __init__(
        self,
        monitor: Monitor,
        retry_library: RetryStrategyLibrary,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._monitor = monitor
        self._retry_library = retry_library
        self._sleep = sleep
        self._job_id: UUID | str | None = None
        self._known_values: dict[str, Any] = {}
        self._errors: dict[str, ErrorDetail] = {}
        self._recent_errors: dict[str, ErrorDetail] = {}
        self._state_lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    @property
    def job_id(self) -> UUID | str | None:
        return self._job_id

    def set_job_id(self, job_id: UUID | str | None) -> None:
        self._job_id = job_id

    def execute_and_swallow(
        self,
        idempotent_id: str,
        item_name: str,
        work: Callable[[], T],
        *,
        result_type: type[T] | None = None,
    ) -> T | None:
        try:
            return self.execute_or_throw(
                idempotent_id,
                item_name,
                work,
                result_type=result_type,
            )
        except RetryError:
            # Already recorded and logged by execute_or_throw.
            return None

    def execute_or_throw(
        self,
        idempotent_id: str,
        item_name: str,
        work: Callable[[], T],
        *,
        result_type: type[T] | None = None,
    ) -> T | None:
        """Return the cached value for ``idempotent_id`` or run ``work`` under retry.

        Raises ``RetryError`` when the work fails terminally and the failure is
        not skippable. Returns ``None`` for skippable failures. When
        ``result_type`` is given and a fresh result does not match it, the result
        stays cached before ``CachedValueTypeError`` is raised, so ``work`` is not
        run again for this id.
        """

        if not idempotent_id:
            raise ValueError("idempotent_id must be a non-empty string.")
        prefix = self._log_prefix()

        hit, cached = self._lookup(idempotent_id)
        if hit:
            return self._cache_hit(prefix, idempotent_id, item_name, cached, result_type)

        with self._key_lock(idempotent_id):
            hit, cached = self._lookup(idempotent_id)
            if hit:
                return self._cache_hit(prefix, idempotent_id, item_name, cached, result_type)

            retrying = RetryingCallable(
                work,
                self._retry_library,
                self._monitor,
                sleep=self._sleep,
            )
            try:
                result = retrying.call()
            except RetryError as exc:
                self._record_failure(prefix, idempotent_id, item_name, exc)
                if exc.can_skip:
                    return None
                raise

            with self._state_lock:
                self._known_values[idempotent_id] = result
                self._errors.pop(idempotent_id, None)
            self._monitor.debug(
                lambda: f"{prefix}Storing key {idempotent_id} in cache for {item_name}",
            )
            _check_type(idempotent_id, result, result_type)
            return result

    def get_cached_value(self, idempotent_id: str, result_type: type[T] | None = None) -> T:
        with self._state_lock:
            if idempotent_id not in self._known_values:
                raise UnknownIdempotentIdError(idempotent_id, self._known_values.keys())
            value = self._known_values[idempotent_id]
        _check_type(idempotent_id, value, result_type)
        return cast(T, value)

    def is_key_cached(self, idempotent_id: str) -> bool:
        with self._state_lock:
            return idempotent_id in self._known_values

    def get_errors(self) -> list[ErrorDetail]:
        with self._state_lock:
            return list(self._errors.values())

    def get_recent_errors(self) -> list[ErrorDetail]:
        with self._state_lock:
            return list(self._recent_errors.values())

    def reset_recent_errors(self) -> None:
        with self._state_lock:
            self._recent_errors.clear()

    def drain_recent_errors(self) -> list[ErrorDetail]:
        """Return the recent failures and clear the buffer in one step."""

        with self._state_lock:
            drained = list(self._recent_errors.values())
            self._recent_errors.clear()
        return drained

    def _lookup(self, idempotent_id: str) -> tuple[bool, Any]:
        with self._state_lock:
            if idempotent_id in self._known_values:
                return True, self._known_values[idempotent_id]
        return False, None

    def _cache_hit(
        self,
        prefix: str,
        idempotent_id: str,
        item_name: str,
        cached: Any,
        result_type: type[T] | None,
    ) -> T:
        self._monitor.debug(
            lambda: f"{prefix}Using cached key {idempotent_id} from cache for {item_name}",
        )
        _check_type(idempotent_id, cached, result_type)
        return cast(T, cached)

    def _key_lock(self, idempotent_id: str) -> threading.Lock:
        with self._state_lock:
            lock = self._key_locks.get(idempotent_id)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[idempotent_id] = lock
            return lock

    def _record_failure(
        self,
        prefix: str,
        idempotent_id: str,
        item_name: str,
        error: RetryError,
    ) -> None:
        detail = ErrorDetail(
            id=idempotent_id,
            title=item_name,
            exception="".join(traceback.format_exception(error)),
            can_skip=error.can_skip,
            attempts=error.attempts,
        )
        with self._state_lock:
            self._errors[idempotent_id] = detail
            self._recent_errors[idempotent_id] = detail
        if detail.can_skip:
            self._monitor.severe(
                lambda: f"{prefix}Problem with importing item, but skipping: {detail}",
            )
        else:
            self._monitor.severe(
                lambda: f"{prefix}Problem with importing item, cannot be skipped: {detail}",
            )

    def _log_prefix(self) -> str:
        return f"Job {self._job_id}: "


def _check_type(idempotent_id: str, value: object, result_type: type | None) -> None:
    if result_type is not None and not isinstance(value, result_type):
        raise CachedValueTypeError(idempotent_id, result_type, value)
