"""Monitor sink with lazily evaluated log messages."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

MessageSupplier = Callable[[], str]


class Monitor(Protocol):
    """Protocol implemented by log/monitoring sinks."""

    def debug(self, supplier: MessageSupplier) -> None:
        """Record a debug message produced by ``supplier``."""

    def info(self, supplier: MessageSupplier) -> None:
        """Record an informational message produced by ``supplier``."""

    def severe(self, supplier: MessageSupplier) -> None:
        """Record a severe message produced by ``supplier``."""


class LoggingMonitor:
    """Monitor backed by the standard logging module.

    Suppliers are invoked only when the target level is enabled, so message
    formatting is skipped entirely for filtered records.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("idempotent_import")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, supplier: MessageSupplier) -> None:
        self._emit(logging.DEBUG, supplier)

    def info(self, supplier: MessageSupplier) -> None:
        self._emit(logging.INFO, supplier)

    def severe(self, supplier: MessageSupplier) -> None:
        self._emit(logging.ERROR, supplier)

    def _emit(self, level: int, supplier: MessageSupplier) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, "%s", supplier())
