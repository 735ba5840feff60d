"""Runtime configuration for the retrying import executor."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class RetrySettings:
    """Default retry policy settings."""

    max_attempts: int = 5
    initial_interval_seconds: float = 1.0
    multiplier: float = 2.0
    max_interval_seconds: float = 60.0
    jitter: bool = False
    skip_by_default: bool = False
    skip_patterns: tuple[str, ...] = ()


@dataclass(slots=True)
class LoggingSettings:
    """Logging settings."""

    level: str = "INFO"


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    retry: RetrySettings = field(default_factory=RetrySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with sane defaults."""

        return cls(
            retry=RetrySettings(
                max_attempts=int(os.getenv("IDEMPOTENT_IMPORT_RETRY_MAX_ATTEMPTS", "5")),
                initial_interval_seconds=float(
                    os.getenv("IDEMPOTENT_IMPORT_RETRY_INITIAL_INTERVAL_SECONDS", "1.0"),
                ),
                multiplier=float(os.getenv("IDEMPOTENT_IMPORT_RETRY_MULTIPLIER", "2.0")),
                max_interval_seconds=float(
                    os.getenv("IDEMPOTENT_IMPORT_RETRY_MAX_INTERVAL_SECONDS", "60.0"),
                ),
                jitter=_env_bool("IDEMPOTENT_IMPORT_RETRY_JITTER", default=False),
                skip_by_default=_env_bool(
                    "IDEMPOTENT_IMPORT_RETRY_SKIP_BY_DEFAULT",
                    default=False,
                ),
                skip_patterns=_split_csv(os.getenv("IDEMPOTENT_IMPORT_RETRY_SKIP_PATTERNS", "")),
            ),
            logging=LoggingSettings(
                level=os.getenv("IDEMPOTENT_IMPORT_LOG_LEVEL", "INFO").strip().upper(),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error if retry or logging settings are invalid."""

        if self.retry.max_attempts < 1:
            raise ValueError("IDEMPOTENT_IMPORT_RETRY_MAX_ATTEMPTS must be >= 1.")
        if self.retry.initial_interval_seconds < 0:
            raise ValueError("IDEMPOTENT_IMPORT_RETRY_INITIAL_INTERVAL_SECONDS must be >= 0.")
        if self.retry.multiplier < 1:
            raise ValueError("IDEMPOTENT_IMPORT_RETRY_MULTIPLIER must be >= 1.")
        if self.retry.max_interval_seconds < self.retry.initial_interval_seconds:
            raise ValueError(
                "IDEMPOTENT_IMPORT_RETRY_MAX_INTERVAL_SECONDS must be >= "
                "IDEMPOTENT_IMPORT_RETRY_INITIAL_INTERVAL_SECONDS.",
            )
        for pattern in self.retry.skip_patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(
                    f"Invalid regex in IDEMPOTENT_IMPORT_RETRY_SKIP_PATTERNS: {pattern!r} ({exc})",
                ) from exc
        if self.logging.level not in _LOG_LEVELS:
            raise ValueError(
                f"IDEMPOTENT_IMPORT_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}.",
            )


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""

    logging.basicConfig(
        level=settings.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _env_bool(name: str, *, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())
