"""Runner configuration loaded from environment variables.

All configuration values have defaults that match the platform's public
API and the polling budget the proxy has always used. Azure Functions
app settings (or ``local.settings.json`` for local dev) are the source
of truth when running under the Functions host.

``from_env()`` raises ``ConfigValidationError`` if any value is out of
its valid range, so bad configuration is caught at startup rather than
on the first run.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from actor_runner.core.constants import (
    DEFAULT_ACTOR_LIST_LIMIT,
    DEFAULT_APIFY_BASE_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_MAX_WAIT_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
)
from actor_runner.core.exceptions import ActorRunnerError

_MAX_ACTOR_LIST_LIMIT = 1000


class ConfigValidationError(ActorRunnerError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.message = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class RunnerConfig:
    """Immutable runner configuration.

    Attributes:
        api_base_url: Base URL of the platform REST API.
        platform: Adapter name used by the proxy routes (``apify`` or ``proxy``).
        max_wait_seconds: Total polling budget for a single run.
        poll_interval_seconds: Delay between consecutive status polls.
        actor_list_limit: Page size used when listing actors.
        http_timeout_seconds: Per-request timeout for platform calls.
    """

    api_base_url: str = DEFAULT_APIFY_BASE_URL
    platform: str = "apify"
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    actor_list_limit: int = DEFAULT_ACTOR_LIST_LIMIT
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> RunnerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or a required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``RUN_MAX_WAIT_SECONDS=abc``).
        """
        config = cls(
            api_base_url=os.getenv("APIFY_API_BASE_URL", DEFAULT_APIFY_BASE_URL),
            platform=os.getenv("ACTOR_PLATFORM", "apify"),
            max_wait_seconds=float(
                os.getenv("RUN_MAX_WAIT_SECONDS", str(DEFAULT_MAX_WAIT_SECONDS))
            ),
            poll_interval_seconds=float(
                os.getenv("RUN_POLL_INTERVAL_SECONDS", str(DEFAULT_POLL_INTERVAL_SECONDS))
            ),
            actor_list_limit=int(os.getenv("ACTOR_LIST_LIMIT", str(DEFAULT_ACTOR_LIST_LIMIT))),
            http_timeout_seconds=float(
                os.getenv("HTTP_TIMEOUT_SECONDS", str(DEFAULT_HTTP_TIMEOUT_SECONDS))
            ),
        )
        _validate(config)
        return config


def _validate(config: RunnerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.api_base_url:
        raise ConfigValidationError("APIFY_API_BASE_URL", config.api_base_url, "must not be empty")

    if not config.platform:
        raise ConfigValidationError("ACTOR_PLATFORM", config.platform, "must not be empty")

    if not math.isfinite(config.max_wait_seconds) or config.max_wait_seconds <= 0:
        raise ConfigValidationError(
            "RUN_MAX_WAIT_SECONDS",
            config.max_wait_seconds,
            "must be a finite number > 0 (seconds)",
        )

    if not math.isfinite(config.poll_interval_seconds) or config.poll_interval_seconds <= 0:
        raise ConfigValidationError(
            "RUN_POLL_INTERVAL_SECONDS",
            config.poll_interval_seconds,
            "must be a finite number > 0 (seconds)",
        )

    if not 1 <= config.actor_list_limit <= _MAX_ACTOR_LIST_LIMIT:
        raise ConfigValidationError(
            "ACTOR_LIST_LIMIT",
            config.actor_list_limit,
            f"must be between 1 and {_MAX_ACTOR_LIST_LIMIT}",
        )

    if not math.isfinite(config.http_timeout_seconds) or config.http_timeout_seconds <= 0:
        raise ConfigValidationError(
            "HTTP_TIMEOUT_SECONDS",
            config.http_timeout_seconds,
            "must be a finite number > 0 (seconds)",
        )
