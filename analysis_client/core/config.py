"""Client configuration loaded from environment variables.

All values have defaults matching the service's documented behaviour, so
``ClientConfig()`` works without any environment set.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric value
    is out of range or the API URL is not an absolute http(s) URL.  This
    catches bad configuration before the first network call.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from analysis_client.core.constants import (
    DEFAULT_API_URL,
    DEFAULT_HTTP_TIMEOUT_S,
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_POLL_TIMEOUT_MS,
)
from analysis_client.core.exceptions import ClientError
from analysis_client.utils.helpers import is_http_url


class ConfigValidationError(ClientError):
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
class ClientConfig:
    """Immutable client configuration.

    Attributes:
        api_url: Base URL of the analysis service, without the version path.
        poll_timeout_ms: Default poll budget in milliseconds.
        initial_delay_ms: Default wait before the first status check.
        http_timeout_s: Per-request HTTP timeout in seconds.
    """

    api_url: str = DEFAULT_API_URL
    poll_timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS
    initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``ANALYSIS_POLL_TIMEOUT_MS=abc``).
        """
        config = cls(
            api_url=os.getenv("ANALYSIS_API_URL", DEFAULT_API_URL),
            poll_timeout_ms=int(
                os.getenv("ANALYSIS_POLL_TIMEOUT_MS", str(DEFAULT_POLL_TIMEOUT_MS))
            ),
            initial_delay_ms=int(
                os.getenv("ANALYSIS_INITIAL_DELAY_MS", str(DEFAULT_INITIAL_DELAY_MS))
            ),
            http_timeout_s=float(
                os.getenv("ANALYSIS_HTTP_TIMEOUT_S", str(DEFAULT_HTTP_TIMEOUT_S))
            ),
        )
        _validate(config)
        return config


def _validate(config: ClientConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not is_http_url(config.api_url):
        raise ConfigValidationError(
            "ANALYSIS_API_URL",
            config.api_url,
            "must be an absolute http(s) URL",
        )

    if config.poll_timeout_ms <= 0:
        raise ConfigValidationError(
            "ANALYSIS_POLL_TIMEOUT_MS",
            config.poll_timeout_ms,
            "must be > 0 (milliseconds)",
        )

    if config.initial_delay_ms < 0:
        raise ConfigValidationError(
            "ANALYSIS_INITIAL_DELAY_MS",
            config.initial_delay_ms,
            "must be >= 0 (milliseconds)",
        )

    if config.http_timeout_s <= 0:
        raise ConfigValidationError(
            "ANALYSIS_HTTP_TIMEOUT_S",
            config.http_timeout_s,
            "must be > 0 (seconds)",
        )
