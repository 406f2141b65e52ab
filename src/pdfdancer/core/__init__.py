r"""Core configuration and validation shared by the retry executor and
the session client."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_MULTIPLIER",
    "DEFAULT_BASE_URL",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "RetryConfig",
    "validate_request",
    "validate_retry_params",
    "validate_timeout",
]

from pdfdancer.core.config import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_BASE_URL,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    RetryConfig,
)
from pdfdancer.core.validation import validate_request, validate_retry_params, validate_timeout
