r"""Retry configuration dataclass and defaults.

This module provides the configuration constants and the immutable
``RetryConfig`` value used by the retry executor. A configuration is
built once per call with the defaults merged in and is never mutated
afterwards.
"""

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
]

from dataclasses import dataclass, field, replace
from typing import Any

from pdfdancer.core.validation import validate_retry_params

# Default per-attempt timeout in seconds
DEFAULT_TIMEOUT = 30.0

DEFAULT_BASE_URL = "https://api.pdfdancer.com"

# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Wait time = initial_delay * (backoff_multiplier ** attempt), capped at max_delay
# With the defaults: 1st retry waits 1s, 2nd waits 2s, 3rd waits 4s
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_MAX_DELAY = 10.0
DEFAULT_BACKOFF_MULTIPLIER = 2.0

# HTTP status codes that should trigger automatic retry
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Args:
        max_retries: Number of retries after the first attempt. Must be >= 0.
        initial_delay: Base wait in seconds before the first retry.
        max_delay: Ceiling in seconds applied to every wait, including
            server-supplied Retry-After hints.
        backoff_multiplier: Growth factor applied per retry. Must be >= 1.
        retryable_status_codes: HTTP status codes eligible for retry. Any
            iterable is accepted and stored as a frozenset.
        retry_on_network_error: Whether transport failures (no response
            received) are retried.
        use_jitter: Whether computed delays are randomized in
            ``[50%, 100%]`` of their value. Server hints are never jittered.
        respect_retry_after: Whether a Retry-After hint overrides the
            computed backoff.

    Example:
        ```pycon
        >>> from pdfdancer.core.config import RetryConfig
        >>> config = RetryConfig()
        >>> config.max_retries
        3
        >>> merged = config.merge(max_retries=5, use_jitter=False)
        >>> merged.max_retries, merged.use_jitter
        (5, False)
        >>> config.max_retries
        3

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = DEFAULT_INITIAL_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    retryable_status_codes: frozenset[int] = field(default_factory=lambda: RETRY_STATUS_CODES)
    retry_on_network_error: bool = True
    use_jitter: bool = True
    respect_retry_after: bool = True

    def __post_init__(self) -> None:
        validate_retry_params(
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            backoff_multiplier=self.backoff_multiplier,
        )
        if not isinstance(self.retryable_status_codes, frozenset):
            object.__setattr__(
                self, "retryable_status_codes", frozenset(self.retryable_status_codes)
            )

    def merge(self, **overrides: Any) -> RetryConfig:
        """Create a new config with the specified parameters overridden.

        Only non-None override values are applied, so the result of a
        partially filled set of options keeps the current values for the
        omitted ones.

        Args:
            **overrides: Keyword arguments for the fields to override.

        Returns:
            A new ``RetryConfig``. The current instance is unchanged.

        Example:
            ```pycon
            >>> from pdfdancer.core.config import RetryConfig
            >>> config = RetryConfig(max_retries=3)
            >>> config.merge(max_retries=None, max_delay=5.0).max_delay
            5.0

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert the configuration to a dictionary.

        Returns:
            Dictionary with the retry configuration parameters.
        """
        return {
            "max_retries": self.max_retries,
            "initial_delay": self.initial_delay,
            "max_delay": self.max_delay,
            "backoff_multiplier": self.backoff_multiplier,
            "retryable_status_codes": self.retryable_status_codes,
            "retry_on_network_error": self.retry_on_network_error,
            "use_jitter": self.use_jitter,
            "respect_retry_after": self.respect_retry_after,
        }
