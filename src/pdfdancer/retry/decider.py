r"""Retry decision logic for determining whether to retry requests.

This module provides the RetryDecider class that decides, from an
attempt outcome and the retry budget, whether another attempt is
permitted.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING, assert_never

from pdfdancer.retry.outcome import HttpFailure, NetworkFailure, Success

if TYPE_CHECKING:
    from pdfdancer.core.config import RetryConfig
    from pdfdancer.retry.outcome import AttemptOutcome

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Status codes are fatal unless they are listed in
    ``retryable_status_codes``, so client errors (4xx) fail on first
    occurrence while 429 stays retryable by default.

    Args:
        config: The retry configuration.

    Example:
        ```pycon
        >>> import httpx
        >>> from pdfdancer.core.config import RetryConfig
        >>> from pdfdancer.retry.decider import RetryDecider
        >>> from pdfdancer.retry.outcome import classify_response
        >>> decider = RetryDecider(RetryConfig(max_retries=2))
        >>> decider.should_retry(classify_response(httpx.Response(503)), attempt=0)
        (True, 'status 503')
        >>> decider.should_retry(classify_response(httpx.Response(404)), attempt=0)
        (False, 'non-retryable status 404')
        >>> decider.should_retry(classify_response(httpx.Response(503)), attempt=2)
        (False, 'max retries exhausted')

        ```
    """

    def __init__(self, config: RetryConfig) -> None:
        self.config = config

    def is_retryable(self, outcome: AttemptOutcome) -> bool:
        """Indicate whether the outcome kind is eligible for retry,
        ignoring the budget.

        Args:
            outcome: The failed attempt outcome.

        Returns:
            ``True`` if the outcome could be retried.

        Raises:
            TypeError: If the outcome is a ``Success``. The retry loop
                returns before asking about successful attempts.
        """
        if isinstance(outcome, Success):
            msg = "a successful attempt cannot be classified for retry"
            raise TypeError(msg)
        if isinstance(outcome, HttpFailure):
            return outcome.status_code in self.config.retryable_status_codes
        if isinstance(outcome, NetworkFailure):
            return self.config.retry_on_network_error
        assert_never(outcome)

    def should_retry(self, outcome: AttemptOutcome, attempt: int) -> tuple[bool, str]:
        """Determine if a failed attempt should trigger another attempt.

        Args:
            outcome: The failed attempt outcome.
            attempt: Current attempt number (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if attempt >= self.config.max_retries:
            logger.debug(
                f"Retry budget spent after {attempt + 1} attempts "
                f"(max_retries={self.config.max_retries})"
            )
            return (False, "max retries exhausted")
        if self.is_retryable(outcome):
            return (True, self._describe(outcome))
        return (False, f"non-retryable {self._describe(outcome)}")

    @staticmethod
    def _describe(outcome: HttpFailure | NetworkFailure) -> str:
        if isinstance(outcome, HttpFailure):
            return f"status {outcome.status_code}"
        return type(outcome.error).__name__
