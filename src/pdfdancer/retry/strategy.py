r"""Retry strategy for calculating the wait between attempts.

This module provides the RetryStrategy class for calculating retry
delays.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

from typing import TYPE_CHECKING

from pdfdancer.retry.outcome import HttpFailure
from pdfdancer.utils.retry_after import parse_retry_after, utc_now
from pdfdancer.utils.sleep import resolve_delay

if TYPE_CHECKING:
    import random
    from collections.abc import Callable
    from datetime import datetime

    from pdfdancer.core.config import RetryConfig
    from pdfdancer.retry.outcome import AttemptOutcome


class RetryStrategy:
    """Strategy for calculating retry delays with backoff, jitter and
    server hints.

    Args:
        config: The retry configuration.
        rng: Optional random source used for jitter.
        now: Optional clock used to evaluate HTTP-date Retry-After hints.

    Attributes:
        config: The retry configuration.
        rng: The random source used for jitter, or None for the module
            level ``random`` functions.
        now: The clock returning the current aware datetime.
    """

    def __init__(
        self,
        config: RetryConfig,
        rng: random.Random | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.rng = rng
        self.now: Callable[[], datetime] = now if now is not None else utc_now

    def retry_hint(self, outcome: AttemptOutcome) -> float | None:
        """Extract the server-supplied retry hint from an outcome.

        Args:
            outcome: The failed attempt outcome.

        Returns:
            The hint in seconds, or None if the outcome carries no
            parseable Retry-After header.
        """
        if not isinstance(outcome, HttpFailure):
            return None
        return parse_retry_after(outcome.retry_after, now=self.now)

    def calculate_delay(self, attempt: int, outcome: AttemptOutcome) -> float:
        """Calculate delay before next retry.

        Args:
            attempt: Current attempt number (0-indexed). It is also the
                number of completed retries.
            outcome: The failed attempt outcome.

        Returns:
            Sleep time in seconds.
        """
        return resolve_delay(
            attempt=attempt,
            config=self.config,
            retry_hint=self.retry_hint(outcome),
            rng=self.rng,
        )
