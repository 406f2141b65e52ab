r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from pdfdancer.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: initial_delay * (multiplier ** attempt), capped at
    max_delay. The sequence is non-decreasing because multiplier >= 1.

    Args:
        initial_delay: The delay in seconds before the first retry.
        multiplier: The growth factor applied per retry. Must be >= 1.
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from pdfdancer.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(initial_delay=0.1, multiplier=2.0)
        >>> [backoff.calculate(attempt) for attempt in range(3)]
        [0.1, 0.2, 0.4]
        >>> backoff = ExponentialBackoff(initial_delay=1.0, multiplier=2.0, max_delay=5.0)
        >>> backoff.calculate(10)
        5.0

        ```
    """

    def __init__(
        self,
        initial_delay: float = 1.0,
        multiplier: float = 2.0,
        max_delay: float | None = None,
    ) -> None:
        if initial_delay < 0:
            msg = f"initial_delay must be non-negative, got {initial_delay}"
            raise ValueError(msg)
        if multiplier < 1:
            msg = f"multiplier must be >= 1, got {multiplier}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.initial_delay = initial_delay
        self.multiplier = multiplier
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(initial_delay={self.initial_delay}, "
            f"multiplier={self.multiplier}, max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The number of completed retries (0-indexed).

        Returns:
            The delay: initial_delay * (multiplier ** attempt), capped at
            max_delay if set.
        """
        try:
            delay = self.initial_delay * (self.multiplier**attempt)
        except OverflowError:
            delay = float("inf") if self.initial_delay > 0 else 0.0
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
