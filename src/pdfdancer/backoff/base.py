r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before retrying a
    failed request based on the retry index. Jitter and server hints are
    applied on top of it by ``pdfdancer.utils.sleep``.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay for a given retry.

        Args:
            attempt: The number of completed retries (0-indexed). For
                example, attempt=0 is the first retry, attempt=1 is the
                second retry, etc.

        Returns:
            The delay in seconds before the next attempt, before jitter.
        """
