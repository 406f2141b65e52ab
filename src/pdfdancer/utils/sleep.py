r"""Delay calculation utilities.

This module turns a retry index, a retry configuration and an optional
server hint into the number of seconds to wait before the next attempt.
All the functions are pure apart from the random source used for jitter,
which can be injected for deterministic tests.
"""

from __future__ import annotations

__all__ = ["JITTER_LOWER_BOUND", "compute_backoff", "resolve_delay"]

import logging
import random
from typing import TYPE_CHECKING

from pdfdancer.backoff.exponential import ExponentialBackoff

if TYPE_CHECKING:
    from pdfdancer.core.config import RetryConfig

logger: logging.Logger = logging.getLogger(__name__)

# Jittered delays are drawn from [raw * JITTER_LOWER_BOUND, raw]
JITTER_LOWER_BOUND = 0.5


def compute_backoff(
    attempt: int,
    config: RetryConfig,
    rng: random.Random | None = None,
) -> float:
    """Compute the backoff delay for a retry.

    The delay is calculated as follows:
    1. raw = initial_delay * (backoff_multiplier ** attempt)
    2. raw = min(raw, max_delay)
    3. if use_jitter: a value drawn uniformly from [raw * 0.5, raw]

    Args:
        attempt: The number of completed retries (0-indexed). attempt=0
            is the first retry.
        config: The retry configuration.
        rng: Optional random source used for jitter. Defaults to the
            ``random`` module.

    Returns:
        The delay in seconds, always in ``[0, max_delay]``.

    Example:
        ```pycon
        >>> from pdfdancer.core.config import RetryConfig
        >>> from pdfdancer.utils.sleep import compute_backoff
        >>> config = RetryConfig(initial_delay=0.1, backoff_multiplier=2.0, use_jitter=False)
        >>> [compute_backoff(attempt, config) for attempt in range(3)]
        [0.1, 0.2, 0.4]

        ```
    """
    raw = ExponentialBackoff(
        initial_delay=config.initial_delay,
        multiplier=config.backoff_multiplier,
        max_delay=config.max_delay,
    ).calculate(attempt)
    if not config.use_jitter:
        return raw
    delay = (rng or random).uniform(raw * JITTER_LOWER_BOUND, raw)
    logger.debug(f"Jittered backoff {delay:.3f}s (base={raw:.3f}s)")
    return min(max(delay, 0.0), config.max_delay)


def resolve_delay(
    attempt: int,
    config: RetryConfig,
    retry_hint: float | None,
    rng: random.Random | None = None,
) -> float:
    """Resolve the wait before the next attempt.

    A server-supplied hint takes precedence over the computed backoff when
    ``respect_retry_after`` is enabled. The hint is capped at max_delay
    and is never jittered.

    Args:
        attempt: The number of completed retries (0-indexed).
        config: The retry configuration.
        retry_hint: The parsed Retry-After value in seconds, or None.
        rng: Optional random source used for jitter.

    Returns:
        The delay in seconds.

    Example:
        ```pycon
        >>> from pdfdancer.core.config import RetryConfig
        >>> from pdfdancer.utils.sleep import resolve_delay
        >>> config = RetryConfig(max_delay=5.0, use_jitter=False)
        >>> resolve_delay(0, config, retry_hint=60.0)
        5.0
        >>> resolve_delay(0, config, retry_hint=None)
        1.0

        ```
    """
    if config.respect_retry_after and retry_hint is not None:
        delay = min(retry_hint, config.max_delay)
        logger.debug(f"Using Retry-After hint {retry_hint:.3f}s (capped to {delay:.3f}s)")
        return delay
    return compute_backoff(attempt, config, rng)
