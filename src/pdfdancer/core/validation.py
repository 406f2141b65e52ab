r"""Parameter validation utilities for the retry logic and the request
surface.

The functions raise ``ValidationError`` so that malformed input is
rejected before any attempt is sent.
"""

from __future__ import annotations

__all__ = ["validate_request", "validate_retry_params", "validate_timeout"]

import math

from pdfdancer.exceptions import ValidationError


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        msg = f"{name} must be a finite number, got {value}"
        raise ValidationError(msg)


def validate_timeout(timeout: float) -> None:
    """Validate the per-attempt timeout.

    Args:
        timeout: Maximum seconds to wait for a single attempt. Must be > 0.

    Raises:
        ValidationError: If timeout is not finite or <= 0.

    Example:
        ```pycon
        >>> from pdfdancer.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)
        Traceback (most recent call last):
        ...
        pdfdancer.exceptions.ValidationError: timeout must be > 0, got 0

        ```
    """
    _check_finite("timeout", timeout)
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValidationError(msg)


def validate_retry_params(
    max_retries: int,
    initial_delay: float,
    max_delay: float,
    backoff_multiplier: float,
) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retries after the first attempt.
            Must be >= 0. A value of 0 means no retries.
        initial_delay: Base wait in seconds before the first retry.
            Must be >= 0.
        max_delay: Ceiling in seconds applied to every wait. Must be > 0.
        backoff_multiplier: Growth factor per retry. Must be >= 1.

    Raises:
        ValidationError: If any parameter is out of range or a delay
            parameter is not finite.

    Example:
        ```pycon
        >>> from pdfdancer.core.validation import validate_retry_params
        >>> validate_retry_params(
        ...     max_retries=3, initial_delay=1.0, max_delay=10.0, backoff_multiplier=2.0
        ... )

        ```
    """
    if isinstance(max_retries, bool) or not isinstance(max_retries, int):
        msg = f"max_retries must be an integer, got {max_retries!r}"
        raise ValidationError(msg)
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValidationError(msg)
    for name, value in (
        ("initial_delay", initial_delay),
        ("max_delay", max_delay),
        ("backoff_multiplier", backoff_multiplier),
    ):
        _check_finite(name, value)
    if initial_delay < 0:
        msg = f"initial_delay must be >= 0, got {initial_delay}"
        raise ValidationError(msg)
    if max_delay <= 0:
        msg = f"max_delay must be > 0, got {max_delay}"
        raise ValidationError(msg)
    if backoff_multiplier < 1:
        msg = f"backoff_multiplier must be >= 1, got {backoff_multiplier}"
        raise ValidationError(msg)


def validate_request(method: str, url: str, timeout: float) -> None:
    """Validate a request before it enters the retry loop.

    Args:
        method: The HTTP method name.
        url: The URL to request.
        timeout: Maximum seconds to wait for a single attempt.

    Raises:
        ValidationError: If the method or the URL is blank, or if the
            timeout is not positive.
    """
    if not method or not method.strip():
        msg = "HTTP method cannot be empty"
        raise ValidationError(msg)
    if not url or not url.strip():
        msg = "URL cannot be empty"
        raise ValidationError(msg)
    validate_timeout(timeout)
