r"""Retry-After header parsing utilities.

This module provides functions for parsing the Retry-After header value
from HTTP responses according to RFC 7231.
"""

from __future__ import annotations

__all__ = ["RETRY_AFTER_HEADER", "parse_retry_after", "utc_now"]

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)

RETRY_AFTER_HEADER = "Retry-After"


def utc_now() -> datetime:
    r"""Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_retry_after(
    retry_after_header: str | None,
    now: Callable[[], datetime] | None = None,
) -> float | None:
    """Parse the Retry-After header value from an HTTP response.

    The Retry-After header can be specified in two formats according to RFC 7231:
    1. A non-negative integer representing the number of seconds to wait (e.g., "120")
    2. An HTTP-date in RFC 5322 format (e.g., "Wed, 21 Oct 2015 07:28:00 GMT")

    Negative or fractional numbers are not valid delay-seconds and are
    rejected. An integer too large for a float yields ``inf``. An
    HTTP-date in the past yields 0.0 (retry immediately).

    Args:
        retry_after_header: The value of the Retry-After header as a string,
            or None if the header is not present in the response.
        now: Optional clock returning the current aware datetime. It is
            used to turn an HTTP-date into a delay. Defaults to ``utc_now``.

    Returns:
        The number of seconds to wait before retrying, or None if the
        header is absent or cannot be parsed. The caller then falls back
        to the computed backoff.

    Example:
        ```pycon
        >>> from pdfdancer.utils import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after("0")
        0.0
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("-5") is None
        True
        >>> parse_retry_after("invalid") is None
        True

        ```
    """
    if retry_after_header is None:
        return None

    value = retry_after_header.strip()
    if value.isascii() and value.isdigit():
        try:
            return float(int(value))
        except (ValueError, OverflowError):
            # too many digits for int() or float(), resolve_delay caps it
            logger.debug(f"Retry-After header too large: {len(value)} digits")
            return float("inf")

    try:
        retry_date: datetime = parsedate_to_datetime(value)
    except (ValueError, TypeError, IndexError, OverflowError):
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return None
    if retry_date.tzinfo is None:
        # RFC 5322 "-0000" dates come back naive, they are UTC
        retry_date = retry_date.replace(tzinfo=timezone.utc)
    current = (now or utc_now)()
    delta_seconds = (retry_date - current).total_seconds()
    return max(0.0, delta_seconds)
