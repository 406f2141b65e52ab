r"""Utility functions for delay calculation, Retry-After parsing and
response handling."""

from __future__ import annotations

__all__ = [
    "compute_backoff",
    "extract_error_message",
    "font_not_found_message",
    "parse_retry_after",
    "resolve_delay",
]

from pdfdancer.utils.response import extract_error_message, font_not_found_message
from pdfdancer.utils.retry_after import parse_retry_after
from pdfdancer.utils.sleep import compute_backoff, resolve_delay
