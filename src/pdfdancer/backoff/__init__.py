r"""Backoff strategies for retry delays."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from pdfdancer.backoff.base import BaseBackoffStrategy
from pdfdancer.backoff.exponential import ExponentialBackoff
