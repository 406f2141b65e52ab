r"""Configuration dataclass for the retry lifecycle callbacks."""

from __future__ import annotations

__all__ = ["CallbackConfig"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from pdfdancer.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo


@dataclass(frozen=True)
class CallbackConfig:
    """Optional hooks invoked by the retry executor.

    Attributes:
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each wait.
        on_success: Optional callback invoked when an attempt succeeds.
        on_failure: Optional callback invoked with the terminal error.
    """

    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None
