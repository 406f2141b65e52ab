r"""Retry package implementing the resilient request execution.

Public API:
    - CallbackConfig: Configuration for callbacks
    - RetryStrategy: Strategy for calculating retry delays
    - RetryDecider: Logic for deciding whether to retry
    - CallbackManager: Manager for callback invocations
    - AsyncRetryExecutor: Asynchronous retry executor
    - RetryState: States of the attempt loop
    - Success, HttpFailure, NetworkFailure: Attempt outcomes
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "AttemptOutcome",
    "CallbackConfig",
    "CallbackManager",
    "HttpFailure",
    "NetworkFailure",
    "RetryDecider",
    "RetryState",
    "RetryStrategy",
    "Success",
    "classify_response",
]

from pdfdancer.retry.config import CallbackConfig
from pdfdancer.retry.decider import RetryDecider
from pdfdancer.retry.executor_async import AsyncRetryExecutor
from pdfdancer.retry.executor_core import RetryState
from pdfdancer.retry.manager import CallbackManager
from pdfdancer.retry.outcome import (
    AttemptOutcome,
    HttpFailure,
    NetworkFailure,
    Success,
    classify_response,
)
from pdfdancer.retry.strategy import RetryStrategy
