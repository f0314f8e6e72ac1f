r"""Retry package implementing class-based composition pattern.

This package provides the transient-failure retry layer wrapping every
HTTP call.

Public API:
    - RetryPolicy: Immutable configuration for retry behavior
    - RetryStrategy: Strategy for calculating jittered retry delays
    - RetryDecider: Logic for deciding whether to retry
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
    - retry_execute / retry_execute_async: Functional entry points
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "RetryDecider",
    "RetryExecutor",
    "RetryPolicy",
    "RetryStrategy",
    "retry_execute",
    "retry_execute_async",
]

from cloudsdk.retry.config import RetryPolicy
from cloudsdk.retry.decider import RetryDecider
from cloudsdk.retry.executor import RetryExecutor, retry_execute
from cloudsdk.retry.executor_async import AsyncRetryExecutor, retry_execute_async
from cloudsdk.retry.strategy import RetryStrategy
