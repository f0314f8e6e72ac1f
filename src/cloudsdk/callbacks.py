r"""Callback types and data structures for observability.

Intermediate retry attempts and polls are never exposed to callers,
only their terminal outcome. These optional hooks let a caller observe
them for logging or metrics:

- on_retry: Called before sleeping ahead of a retry
- on_failure: Called when the retry executor gives up
- on_poll: Called after each unsuccessful poll of a waiter

Example:
    ```pycon
    >>> from cloudsdk.callbacks import RetryInfo
    >>> from cloudsdk.retry import RetryExecutor
    >>> def log_retry(retry_info: RetryInfo):
    ...     print(f"Retry {retry_info.attempt}/{retry_info.max_attempts}")
    ...
    >>> executor = RetryExecutor(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = [
    "FailureInfo",
    "PollInfo",
    "RetryInfo",
    "invoke_on_failure",
    "invoke_on_poll",
    "invoke_on_retry",
]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from cloudsdk.exceptions import StructuredError


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        method: The HTTP method (e.g., "GET").
        attempt: The number of the upcoming attempt (1-indexed). The first
            retry is attempt 2.
        max_attempts: Maximum number of attempts configured.
        wait_time: The sleep time in seconds before this retry.
        error: The error that triggered the retry.
    """

    method: str
    attempt: int
    max_attempts: int
    wait_time: float
    error: StructuredError


@dataclass(frozen=True)
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        method: The HTTP method (e.g., "GET").
        attempt: The final attempt number (1-indexed).
        max_attempts: Maximum number of attempts configured.
        error: The terminal error raised to the caller.
        total_time: Total time spent on all attempts including backoff (seconds).
    """

    method: str
    attempt: int
    max_attempts: int
    error: StructuredError
    total_time: float


@dataclass(frozen=True)
class PollInfo:
    """Information passed to on_poll callback.

    Attributes:
        poll: The number of polls done so far (1-indexed).
        next_interval: The sleep time in seconds before the next poll.
        elapsed: Time elapsed since the waiter started (seconds).
    """

    poll: int
    next_interval: float
    elapsed: float


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    method: str,
    attempt: int,
    max_attempts: int,
    sleep_time: float,
    error: StructuredError,
) -> None:
    """Invoke on_retry callback if provided.

    Args:
        on_retry: Optional callback to invoke before each retry.
        method: The HTTP method (e.g., "GET").
        attempt: The failed attempt number (0-indexed internally). The
            callback receives the next attempt number as a 1-indexed value.
            For example, after the first failed attempt (internally
            attempt=0), the callback receives attempt=2.
        max_attempts: Maximum number of attempts.
        sleep_time: The sleep time in seconds before this retry.
        error: The error that triggered the retry.
    """
    if on_retry is not None:
        on_retry(
            RetryInfo(
                method=method,
                attempt=attempt + 2,  # Next attempt number
                max_attempts=max_attempts,
                wait_time=sleep_time,
                error=error,
            )
        )


def invoke_on_failure(
    on_failure: Callable[[FailureInfo], None] | None,
    *,
    method: str,
    attempt: int,
    max_attempts: int,
    error: StructuredError,
    start_time: float,
) -> None:
    """Invoke on_failure callback if provided.

    Args:
        on_failure: Optional callback to invoke when the executor gives up.
        method: The HTTP method (e.g., "GET").
        attempt: The final attempt number (0-indexed internally). The
            callback receives this as a 1-indexed value (attempt + 1).
        max_attempts: Maximum number of attempts.
        error: The terminal error.
        start_time: The ``time.monotonic()`` timestamp when the operation
            started.
    """
    if on_failure is not None:
        on_failure(
            FailureInfo(
                method=method,
                attempt=attempt + 1,
                max_attempts=max_attempts,
                error=error,
                total_time=time.monotonic() - start_time,
            )
        )


def invoke_on_poll(
    on_poll: Callable[[PollInfo], None] | None,
    *,
    poll: int,
    next_interval: float,
    start_time: float,
) -> None:
    """Invoke on_poll callback if provided.

    Args:
        on_poll: Optional callback to invoke after an unsuccessful poll.
        poll: The poll number (0-indexed internally). The callback
            receives this as a 1-indexed value (poll + 1).
        next_interval: The sleep time before the next poll.
        start_time: The ``time.monotonic()`` timestamp when the waiter
            started.
    """
    if on_poll is not None:
        on_poll(
            PollInfo(
                poll=poll + 1,
                next_interval=next_interval,
                elapsed=time.monotonic() - start_time,
            )
        )
