r"""Shared core logic for retry executors.

This module provides helper functions used by both the synchronous and
the asynchronous retry executors to turn the outcome of one attempt
into either a result or a classified error.
"""

from __future__ import annotations

__all__ = ["evaluate_result", "give_up"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from cloudsdk.callbacks import invoke_on_failure
from cloudsdk.classifier import classify_response

if TYPE_CHECKING:
    from collections.abc import Callable

    from cloudsdk.callbacks import FailureInfo
    from cloudsdk.exceptions import StructuredError

logger: logging.Logger = logging.getLogger(__name__)


def evaluate_result(result: Any) -> StructuredError | None:
    """Classify the value returned by an attempt.

    An ``httpx.Response`` with a status code >= 400 is a failure; every
    other value is a success. The body of a failed response must already
    be read.

    Args:
        result: The value returned by the attempt function.

    Returns:
        The classified error, or ``None`` for a successful result.
    """
    if isinstance(result, httpx.Response):
        return classify_response(result)
    return None


def give_up(
    error: StructuredError,
    *,
    method: str,
    attempt: int,
    max_attempts: int,
    reason: str,
    on_failure: Callable[[FailureInfo], None] | None,
    start_time: float,
) -> StructuredError:
    """Log the terminal error and invoke the on_failure callback.

    Args:
        error: The terminal error.
        method: The HTTP method of the logical operation.
        attempt: The final attempt number (0-indexed).
        max_attempts: Maximum number of attempts.
        reason: Why the executor stops retrying.
        on_failure: Optional callback to invoke.
        start_time: The ``time.monotonic()`` timestamp when the operation
            started.

    Returns:
        The terminal error, unchanged, for the caller to raise.
    """
    logger.debug(
        f"{method} request failed on attempt {attempt + 1}/{max_attempts}: {error} ({reason})"
    )
    invoke_on_failure(
        on_failure,
        method=method,
        attempt=attempt,
        max_attempts=max_attempts,
        error=error,
        start_time=start_time,
    )
    return error
