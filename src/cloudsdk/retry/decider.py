r"""Retry decision logic.

This module provides the RetryDecider class that decides, after a failed
attempt, whether the request should be attempted again.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

from cloudsdk.exceptions import ErrorKind

if TYPE_CHECKING:
    from cloudsdk.exceptions import StructuredError
    from cloudsdk.retry.config import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    A retry requires all of:

    - an idempotent method, listed in ``retry_methods``;
    - an ``http_status`` error whose status is in ``retry_status_codes``;
    - at least one remaining attempt.

    Transport failures, timeouts, cancellations and deserialization
    errors are never retried: they carry status 0.

    Args:
        policy: The retry policy.

    Example:
        ```pycon
        >>> from cloudsdk.exceptions import ErrorKind, StructuredError
        >>> from cloudsdk.retry import RetryDecider, RetryPolicy
        >>> decider = RetryDecider(RetryPolicy(max_attempts=3))
        >>> err = StructuredError(status_code=503, error_kind=ErrorKind.HTTP_STATUS, message="")
        >>> decider.should_retry(err, method="GET", attempt=0)
        (True, 'status 503')
        >>> decider.should_retry(err, method="POST", attempt=0)
        (False, 'non-idempotent method POST')

        ```
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self.policy = policy

    def should_retry(self, error: StructuredError, method: str, attempt: int) -> tuple[bool, str]:
        """Determine if a failed attempt should trigger a retry.

        Args:
            error: The classified error of the attempt.
            method: The HTTP method of the logical operation.
            attempt: The failed attempt number (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if not self.policy.is_retryable_method(method):
            return (False, f"non-idempotent method {method.upper()}")
        if error.error_kind is not ErrorKind.HTTP_STATUS:
            return (False, f"{error.error_kind.value} error")
        if not error.is_retryable_status(self.policy.retry_status_codes):
            return (False, f"non-retryable status {error.status_code}")
        if attempt + 1 >= self.policy.max_attempts:
            return (False, "max attempts exhausted")
        return (True, f"status {error.status_code}")
