r"""Synchronous retry executor.

This module provides the RetryExecutor class that executes one logical
request, transparently retrying it on a bounded set of classified
failures, and the ``retry_execute`` functional entry point.
"""

from __future__ import annotations

__all__ = ["RetryExecutor", "retry_execute"]

import logging
import time
from typing import TYPE_CHECKING, TypeVar

import httpx

from cloudsdk.callbacks import invoke_on_retry
from cloudsdk.classifier import classify_exception
from cloudsdk.context import ContextError, background
from cloudsdk.retry.config import RetryPolicy
from cloudsdk.retry.decider import RetryDecider
from cloudsdk.retry.executor_core import evaluate_result, give_up
from cloudsdk.retry.strategy import RetryStrategy

if TYPE_CHECKING:
    from collections.abc import Callable

    from cloudsdk.callbacks import FailureInfo, RetryInfo
    from cloudsdk.context import Context

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes one logical request with automatic retry logic.

    The executor orchestrates the following components:

    - RetryDecider: Determines whether a failed attempt is retried
    - RetryStrategy: Calculates the jittered backoff delay
    - Context: Bounds the whole operation and interrupts backoff sleeps

    Executors hold no mutable state and can be shared between threads.

    Args:
        policy: The retry policy. Defaults to ``RetryPolicy()``.
        on_retry: Optional callback invoked before each retry sleep.
        on_failure: Optional callback invoked when the executor gives up.

    Attributes:
        policy: The retry policy.
        strategy: Strategy for calculating retry delays.
        decider: Logic for deciding whether to retry.

    Example:
        ```pycon
        >>> import httpx
        >>> from cloudsdk.retry import RetryExecutor, RetryPolicy
        >>> executor = RetryExecutor(RetryPolicy(max_attempts=3))
        >>> with httpx.Client() as client:  # doctest: +SKIP
        ...     response = executor.execute(
        ...         lambda: client.get("https://api.example.com/servers"), method="GET"
        ...     )
        ...

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_failure: Callable[[FailureInfo], None] | None = None,
    ) -> None:
        self.policy: RetryPolicy = policy or RetryPolicy()
        self.strategy: RetryStrategy = RetryStrategy(
            base_delay=self.policy.base_delay,
            max_delay=self.policy.max_delay,
            jitter=self.policy.jitter,
        )
        self.decider: RetryDecider = RetryDecider(self.policy)
        self.on_retry = on_retry
        self.on_failure = on_failure

    def execute(
        self, attempt_func: Callable[[], T], method: str, ctx: Context | None = None
    ) -> T:
        """Execute ``attempt_func`` with automatic retry logic.

        Each attempt either returns a value or raises. A raised exception
        is classified into a ``StructuredError`` (already classified errors
        are kept as they are). A returned ``httpx.Response`` with status
        >= 400 is classified from its body. Any other returned value is a
        success.

        The retry loop handles:

        - Successful attempts: Returns immediately
        - Retryable status codes on idempotent methods: Retries with backoff
        - Non-idempotent methods: Never retried, even on 503 or 429
        - Any other failure: Raises immediately

        Args:
            attempt_func: Function performing exactly one network attempt.
            method: The HTTP method of the logical operation.
            ctx: Optional context bounding the whole operation. A finished
                context stops the loop before the next attempt and
                interrupts backoff sleeps.

        Returns:
            The value returned by the first successful attempt.

        Raises:
            StructuredError: The last classified error once attempts are
                exhausted or the error is not retryable, or the
                ``canceled``/``timeout`` error of the context.
        """
        ctx = ctx if ctx is not None else background()
        method = method.upper()
        max_attempts = self.policy.max_attempts
        start_time = time.monotonic()
        attempt = 0

        while True:
            try:
                ctx.check()
                result = attempt_func()
                if isinstance(result, httpx.Response) and result.status_code >= 400:
                    result.read()
            except Exception as exc:  # noqa: BLE001
                error = classify_exception(exc, ctx)
            else:
                error = evaluate_result(result)
                if error is None:
                    logger.debug(f"{method} request succeeded on attempt {attempt + 1}")
                    return result

            should_retry, reason = self.decider.should_retry(error, method, attempt)
            if not should_retry:
                raise give_up(
                    error,
                    method=method,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    reason=reason,
                    on_failure=self.on_failure,
                    start_time=start_time,
                )

            sleep_time = self.strategy.calculate_delay(attempt)
            logger.debug(
                f"{method} request failed on attempt {attempt + 1}/{max_attempts}: "
                f"{error}, will retry ({reason})"
            )
            invoke_on_retry(
                self.on_retry,
                method=method,
                attempt=attempt,
                max_attempts=max_attempts,
                sleep_time=sleep_time,
                error=error,
            )
            try:
                ctx.sleep(sleep_time)
            except ContextError as exc:
                raise give_up(
                    classify_exception(exc),
                    method=method,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    reason="context finished during backoff",
                    on_failure=self.on_failure,
                    start_time=start_time,
                ) from exc
            attempt += 1


def retry_execute(
    attempt: Callable[[], T],
    method: str,
    policy: RetryPolicy | None = None,
    *,
    ctx: Context | None = None,
) -> T:
    """Execute one logical request with automatic retry logic.

    This is a shortcut for ``RetryExecutor(policy).execute(attempt,
    method, ctx)``.

    Args:
        attempt: Function performing exactly one network attempt.
        method: The HTTP method of the logical operation.
        policy: Optional retry policy. Defaults to ``RetryPolicy()``.
        ctx: Optional context bounding the whole operation.

    Returns:
        The value returned by the first successful attempt.

    Raises:
        StructuredError: The terminal classified error.

    Example:
        ```pycon
        >>> from cloudsdk.retry import retry_execute
        >>> retry_execute(lambda: {"status": "ACTIVE"}, method="GET")
        {'status': 'ACTIVE'}

        ```
    """
    return RetryExecutor(policy).execute(attempt, method=method, ctx=ctx)
