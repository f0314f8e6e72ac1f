r"""Shared core logic for the synchronous and asynchronous waiters."""

from __future__ import annotations

__all__ = ["check_error", "expiry_error", "polling_context"]

import logging
from typing import TYPE_CHECKING

from cloudsdk.classifier import classify_exception
from cloudsdk.context import ContextDeadlineExceededError, with_cancel, with_timeout
from cloudsdk.exceptions import ErrorKind, StructuredError, WaitTimeoutError

if TYPE_CHECKING:
    from cloudsdk.context import Context, ContextError
    from cloudsdk.waiter.config import WaitPolicy

logger: logging.Logger = logging.getLogger(__name__)


def polling_context(ctx: Context, policy: WaitPolicy) -> Context:
    """Derive the context governing a wait.

    When the caller context already carries a deadline, that deadline
    governs. Otherwise the waiter layers its own ``max_wait`` deadline on
    top of the caller context.

    Args:
        ctx: The caller context.
        policy: The wait policy.

    Returns:
        A derived context, to be released by the waiter when it exits.
    """
    if ctx.deadline is not None:
        return with_cancel(ctx)
    return with_timeout(ctx, policy.max_wait)


def expiry_error(ctx: Context, exc: ContextError, policy: WaitPolicy) -> StructuredError:
    """Build the error reported when the polling context finished.

    Args:
        ctx: The caller context.
        exc: The error raised by the polling context.
        policy: The wait policy.

    Returns:
        ``WaitTimeoutError`` when the waiter's own deadline fired while the
        caller context is still live, otherwise the classified error of
        the caller context (``canceled`` or ``timeout``).
    """
    caller_err = ctx.err
    if caller_err is None and isinstance(exc, ContextDeadlineExceededError):
        logger.debug(f"Wait timed out after {policy.max_wait:g}s")
        return WaitTimeoutError(policy.max_wait, cause=exc)
    logger.debug(f"Wait interrupted by the caller context: {caller_err or exc}")
    return classify_exception(caller_err or exc)


def check_error(
    ctx: Context, wait_ctx: Context, exc: Exception, policy: WaitPolicy
) -> StructuredError | None:
    """Translate an error raised by the state check.

    A check routes its requests through the context of the wait, so the
    waiter's own deadline may fire during a request or its retry
    backoff. The resulting ``timeout``/``canceled`` error is then
    reported like an expiry of the wait.

    Args:
        ctx: The caller context.
        wait_ctx: The context governing the wait.
        exc: The exception raised by the check.
        policy: The wait policy.

    Returns:
        The expiry error to raise instead of ``exc``, or ``None`` when
        ``exc`` must be propagated unchanged.
    """
    if not isinstance(exc, StructuredError) or exc.error_kind not in (
        ErrorKind.TIMEOUT,
        ErrorKind.CANCELED,
    ):
        return None
    wait_err = wait_ctx.err
    if wait_err is None:
        return None
    return expiry_error(ctx, wait_err, policy)
