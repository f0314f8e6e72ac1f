r"""Synchronous waiter polling a predicate until it is satisfied.

The waiter is a small state machine: it keeps ``Polling`` until the
predicate reports success (``Succeeded``), raises (``Failed``), the
waiter's own ``max_wait`` deadline expires (``TimedOut``) or the caller
context finishes (``Canceled``). Every state but ``Polling`` is terminal.
"""

from __future__ import annotations

__all__ = ["Waiter", "wait"]

import logging
import time
from typing import TYPE_CHECKING

from cloudsdk.callbacks import invoke_on_poll
from cloudsdk.context import ContextError, background
from cloudsdk.exceptions import StructuredError
from cloudsdk.waiter.config import WaitPolicy
from cloudsdk.waiter.core import check_error, expiry_error, polling_context

if TYPE_CHECKING:
    from collections.abc import Callable

    from cloudsdk.callbacks import PollInfo
    from cloudsdk.context import Context

logger: logging.Logger = logging.getLogger(__name__)


class Waiter:
    r"""Block until a predicate over remote state is satisfied.

    Args:
        policy: The wait policy. Defaults to ``WaitPolicy()``.
        on_poll: Optional callback invoked after each unsuccessful poll.

    Attributes:
        policy: The wait policy.

    Example:
        ```pycon
        >>> from cloudsdk.waiter import WaitPolicy, Waiter
        >>> waiter = Waiter(WaitPolicy(interval=0.01, max_wait=1.0))
        >>> polls = iter([False, False, True])
        >>> waiter.wait(lambda ctx: next(polls))

        ```
    """

    def __init__(
        self,
        policy: WaitPolicy | None = None,
        *,
        on_poll: Callable[[PollInfo], None] | None = None,
    ) -> None:
        self.policy: WaitPolicy = policy or WaitPolicy()
        self.on_poll = on_poll

    def wait(self, check: Callable[[Context], bool], ctx: Context | None = None) -> None:
        """Poll ``check`` until it returns ``True``.

        ``check`` is invoked immediately, then after each interval. Polls
        are strictly sequential. ``check`` receives the context governing
        the wait, which it should pass down to the network calls it makes.
        An exception raised by ``check`` is the way to report an
        unrecoverable state: it stops the waiter and is propagated
        unchanged, except for the ``timeout``/``canceled`` error of a
        request interrupted by the end of the wait, which is reported like
        any other expiry of the wait.

        Args:
            check: The state check. Returns ``True`` once the target state
                is reached.
            ctx: Optional caller context. When it has a deadline, that
                deadline governs instead of ``policy.max_wait``.

        Raises:
            WaitTimeoutError: If the waiter's own ``max_wait`` deadline
                expired.
            StructuredError: With kind ``canceled`` or ``timeout`` if the
                caller context was canceled or reached its deadline.
            Exception: Any exception raised by ``check``.
        """
        ctx = ctx if ctx is not None else background()
        schedule = self.policy.backoff_strategy()
        start_time = time.monotonic()
        poll = 0
        with polling_context(ctx, self.policy) as wait_ctx:
            while True:
                try:
                    satisfied = check(wait_ctx)
                except StructuredError as exc:
                    error = check_error(ctx, wait_ctx, exc, self.policy)
                    if error is None:
                        raise
                    raise error from exc
                if satisfied:
                    logger.debug(
                        f"Wait succeeded after {poll + 1} poll(s) in "
                        f"{time.monotonic() - start_time:.3f}s"
                    )
                    return
                interval = schedule.calculate(poll)
                logger.debug(f"Poll {poll + 1} not satisfied, next poll in {interval:.3f}s")
                invoke_on_poll(
                    self.on_poll, poll=poll, next_interval=interval, start_time=start_time
                )
                try:
                    wait_ctx.sleep(interval)
                except ContextError as exc:
                    raise expiry_error(ctx, exc, self.policy) from exc
                poll += 1


def wait(
    check: Callable[[Context], bool],
    policy: WaitPolicy | None = None,
    *,
    ctx: Context | None = None,
) -> None:
    """Poll ``check`` until it returns ``True``.

    This is a shortcut for ``Waiter(policy).wait(check, ctx)``.

    Args:
        check: The state check. Returns ``True`` once the target state is
            reached, raises to report an unrecoverable state.
        policy: Optional wait policy. Defaults to ``WaitPolicy()``.
        ctx: Optional caller context.

    Raises:
        WaitTimeoutError: If the waiter's own deadline expired.
        StructuredError: If the caller context finished.
        Exception: Any exception raised by ``check``.

    Example:
        ```pycon
        >>> from cloudsdk.waiter import WaitPolicy, wait
        >>> wait(lambda ctx: True, WaitPolicy(interval=0.1))

        ```
    """
    Waiter(policy).wait(check, ctx=ctx)
