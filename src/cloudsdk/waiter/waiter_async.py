r"""Asynchronous waiter polling a predicate until it is satisfied."""

from __future__ import annotations

__all__ = ["AsyncWaiter", "wait_async"]

import logging
import time
from typing import TYPE_CHECKING

from cloudsdk.callbacks import invoke_on_poll
from cloudsdk.context import ContextError, background
from cloudsdk.exceptions import StructuredError
from cloudsdk.waiter.config import WaitPolicy
from cloudsdk.waiter.core import check_error, expiry_error, polling_context

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cloudsdk.callbacks import PollInfo
    from cloudsdk.context import Context

logger: logging.Logger = logging.getLogger(__name__)


class AsyncWaiter:
    r"""Asynchronously wait until a predicate over remote state is
    satisfied.

    This is the asyncio twin of ``Waiter``: the state check is a
    coroutine function and the sleeps between polls use
    ``Context.sleep_async``.

    Args:
        policy: The wait policy. Defaults to ``WaitPolicy()``.
        on_poll: Optional callback invoked after each unsuccessful poll.
    """

    def __init__(
        self,
        policy: WaitPolicy | None = None,
        *,
        on_poll: Callable[[PollInfo], None] | None = None,
    ) -> None:
        self.policy: WaitPolicy = policy or WaitPolicy()
        self.on_poll = on_poll

    async def wait(
        self, check: Callable[[Context], Awaitable[bool]], ctx: Context | None = None
    ) -> None:
        """Poll ``check`` until it returns ``True``.

        Args:
            check: The async state check. Returns ``True`` once the target
                state is reached, raises to report an unrecoverable state.
            ctx: Optional caller context. When it has a deadline, that
                deadline governs instead of ``policy.max_wait``.

        Raises:
            WaitTimeoutError: If the waiter's own ``max_wait`` deadline
                expired.
            StructuredError: With kind ``canceled`` or ``timeout`` if the
                caller context was canceled or reached its deadline.
            Exception: Any exception raised by ``check``, except a
                ``timeout``/``canceled`` error caused by the end of the
                wait, which is reported as above.
        """
        ctx = ctx if ctx is not None else background()
        schedule = self.policy.backoff_strategy()
        start_time = time.monotonic()
        poll = 0
        with polling_context(ctx, self.policy) as wait_ctx:
            while True:
                try:
                    satisfied = await check(wait_ctx)
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
                    await wait_ctx.sleep_async(interval)
                except ContextError as exc:
                    raise expiry_error(ctx, exc, self.policy) from exc
                poll += 1


async def wait_async(
    check: Callable[[Context], Awaitable[bool]],
    policy: WaitPolicy | None = None,
    *,
    ctx: Context | None = None,
) -> None:
    """Poll the async ``check`` until it returns ``True``.

    This is a shortcut for ``AsyncWaiter(policy).wait(check, ctx)``.

    Args:
        check: The async state check.
        policy: Optional wait policy. Defaults to ``WaitPolicy()``.
        ctx: Optional caller context.

    Raises:
        WaitTimeoutError: If the waiter's own deadline expired.
        StructuredError: If the caller context finished.
        Exception: Any exception raised by ``check``.
    """
    await AsyncWaiter(policy).wait(check, ctx=ctx)
