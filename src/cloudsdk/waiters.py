r"""Ready-made waiters for resource state transitions.

These helpers build the state check for the two situations every cloud
resource goes through: reaching a target status (``ACTIVE``,
``SHUTOFF``, ...) and disappearing after a deletion. They know nothing
about specific resources: the caller provides a function fetching the
current status, usually a GET request routed through the retry executor.

Example:
    ```pycon
    >>> from cloudsdk.waiter import WaitPolicy
    >>> from cloudsdk.waiters import wait_for_state
    >>> statuses = iter(["BUILD", "BUILD", "ACTIVE"])
    >>> wait_for_state(
    ...     lambda ctx: next(statuses), "ACTIVE", policy=WaitPolicy(interval=0.01)
    ... )

    ```
"""

from __future__ import annotations

__all__ = [
    "DELETION_WAIT_POLICY",
    "STATE_WAIT_POLICY",
    "UnexpectedStateError",
    "wait_for_deletion",
    "wait_for_deletion_async",
    "wait_for_state",
    "wait_for_state_async",
]

import logging
from typing import TYPE_CHECKING, Any

from cloudsdk.exceptions import ErrorKind, StructuredError
from cloudsdk.waiter import WaitPolicy, wait, wait_async

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from cloudsdk.context import Context

logger: logging.Logger = logging.getLogger(__name__)

# Resources usually take a while to build: poll less often and back off
STATE_WAIT_POLICY = WaitPolicy(
    interval=5.0, max_wait=600.0, backoff_multiplier=1.2, max_interval=30.0
)
DELETION_WAIT_POLICY = WaitPolicy(interval=3.0, max_wait=300.0)

DEFAULT_FAILURE_STATES = ("ERROR",)


class UnexpectedStateError(RuntimeError):
    """Raised when a resource enters a failure state while waiting for
    another one.

    Args:
        state: The failure state observed.
        target: The state that was awaited.

    Example:
        ```pycon
        >>> from cloudsdk.waiters import UnexpectedStateError
        >>> raise UnexpectedStateError("ERROR", "ACTIVE")
        Traceback (most recent call last):
            ...
        cloudsdk.waiters.UnexpectedStateError: resource entered ERROR state while waiting for ACTIVE

        ```
    """

    def __init__(self, state: str, target: str) -> None:
        super().__init__(f"resource entered {state} state while waiting for {target}")
        self.state = state
        self.target = target


def _state_reached(state: str, target: str, failure_states: Iterable[str]) -> bool:
    if state == target:
        return True
    if state in failure_states:
        raise UnexpectedStateError(state, target)
    logger.debug(f"Resource is {state}, waiting for {target}")
    return False


def _is_not_found(exc: Exception) -> bool:
    return (
        isinstance(exc, StructuredError)
        and exc.error_kind is ErrorKind.HTTP_STATUS
        and exc.status_code == 404
    )


def wait_for_state(
    fetch_state: Callable[[Context], str],
    target: str,
    *,
    failure_states: Iterable[str] = DEFAULT_FAILURE_STATES,
    policy: WaitPolicy | None = None,
    ctx: Context | None = None,
) -> None:
    """Wait until a resource reaches ``target``.

    Args:
        fetch_state: Function returning the current state of the resource.
        target: The awaited state.
        failure_states: States that can never lead to ``target``. Reaching
            one of them stops the wait, unless it is the target itself.
        policy: Optional wait policy. Defaults to ``STATE_WAIT_POLICY``.
        ctx: Optional caller context.

    Raises:
        UnexpectedStateError: If the resource entered a failure state.
        WaitTimeoutError: If the wait policy deadline expired.
        StructuredError: If fetching the state failed, or the caller
            context finished.
    """
    failure_states = tuple(failure_states)
    wait(
        lambda wait_ctx: _state_reached(fetch_state(wait_ctx), target, failure_states),
        policy or STATE_WAIT_POLICY,
        ctx=ctx,
    )


def wait_for_deletion(
    fetch: Callable[[Context], Any],
    *,
    policy: WaitPolicy | None = None,
    ctx: Context | None = None,
) -> None:
    """Wait until a resource is deleted.

    The resource is deleted once ``fetch`` raises an ``http_status``
    error with status 404. Any other error stops the wait.

    Args:
        fetch: Function fetching the resource.
        policy: Optional wait policy. Defaults to ``DELETION_WAIT_POLICY``.
        ctx: Optional caller context.

    Raises:
        WaitTimeoutError: If the wait policy deadline expired.
        StructuredError: If fetching the resource failed with another
            error, or the caller context finished.
    """

    def check(wait_ctx: Context) -> bool:
        try:
            fetch(wait_ctx)
        except StructuredError as exc:
            if _is_not_found(exc):
                return True
            raise
        return False

    wait(check, policy or DELETION_WAIT_POLICY, ctx=ctx)


async def wait_for_state_async(
    fetch_state: Callable[[Context], Awaitable[str]],
    target: str,
    *,
    failure_states: Iterable[str] = DEFAULT_FAILURE_STATES,
    policy: WaitPolicy | None = None,
    ctx: Context | None = None,
) -> None:
    """Asynchronously wait until a resource reaches ``target``.

    See ``wait_for_state``; ``fetch_state`` is a coroutine function.
    """
    failure_states = tuple(failure_states)

    async def check(wait_ctx: Context) -> bool:
        return _state_reached(await fetch_state(wait_ctx), target, failure_states)

    await wait_async(check, policy or STATE_WAIT_POLICY, ctx=ctx)


async def wait_for_deletion_async(
    fetch: Callable[[Context], Awaitable[Any]],
    *,
    policy: WaitPolicy | None = None,
    ctx: Context | None = None,
) -> None:
    """Asynchronously wait until a resource is deleted.

    See ``wait_for_deletion``; ``fetch`` is a coroutine function.
    """

    async def check(wait_ctx: Context) -> bool:
        try:
            await fetch(wait_ctx)
        except StructuredError as exc:
            if _is_not_found(exc):
                return True
            raise
        return False

    await wait_async(check, policy or DELETION_WAIT_POLICY, ctx=ctx)
