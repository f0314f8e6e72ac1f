r"""Cooperative cancellation and deadline propagation.

A ``Context`` carries an optional deadline and a cancellation flag. It is
passed down through every suspension point of the retry and waiter
layers: sleeps race against it, so a cancellation or an expired deadline
interrupts them immediately.

Derived contexts inherit the deadline and the cancellation of their
parent, and can only shorten the deadline. The error reported by a
derived context is the parent's error when the parent finished first,
which lets callers tell a deadline they imposed apart from one imposed
internally.

Example:
    ```pycon
    >>> from cloudsdk.context import background, with_timeout
    >>> ctx = background()
    >>> ctx.err is None
    True
    >>> with with_timeout(ctx, 10.0) as child:
    ...     child.deadline is not None
    ...
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "Context",
    "ContextCanceledError",
    "ContextDeadlineExceededError",
    "ContextError",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]

import asyncio
import logging
import threading
import time
import weakref
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

logger: logging.Logger = logging.getLogger(__name__)


class ContextError(Exception):
    """Base class for errors reported by a finished context."""


class ContextCanceledError(ContextError):
    """Raised when a context was canceled."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class ContextDeadlineExceededError(ContextError):
    """Raised when the deadline of a context expired."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class Context:
    r"""Cancellation and deadline carrier.

    Contexts are created with ``background()`` and derived with
    ``with_cancel()``, ``with_timeout()`` or ``with_deadline()``. A derived
    context is also a context manager that releases itself (cancels) on
    exit, detaching from its parent. A parent only keeps weak references
    to its derived contexts, so one that is dropped without being
    released is detached once it is garbage collected.

    Args:
        parent: Optional parent context whose cancellation and deadline
            are inherited.
        deadline: Optional deadline as a ``time.monotonic()`` timestamp.

    Attributes:
        parent: The parent context, if any.
    """

    def __init__(self, parent: Context | None = None, deadline: float | None = None) -> None:
        self.parent = parent
        self._own_deadline = deadline
        self._deadline = deadline
        if parent is not None and parent.deadline is not None:
            self._deadline = (
                parent.deadline if deadline is None else min(deadline, parent.deadline)
            )
        self._canceled = False
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self._children: weakref.WeakSet[Context] = weakref.WeakSet()
        if parent is not None:
            parent._adopt(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(deadline={self._deadline}, canceled={self._canceled}, "
            f"err={self.err!r})"
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.cancel()

    @property
    def deadline(self) -> float | None:
        r"""The effective deadline (``time.monotonic()`` timestamp), if
        any."""
        return self._deadline

    @property
    def err(self) -> ContextError | None:
        r"""The reason this context finished, or ``None`` while it is
        live.

        An ancestor's error takes precedence over this context's own
        cancellation or deadline.
        """
        if self.parent is not None:
            parent_err = self.parent.err
            if parent_err is not None:
                return parent_err
        if self._canceled:
            return ContextCanceledError()
        if self._own_deadline is not None and time.monotonic() >= self._own_deadline:
            return ContextDeadlineExceededError()
        return None

    def done(self) -> bool:
        r"""Indicate if the context was canceled or its deadline
        expired."""
        return self.err is not None

    def remaining(self) -> float | None:
        """Return the seconds left before the deadline, or ``None`` if the
        context has no deadline.

        The returned value is never negative.
        """
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def cancel(self) -> None:
        r"""Cancel this context and every context derived from it.

        Canceling an already canceled context has no effect.
        """
        with self._lock:
            if self._canceled:
                return
            self._canceled = True
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
            children = list(self._children)
            self._children.clear()
        if self.parent is not None:
            self.parent._release(self)
        for child in children:
            child._on_parent_canceled()
        for callback in callbacks:
            callback()

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to be called when this context is
        canceled.

        The callback is called immediately if this context or one of its
        ancestors is already canceled. Deadlines do not trigger callbacks:
        sleepers bound their wait with ``remaining()`` instead.

        Args:
            callback: A function taking no argument.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_done_callback(self, callback: Callable[[], None]) -> None:
        """Unregister a callback added with ``add_done_callback``.

        Args:
            callback: The callback to remove. Unknown callbacks are ignored.
        """
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def check(self) -> None:
        """Raise the context error if the context is finished.

        Raises:
            ContextError: If the context was canceled or its deadline
                expired.
        """
        err = self.err
        if err is not None:
            raise err

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds`` or until the context finishes.

        Args:
            seconds: The sleep duration in seconds.

        Raises:
            ContextError: If the context finished before the sleep
                elapsed.
        """
        end = time.monotonic() + max(seconds, 0.0)
        while not self._event.wait(self._bounded(end - time.monotonic())):
            self.check()
            if time.monotonic() >= end:
                return
        self.check()

    async def sleep_async(self, seconds: float) -> None:
        """Asynchronously wait for ``seconds`` or until the context
        finishes.

        Cancellation may come from another thread, so the wake-up is
        scheduled on the running loop with ``call_soon_threadsafe``.

        Args:
            seconds: The sleep duration in seconds.

        Raises:
            ContextError: If the context finished before the sleep
                elapsed.
        """
        loop = asyncio.get_running_loop()
        waker: asyncio.Future[None] = loop.create_future()

        def _resolve() -> None:
            if not waker.done():
                waker.set_result(None)

        def _wake() -> None:
            loop.call_soon_threadsafe(_resolve)

        end = time.monotonic() + max(seconds, 0.0)
        self.add_done_callback(_wake)
        try:
            while not waker.done():
                await asyncio.wait({waker}, timeout=self._bounded(end - time.monotonic()))
                self.check()
                if time.monotonic() >= end:
                    return
        finally:
            self.remove_done_callback(_wake)
            waker.cancel()
        self.check()

    def _bounded(self, seconds: float) -> float:
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        return max(seconds, 0.0)

    def _adopt(self, child: Context) -> None:
        with self._lock:
            if not self._event.is_set():
                self._children.add(child)
                return
        child._on_parent_canceled()

    def _release(self, child: Context) -> None:
        with self._lock:
            self._children.discard(child)

    def _on_parent_canceled(self) -> None:
        # The parent error is reported through ``err``, this only wakes sleepers.
        with self._lock:
            self._event.set()
            callbacks = list(self._callbacks)
            children = list(self._children)
        for child in children:
            child._on_parent_canceled()
        for callback in callbacks:
            callback()


def background() -> Context:
    r"""Return a new root context without deadline.

    Returns:
        A context that is only finished when explicitly canceled.
    """
    return Context()


def with_cancel(parent: Context) -> Context:
    r"""Derive a cancelable context from ``parent``.

    Args:
        parent: The parent context.

    Returns:
        The derived context.
    """
    return Context(parent)


def with_deadline(parent: Context, deadline: float) -> Context:
    r"""Derive a context that expires at ``deadline``.

    Args:
        parent: The parent context.
        deadline: A ``time.monotonic()`` timestamp.

    Returns:
        The derived context. Its effective deadline is the earliest of
        ``deadline`` and the parent's deadline.
    """
    return Context(parent, deadline=deadline)


def with_timeout(parent: Context, timeout: float) -> Context:
    r"""Derive a context that expires ``timeout`` seconds from now.

    Args:
        parent: The parent context.
        timeout: The timeout in seconds. Must be >= 0.

    Returns:
        The derived context.

    Raises:
        ValueError: If ``timeout`` is negative.
    """
    if timeout < 0:
        msg = f"timeout must be >= 0, got {timeout}"
        raise ValueError(msg)
    return with_deadline(parent, time.monotonic() + timeout)
