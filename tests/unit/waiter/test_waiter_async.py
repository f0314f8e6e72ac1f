r"""Unit tests for asynchronous waiter."""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock, Mock, call, patch

import httpx
import pytest

from cloudsdk.client_async import AsyncCloudClient
from cloudsdk.context import background, with_timeout
from cloudsdk.exceptions import ErrorKind, StructuredError, WaitTimeoutError
from cloudsdk.retry import RetryPolicy
from cloudsdk.waiter import AsyncWaiter, WaitPolicy, wait_async


def unavailable_client() -> AsyncCloudClient:
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text=""))
    return AsyncCloudClient(
        httpx.AsyncClient(base_url="https://api.example.com", transport=transport),
        policy=RetryPolicy(base_delay=1.0, max_delay=1.0, jitter=0.0),
    )


@pytest.mark.asyncio
async def test_async_waiter_immediate_success() -> None:
    """Test that a satisfied first poll returns without sleeping."""
    check = AsyncMock(return_value=True)
    await AsyncWaiter(WaitPolicy(interval=10.0)).wait(check)
    check.assert_awaited_once()


@pytest.mark.asyncio
async def test_async_waiter_polls_until_satisfied() -> None:
    """Test that the waiter sleeps one interval between two polls."""
    check = AsyncMock(side_effect=[False, False, True])
    start = time.monotonic()
    await AsyncWaiter(WaitPolicy(interval=0.01, max_wait=5.0)).wait(check)
    elapsed = time.monotonic() - start
    assert check.await_count == 3
    assert 0.02 <= elapsed < 0.1


@pytest.mark.asyncio
async def test_async_waiter_timeout() -> None:
    """Test that the waiter's own deadline raises WaitTimeoutError."""
    start = time.monotonic()
    with pytest.raises(WaitTimeoutError) as exc_info:
        await AsyncWaiter(WaitPolicy(interval=0.02, max_wait=0.1)).wait(
            AsyncMock(return_value=False)
        )
    assert 0.1 <= time.monotonic() - start <= 0.1 + 0.02 + 0.05
    assert exc_info.value.metadata["source"] == "waiter"


@pytest.mark.asyncio
async def test_async_waiter_caller_deadline() -> None:
    """Test that a caller deadline gives a timeout that is not a
    WaitTimeoutError."""
    with with_timeout(background(), 0.05) as ctx:
        with pytest.raises(StructuredError) as exc_info:
            await AsyncWaiter(WaitPolicy(interval=0.01)).wait(
                AsyncMock(return_value=False), ctx=ctx
            )
    assert not isinstance(exc_info.value, WaitTimeoutError)
    assert exc_info.value.error_kind is ErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_async_waiter_caller_cancel() -> None:
    """Test that a caller cancellation interrupts the wait promptly."""
    ctx = background()
    asyncio.get_running_loop().call_later(0.05, ctx.cancel)
    start = time.monotonic()
    with pytest.raises(StructuredError) as exc_info:
        await AsyncWaiter(WaitPolicy(interval=10.0)).wait(AsyncMock(return_value=False), ctx=ctx)
    assert time.monotonic() - start < 1.0
    assert exc_info.value.error_kind is ErrorKind.CANCELED


@pytest.mark.asyncio
async def test_async_waiter_check_error_propagates() -> None:
    """Test that an error raised by the check is propagated unchanged."""
    error = ValueError("unexpected payload")
    check = AsyncMock(side_effect=error)
    with pytest.raises(ValueError, match=r"unexpected payload"):
        await AsyncWaiter().wait(check)


@pytest.mark.asyncio
async def test_async_waiter_backoff_intervals() -> None:
    """Test that the intervals follow min(interval * m**n, cap)."""
    policy = WaitPolicy(interval=2.0, backoff_multiplier=1.5, max_interval=5.0)
    check = AsyncMock(side_effect=[False, False, False, True])
    on_poll = Mock()
    with patch(
        "cloudsdk.context.Context.sleep_async", new_callable=AsyncMock
    ) as mock_sleep_async:
        await AsyncWaiter(policy, on_poll=on_poll).wait(check)
    assert mock_sleep_async.await_args_list == [call(2.0), call(3.0), call(4.5)]
    assert on_poll.call_count == 3


@pytest.mark.asyncio
async def test_wait_async() -> None:
    """Test the functional entry point."""
    check = AsyncMock(side_effect=[False, True])
    await wait_async(check, WaitPolicy(interval=0.01))
    assert check.await_count == 2


@pytest.mark.asyncio
async def test_async_waiter_timeout_during_request_backoff() -> None:
    """Test that the waiter's own deadline firing during a request
    backoff raises WaitTimeoutError."""

    async def check(ctx) -> bool:
        return await client.get("/servers/svr-1", ctx=ctx) == "ok"

    start = time.monotonic()
    async with unavailable_client() as client:
        with pytest.raises(WaitTimeoutError) as exc_info:
            await wait_async(check, WaitPolicy(interval=0.01, max_wait=0.2))
    assert time.monotonic() - start < 1.0
    assert exc_info.value.metadata["source"] == "waiter"
    assert isinstance(exc_info.value.__cause__, StructuredError)


@pytest.mark.asyncio
async def test_async_waiter_caller_cancel_during_request_backoff() -> None:
    """Test that a caller cancellation during a request backoff is
    reported as canceled."""

    async def check(wait_ctx) -> bool:
        return await client.get("/servers/svr-1", ctx=wait_ctx) == "ok"

    ctx = background()
    asyncio.get_running_loop().call_later(0.05, ctx.cancel)
    async with unavailable_client() as client:
        with pytest.raises(StructuredError) as exc_info:
            await wait_async(check, ctx=ctx)
    assert not isinstance(exc_info.value, WaitTimeoutError)
    assert exc_info.value.error_kind is ErrorKind.CANCELED
