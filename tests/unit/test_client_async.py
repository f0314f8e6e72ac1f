r"""Unit tests for AsyncCloudClient."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx
import pytest

from cloudsdk import AsyncCloudClient
from cloudsdk.context import background
from cloudsdk.exceptions import ErrorKind, StructuredError
from cloudsdk.retry import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://api.example.com"


@pytest.fixture
def make_client(
    replay: Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]],
    fast_policy: RetryPolicy,
) -> Callable[..., tuple[AsyncCloudClient, list[httpx.Request]]]:
    """Create a factory of async clients replaying ``(status, body)``
    pairs."""

    def factory(
        *responses: tuple[int, str], **kwargs
    ) -> tuple[AsyncCloudClient, list[httpx.Request]]:
        transport, requests = replay(*responses)
        kwargs.setdefault("policy", fast_policy)
        http_client = httpx.AsyncClient(base_url=BASE_URL, transport=transport)
        return AsyncCloudClient(http_client, **kwargs), requests

    return factory


@pytest.mark.asyncio
async def test_async_cloud_client_outside_context_manager() -> None:
    """Test that an owned client cannot be used outside async with."""
    client = AsyncCloudClient()
    with pytest.raises(RuntimeError, match=r"must be used within an async context manager"):
        await client.get("https://api.example.com/servers")


@pytest.mark.asyncio
async def test_async_cloud_client_lifecycle() -> None:
    """Test that the owned httpx client is created and closed."""
    client = AsyncCloudClient()
    async with client:
        http_client = client._ensure_client()
        assert not http_client.is_closed
    assert http_client.is_closed
    assert client._client is None


@pytest.mark.asyncio
async def test_async_cloud_client_keeps_given_client_open() -> None:
    """Test that a client given by the caller is left open."""
    http_client = httpx.AsyncClient()
    async with AsyncCloudClient(http_client):
        pass
    assert not http_client.is_closed
    await http_client.aclose()


@pytest.mark.asyncio
async def test_async_cloud_client_get(make_client: Callable) -> None:
    """Test that a successful GET returns the decoded body."""
    client, requests = make_client((200, '{"id": "svr-1"}'))
    async with client:
        assert await client.get("/servers/svr-1") == {"id": "svr-1"}
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_async_cloud_client_get_exhausts_attempts(make_client: Callable) -> None:
    """Test that a persistent 503 on GET makes exactly 3 attempts."""
    client, requests = make_client((503, ""))
    async with client:
        with pytest.raises(StructuredError) as exc_info:
            await client.get("/servers")
    assert len(requests) == 3
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_async_cloud_client_get_retries(make_client: Callable) -> None:
    """Test that a transient failure of a GET is retried."""
    client, requests = make_client((504, ""), (200, "[]"))
    async with client:
        assert await client.get("/servers") == []
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_async_cloud_client_not_found(make_client: Callable) -> None:
    """Test that a 404 makes a single attempt."""
    client, requests = make_client((404, ""))
    async with client:
        with pytest.raises(StructuredError) as exc_info:
            await client.get("/servers/missing")
    assert len(requests) == 1
    assert exc_info.value.error_kind is ErrorKind.HTTP_STATUS


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["post", "put", "patch", "delete"])
async def test_async_cloud_client_write_methods_not_retried(
    make_client: Callable, method: str
) -> None:
    """Test that non-idempotent methods are never retried."""
    client, requests = make_client((503, ""))
    async with client:
        with pytest.raises(StructuredError):
            await getattr(client, method)("/servers")
    assert len(requests) == 1
    assert requests[0].method == method.upper()


@pytest.mark.asyncio
async def test_async_cloud_client_head(make_client: Callable) -> None:
    """Test the HEAD helper."""
    client, requests = make_client((200, ""))
    async with client:
        assert await client.head("/servers") is None
    assert requests[0].method == "HEAD"


@pytest.mark.asyncio
async def test_async_cloud_client_network_error(fast_policy: RetryPolicy) -> None:
    """Test that a transport failure is a network error."""
    handler = Mock(side_effect=httpx.ConnectError("connection refused"))
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    async with AsyncCloudClient(http_client, policy=fast_policy) as client:
        with pytest.raises(StructuredError) as exc_info:
            await client.get("https://api.example.com/servers")
    assert exc_info.value.error_kind is ErrorKind.NETWORK
    await http_client.aclose()


@pytest.mark.asyncio
async def test_async_cloud_client_cancel_interrupts_backoff(make_client: Callable) -> None:
    """Test that a caller cancellation interrupts the retry backoff."""
    client, requests = make_client(
        (503, ""), policy=RetryPolicy(base_delay=10.0, max_delay=10.0, jitter=0.0)
    )
    ctx = background()
    asyncio.get_running_loop().call_later(0.05, ctx.cancel)
    start = time.monotonic()
    async with client:
        with pytest.raises(StructuredError) as exc_info:
            await client.get("/servers", ctx=ctx)
    assert time.monotonic() - start < 1.0
    assert exc_info.value.error_kind is ErrorKind.CANCELED
    assert len(requests) == 1
