r"""Unit tests for CloudClient."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx
import pytest

from cloudsdk import CloudClient
from cloudsdk.context import background, with_timeout
from cloudsdk.exceptions import ErrorKind, StructuredError
from cloudsdk.retry import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://api.example.com"


@pytest.fixture
def make_client(
    replay: Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]],
    fast_policy: RetryPolicy,
) -> Callable[..., tuple[CloudClient, list[httpx.Request]]]:
    """Create a factory of clients replaying ``(status, body)`` pairs."""

    def factory(*responses: tuple[int, str], **kwargs) -> tuple[CloudClient, list[httpx.Request]]:
        transport, requests = replay(*responses)
        kwargs.setdefault("policy", fast_policy)
        http_client = httpx.Client(base_url=BASE_URL, transport=transport)
        return CloudClient(http_client, **kwargs), requests

    return factory


def test_cloud_client_defaults() -> None:
    """Test the default configuration of CloudClient."""
    with CloudClient() as client:
        assert client.policy == RetryPolicy()
        assert repr(client).startswith("CloudClient(policy=RetryPolicy(")


def test_cloud_client_invalid_timeout() -> None:
    """Test that a non positive timeout is rejected."""
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        CloudClient(timeout=0.0)


def test_cloud_client_closes_own_client() -> None:
    """Test that a client created by CloudClient is closed on exit."""
    client = CloudClient()
    with client:
        pass
    assert client._client.is_closed


def test_cloud_client_keeps_given_client_open() -> None:
    """Test that a client given by the caller is left open."""
    http_client = httpx.Client()
    with CloudClient(http_client):
        pass
    assert not http_client.is_closed
    http_client.close()


def test_cloud_client_get(make_client: Callable) -> None:
    """Test that a successful GET returns the decoded body."""
    client, requests = make_client((200, '{"id": "svr-1", "status": "ACTIVE"}'))
    with client:
        assert client.get("/servers/svr-1") == {"id": "svr-1", "status": "ACTIVE"}
    assert len(requests) == 1
    assert requests[0].method == "GET"
    assert str(requests[0].url) == f"{BASE_URL}/servers/svr-1"


def test_cloud_client_empty_body(make_client: Callable) -> None:
    """Test that an empty body decodes to None."""
    client, _ = make_client((204, ""))
    with client:
        assert client.delete("/servers/svr-1") is None


def test_cloud_client_get_retries(make_client: Callable) -> None:
    """Test that a transient failure of a GET is retried."""
    client, requests = make_client((503, ""), (429, ""), (200, '{"ok": true}'))
    with client:
        assert client.get("/servers") == {"ok": True}
    assert len(requests) == 3


def test_cloud_client_get_exhausts_attempts(make_client: Callable) -> None:
    """Test that a persistent 503 on GET makes exactly 3 attempts."""
    client, requests = make_client((503, '{"errorCode": 9, "message": "maintenance"}'))
    with client, pytest.raises(StructuredError) as exc_info:
        client.get("/servers")
    assert len(requests) == 3
    error = exc_info.value
    assert error.status_code == 503
    assert error.error_code == 9
    assert str(error) == "HTTP 503 (code 9): maintenance"


def test_cloud_client_not_found(make_client: Callable) -> None:
    """Test that a 404 makes a single attempt."""
    client, requests = make_client((404, '{"message": "server not found"}'))
    with client, pytest.raises(StructuredError) as exc_info:
        client.get("/servers/missing")
    assert len(requests) == 1
    assert exc_info.value.status_code == 404
    assert exc_info.value.error_kind is ErrorKind.HTTP_STATUS


def test_cloud_client_post_not_retried(make_client: Callable) -> None:
    """Test that a POST is never retried."""
    client, requests = make_client((503, ""))
    with client, pytest.raises(StructuredError):
        client.post("/servers", json={"name": "web-1"})
    assert len(requests) == 1
    assert requests[0].content == b'{"name":"web-1"}'


@pytest.mark.parametrize("method", ["put", "patch"])
def test_cloud_client_write_methods(make_client: Callable, method: str) -> None:
    """Test the PUT and PATCH helpers."""
    client, requests = make_client((200, "{}"))
    with client:
        assert getattr(client, method)("/servers/svr-1", json={}) == {}
    assert requests[0].method == method.upper()


def test_cloud_client_head(make_client: Callable) -> None:
    """Test that a HEAD request is retried."""
    client, requests = make_client((502, ""), (200, ""))
    with client:
        assert client.head("/servers") is None
    assert len(requests) == 2


def test_cloud_client_per_request_policy(make_client: Callable) -> None:
    """Test that a per-request policy overrides the client one."""
    client, requests = make_client((503, ""))
    with client, pytest.raises(StructuredError):
        client.get("/servers", policy=RetryPolicy(max_attempts=1))
    assert len(requests) == 1


def test_cloud_client_invalid_json(make_client: Callable) -> None:
    """Test that an undecodable success body is a deserialization
    error."""
    client, _ = make_client((200, "<html>"))
    with client, pytest.raises(StructuredError) as exc_info:
        client.get("/servers")
    assert exc_info.value.error_kind is ErrorKind.DESERIALIZATION
    assert exc_info.value.status_code == 200


def test_cloud_client_network_error(fast_policy: RetryPolicy) -> None:
    """Test that a transport failure is a network error."""
    handler = Mock(side_effect=httpx.ConnectError("connection refused"))
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    with CloudClient(http_client, policy=fast_policy) as client:
        with pytest.raises(StructuredError) as exc_info:
            client.get("https://api.example.com/servers")
    assert exc_info.value.error_kind is ErrorKind.NETWORK
    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    handler.assert_called_once()


def test_cloud_client_canceled_context(make_client: Callable) -> None:
    """Test that a canceled caller context prevents the request."""
    client, requests = make_client((200, "{}"))
    ctx = background()
    ctx.cancel()
    with client, pytest.raises(StructuredError) as exc_info:
        client.get("/servers", ctx=ctx)
    assert exc_info.value.error_kind is ErrorKind.CANCELED
    assert requests == []


def test_cloud_client_caller_deadline_bounds_retries(make_client: Callable) -> None:
    """Test that the caller deadline interrupts the retry backoff."""
    client, requests = make_client(
        (503, ""), policy=RetryPolicy(base_delay=10.0, max_delay=10.0, jitter=0.0)
    )
    start = time.monotonic()
    with client, with_timeout(background(), 0.1) as ctx:
        with pytest.raises(StructuredError) as exc_info:
            client.get("/servers", ctx=ctx)
    assert time.monotonic() - start < 1.0
    assert exc_info.value.error_kind is ErrorKind.TIMEOUT
    assert len(requests) == 1


def test_cloud_client_attempt_timeout(make_client: Callable) -> None:
    """Test that each attempt receives the time left as timeout."""
    client, requests = make_client((200, "{}"), timeout=5.0)
    with client:
        client.get("/servers")
    timeout = requests[0].extensions["timeout"]
    assert 0.0 < timeout["read"] <= 5.0


def test_cloud_client_callbacks(replay: Callable, fast_policy: RetryPolicy) -> None:
    """Test that the client forwards its callbacks to the executor."""
    transport, _ = replay((503, ""))
    on_retry, on_failure = Mock(), Mock()
    with CloudClient(
        httpx.Client(transport=transport),
        policy=fast_policy,
        on_retry=on_retry,
        on_failure=on_failure,
    ) as client:
        with pytest.raises(StructuredError):
            client.get("https://api.example.com/servers")
    assert on_retry.call_count == 2
    on_failure.assert_called_once()
