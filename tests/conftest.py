from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from cloudsdk.retry import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Create a retry policy with tiny delays and no jitter."""
    return RetryPolicy(base_delay=0.001, max_delay=0.01, jitter=0.0)


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch Context.sleep to make tests run faster."""
    with patch("cloudsdk.context.Context.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def replay() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Create a factory of transports replaying ``(status, body)`` pairs.

    The last pair is repeated once the list is exhausted. The received
    requests are recorded in the returned list.
    """

    def factory(
        *responses: tuple[int, str],
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            status_code, body = responses[min(len(requests), len(responses)) - 1]
            return httpx.Response(status_code, text=body)

        return httpx.MockTransport(handler), requests

    return factory
