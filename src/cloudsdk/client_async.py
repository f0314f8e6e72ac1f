r"""Asynchronous context manager client for the cloud API.

This module provides the asyncio twin of ``CloudClient``: each logical
request is executed through an ``AsyncRetryExecutor`` on top of an
``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["AsyncCloudClient"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from cloudsdk.context import background
from cloudsdk.core.config import DEFAULT_TIMEOUT
from cloudsdk.core.http_logic import decode_response, request_context, request_timeout
from cloudsdk.core.validation import validate_timeout
from cloudsdk.retry import AsyncRetryExecutor, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from cloudsdk.callbacks import FailureInfo, RetryInfo
    from cloudsdk.context import Context

logger: logging.Logger = logging.getLogger(__name__)


class AsyncCloudClient:
    r"""Asynchronous client sending requests with automatic retry logic.

    When no ``httpx.AsyncClient`` is given, one is created when entering
    the ``async with`` block and closed when leaving it, and the client
    cannot be used outside of the block. A client passed by the caller
    stays under the caller's control.

    Args:
        client: Optional ``httpx.AsyncClient``.
        policy: Optional retry policy shared by all the requests.
        timeout: Timeout in seconds of one logical request, retries
            included, applied when the caller context has no deadline.
        on_retry: Optional callback invoked before each retry.
        on_failure: Optional callback invoked when a request fails.

    Example:
        ```pycon
        >>> import asyncio
        >>> from cloudsdk import AsyncCloudClient
        >>> async def main():  # doctest: +SKIP
        ...     async with AsyncCloudClient(timeout=10.0) as client:
        ...         return await client.get("https://api.example.com/servers")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_failure: Callable[[FailureInfo], None] | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._client: httpx.AsyncClient | None = client
        self._owns_client = client is None
        self._policy: RetryPolicy = policy or RetryPolicy()
        self._timeout = timeout
        self._on_retry = on_retry
        self._on_failure = on_failure

    def __repr__(self) -> str:
        return f"{type(self).__name__}(policy={self._policy}, timeout={self._timeout})"

    async def __aenter__(self) -> Self:
        """Enter the async context manager and create the underlying
        httpx client if none was given.

        Returns:
            The AsyncCloudClient instance for making requests.
        """
        if self._owns_client:
            self._client = httpx.AsyncClient()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the async context manager and close the underlying httpx
        client if this client created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def policy(self) -> RetryPolicy:
        r"""The retry policy shared by all the requests."""
        return self._policy

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the underlying client.

        Raises:
            RuntimeError: If the client was not given and is used outside
                of an ``async with`` block.
        """
        if self._client is None:
            msg = "AsyncCloudClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    async def request(
        self,
        method: str,
        url: str,
        *,
        ctx: Context | None = None,
        policy: RetryPolicy | None = None,
        **kwargs: Any,
    ) -> Any:
        r"""Send an HTTP request with automatic retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH, HEAD).
            url: The URL, relative to the client base URL if any.
            ctx: Optional caller context bounding the request.
            policy: Optional retry policy overriding the client one for
                this request.
            **kwargs: Additional keyword arguments passed to
                ``httpx.AsyncClient.request()``.

        Returns:
            The decoded JSON body, or ``None`` for an empty body.

        Raises:
            RuntimeError: If called outside of the ``async with`` block.
            StructuredError: If the request failed.
        """
        client = self._ensure_client()
        method = method.upper()
        executor = AsyncRetryExecutor(
            policy or self._policy, on_retry=self._on_retry, on_failure=self._on_failure
        )
        ctx = ctx if ctx is not None else background()
        with request_context(ctx, self._timeout) as request_ctx:

            async def attempt() -> Any:
                response = await client.request(
                    method, url, timeout=request_timeout(request_ctx), **kwargs
                )
                await response.aread()
                logger.debug(f"{method} {url} returned {response.status_code}")
                return decode_response(response)

            return await executor.execute(attempt, method=method, ctx=request_ctx)

    async def get(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP GET request with automatic retry logic.

        Args:
            url: The URL to send the GET request to.
            **kwargs: Additional keyword arguments (see request() method).

        Returns:
            The decoded JSON body.
        """
        return await self.request("GET", url, **kwargs)

    async def head(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP HEAD request with automatic retry logic."""
        return await self.request("HEAD", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP POST request, never retried with the default
        policy."""
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP PUT request."""
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP PATCH request."""
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP DELETE request."""
        return await self.request("DELETE", url, **kwargs)
