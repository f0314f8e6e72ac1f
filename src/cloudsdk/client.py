r"""Synchronous context manager client for the cloud API.

This module provides the adapter between ``httpx`` and the retry layer:
each logical request is executed through a ``RetryExecutor``, every
attempt is bounded by the request context, and every failure is raised
as a ``StructuredError``.
"""

from __future__ import annotations

__all__ = ["CloudClient"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from cloudsdk.context import background
from cloudsdk.core.config import DEFAULT_TIMEOUT
from cloudsdk.core.http_logic import decode_response, request_context, request_timeout
from cloudsdk.core.validation import validate_timeout
from cloudsdk.retry import RetryExecutor, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from cloudsdk.callbacks import FailureInfo, RetryInfo
    from cloudsdk.context import Context

logger: logging.Logger = logging.getLogger(__name__)


class CloudClient:
    r"""Synchronous client sending requests with automatic retry logic.

    The underlying ``httpx.Client`` carries everything that is not the
    concern of this client: base URL, authentication headers, proxies,
    transport. A client passed by the caller stays under the caller's
    control; a client created by ``CloudClient`` is closed when the
    ``with`` block exits.

    Args:
        client: Optional ``httpx.Client``. If ``None``, a new client is
            created.
        policy: Optional retry policy shared by all the requests.
        timeout: Timeout in seconds of one logical request, retries
            included, applied when the caller context has no deadline.
        on_retry: Optional callback invoked before each retry.
        on_failure: Optional callback invoked when a request fails.

    Example:
        ```pycon
        >>> import httpx
        >>> from cloudsdk import CloudClient
        >>> from cloudsdk.retry import RetryPolicy
        >>> http_client = httpx.Client(
        ...     base_url="https://api.example.com", headers={"Authorization": "Bearer token"}
        ... )
        >>> with CloudClient(http_client, policy=RetryPolicy(max_attempts=5)) as client:  # doctest: +SKIP
        ...     server = client.get("/vps/api/v1/project/p-1/servers/svr-1")
        ...

        ```
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        on_retry: Callable[[RetryInfo], None] | None = None,
        on_failure: Callable[[FailureInfo], None] | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._client: httpx.Client = client or httpx.Client()
        self._owns_client = client is None
        self._policy: RetryPolicy = policy or RetryPolicy()
        self._timeout = timeout
        self._on_retry = on_retry
        self._on_failure = on_failure

    def __repr__(self) -> str:
        return f"{type(self).__name__}(policy={self._policy}, timeout={self._timeout})"

    def __enter__(self) -> Self:
        """Enter the context manager.

        Returns:
            The CloudClient instance for making requests.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager and close the underlying httpx
        client if this client created it."""
        if self._owns_client:
            self._client.close()

    @property
    def policy(self) -> RetryPolicy:
        r"""The retry policy shared by all the requests."""
        return self._policy

    def request(
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
                ``httpx.Client.request()`` (``json``, ``params``, ...).

        Returns:
            The decoded JSON body, or ``None`` for an empty body.

        Raises:
            StructuredError: If the request failed.
        """
        method = method.upper()
        executor = RetryExecutor(
            policy or self._policy, on_retry=self._on_retry, on_failure=self._on_failure
        )
        ctx = ctx if ctx is not None else background()
        with request_context(ctx, self._timeout) as request_ctx:

            def attempt() -> Any:
                response = self._client.request(
                    method, url, timeout=request_timeout(request_ctx), **kwargs
                )
                logger.debug(f"{method} {url} returned {response.status_code}")
                return decode_response(response)

            return executor.execute(attempt, method=method, ctx=request_ctx)

    def get(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP GET request with automatic retry logic.

        GET requests are retried on throttling and gateway errors.

        Args:
            url: The URL to send the GET request to.
            **kwargs: Additional keyword arguments (see request() method).

        Returns:
            The decoded JSON body.
        """
        return self.request("GET", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP HEAD request with automatic retry logic."""
        return self.request("HEAD", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP POST request.

        POST requests are not idempotent and therefore never retried with
        the default policy.

        Args:
            url: The URL to send the POST request to.
            **kwargs: Additional keyword arguments (see request() method).

        Returns:
            The decoded JSON body.
        """
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP PUT request."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP PATCH request."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Any:
        r"""Send an HTTP DELETE request."""
        return self.request("DELETE", url, **kwargs)
