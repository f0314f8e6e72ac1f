r"""cloudsdk - Resilience core of a cloud API client.

This package provides the three pieces every call to the cloud API goes
through. Built on top of the httpx library, it turns transport and HTTP
failures into structured errors, retries transient failures of idempotent
requests, and polls asynchronous operations until they complete.

Key Features:
    - ``StructuredError`` with a closed set of error kinds (network,
      timeout, canceled, httpStatus, deserialization)
    - Retry of GET/HEAD requests on 429, 502, 503 and 504 with capped
      exponential backoff and jitter
    - Generic waiter with optional multiplicative backoff, telling its own
      timeout apart from the caller deadline or cancellation
    - ``Context`` objects carrying deadlines and cancellation through
      every sleep
    - Synchronous and asynchronous APIs

Example:
    ```pycon
    >>> import httpx
    >>> from cloudsdk import CloudClient, background, with_timeout
    >>> http_client = httpx.Client(base_url="https://api.example.com")
    >>> with CloudClient(http_client) as client:  # doctest: +SKIP
    ...     with with_timeout(background(), 10.0) as ctx:
    ...         servers = client.get("/vps/api/v1/project/p-1/servers", ctx=ctx)
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncCloudClient",
    "AsyncRetryExecutor",
    "AsyncWaiter",
    "CloudClient",
    "Context",
    "ErrorKind",
    "RetryExecutor",
    "RetryPolicy",
    "StructuredError",
    "UnexpectedStateError",
    "WaitPolicy",
    "WaitTimeoutError",
    "Waiter",
    "__version__",
    "background",
    "classify_exception",
    "classify_response",
    "retry_execute",
    "retry_execute_async",
    "wait",
    "wait_async",
    "wait_for_deletion",
    "wait_for_deletion_async",
    "wait_for_state",
    "wait_for_state_async",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]

from importlib.metadata import PackageNotFoundError, version

from cloudsdk.classifier import classify_exception, classify_response
from cloudsdk.client import CloudClient
from cloudsdk.client_async import AsyncCloudClient
from cloudsdk.context import Context, background, with_cancel, with_deadline, with_timeout
from cloudsdk.exceptions import ErrorKind, StructuredError, WaitTimeoutError
from cloudsdk.retry import (
    AsyncRetryExecutor,
    RetryExecutor,
    RetryPolicy,
    retry_execute,
    retry_execute_async,
)
from cloudsdk.waiter import AsyncWaiter, Waiter, WaitPolicy, wait, wait_async
from cloudsdk.waiters import (
    UnexpectedStateError,
    wait_for_deletion,
    wait_for_deletion_async,
    wait_for_state,
    wait_for_state_async,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
