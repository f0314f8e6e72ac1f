r"""Failure classification into ``StructuredError`` instances.

This module converts every raw failure (transport exception, context
expiry, error response, undecodable body) into exactly one
``StructuredError``. Classification happens once, at the boundary where
the raw failure first appears; an already classified error is returned
unchanged.
"""

from __future__ import annotations

__all__ = [
    "classify_exception",
    "classify_response",
    "deserialization_error",
    "parse_error_body",
]

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from cloudsdk.context import ContextCanceledError, ContextDeadlineExceededError, ContextError
from cloudsdk.exceptions import ErrorKind, StructuredError

if TYPE_CHECKING:
    from cloudsdk.context import Context

logger: logging.Logger = logging.getLogger(__name__)


def classify_exception(exc: BaseException, ctx: Context | None = None) -> StructuredError:
    """Classify a raised exception.

    The rules are applied in order:

    1. A ``StructuredError`` is returned unchanged.
    2. A context error maps to ``canceled`` (caller cancellation) or
       ``timeout`` (expired deadline).
    3. When ``ctx`` is finished, a transport failure is attributed to the
       context: it was most likely interrupted by it.
    4. ``httpx.TimeoutException`` maps to ``timeout``.
    5. Decoding failures map to ``deserialization``.
    6. Any other ``httpx.RequestError`` maps to ``network``.
    7. Anything else is a client-side failure reported as ``network``
       with status 0.

    Args:
        exc: The exception to classify.
        ctx: Optional context the failing operation ran under.

    Returns:
        The classified error. Its ``cause`` is ``exc``.

    Example:
        ```pycon
        >>> import httpx
        >>> from cloudsdk.classifier import classify_exception
        >>> err = classify_exception(httpx.ConnectError("connection refused"))
        >>> err.error_kind.value, err.status_code
        ('network', 0)
        >>> classify_exception(err) is err
        True

        ```
    """
    if isinstance(exc, StructuredError):
        return exc
    if isinstance(exc, ContextError):
        return _from_context_error(exc, cause=exc)
    if ctx is not None and isinstance(exc, httpx.TransportError):
        ctx_err = ctx.err
        if ctx_err is not None:
            return _from_context_error(ctx_err, cause=exc)
    if isinstance(exc, httpx.TimeoutException):
        return StructuredError(
            status_code=0,
            error_kind=ErrorKind.TIMEOUT,
            message="request timeout",
            metadata=_metadata("timeout", exc),
            cause=exc,
        )
    if isinstance(exc, (httpx.DecodingError, json.JSONDecodeError)):
        return deserialization_error(0, exc)
    if isinstance(exc, httpx.RequestError):
        return StructuredError(
            status_code=0,
            error_kind=ErrorKind.NETWORK,
            message=f"network error: {exc}",
            metadata=_metadata("network", exc),
            cause=exc,
        )
    logger.debug(f"Classifying unexpected {type(exc).__name__} as a client-side failure")
    return StructuredError(
        status_code=0,
        error_kind=ErrorKind.NETWORK,
        message=f"client error: {exc}",
        metadata=_metadata("client", exc),
        cause=exc,
    )


def classify_response(response: httpx.Response) -> StructuredError | None:
    """Classify an HTTP response.

    Args:
        response: The received response. Its body must already be read.

    Returns:
        ``None`` for a status code below 400, otherwise the
        ``http_status`` error built from the response body.
    """
    if response.status_code < 400:
        return None
    return parse_error_body(response.status_code, response.text)


def parse_error_body(status_code: int, body: str | bytes) -> StructuredError:
    """Build an ``http_status`` error from an error response body.

    The API reports errors as a JSON object with the optional fields
    ``errorCode`` (integer), ``message`` (string) and ``meta`` (object).
    When the body does not have this shape, the error only carries the
    status code and the raw body under ``metadata["raw"]``.

    Args:
        status_code: The HTTP status code of the response.
        body: The raw response body.

    Returns:
        The classified error.

    Example:
        ```pycon
        >>> from cloudsdk.classifier import parse_error_body
        >>> err = parse_error_body(404, '{"errorCode": 1001, "message": "server not found"}')
        >>> str(err)
        'HTTP 404 (code 1001): server not found'
        >>> err = parse_error_body(502, "<html>Bad Gateway</html>")
        >>> err.message, err.metadata["raw"]
        ('HTTP 502', '<html>Bad Gateway</html>')

        ```
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    parsed = _parse_error_payload(body)
    if parsed is None:
        return StructuredError(
            status_code=status_code,
            error_kind=ErrorKind.HTTP_STATUS,
            message=f"HTTP {status_code}",
            metadata={"raw": body},
        )
    error_code, message, meta = parsed
    return StructuredError(
        status_code=status_code,
        error_kind=ErrorKind.HTTP_STATUS,
        message=message or f"HTTP {status_code}",
        error_code=error_code,
        metadata=meta,
    )


def deserialization_error(status_code: int, exc: BaseException) -> StructuredError:
    """Build a ``deserialization`` error for a body that could not be
    decoded.

    Args:
        status_code: The HTTP status code of the response, 0 if unknown.
        exc: The decoding exception.

    Returns:
        The classified error.
    """
    return StructuredError(
        status_code=status_code,
        error_kind=ErrorKind.DESERIALIZATION,
        message=f"failed to parse response: {exc}",
        metadata=_metadata("deserialization", exc),
        cause=exc,
    )


def _from_context_error(err: ContextError, cause: BaseException) -> StructuredError:
    if isinstance(err, ContextDeadlineExceededError):
        return StructuredError(
            status_code=0,
            error_kind=ErrorKind.TIMEOUT,
            message="request timeout",
            metadata=_metadata("timeout", cause),
            cause=cause,
        )
    if not isinstance(err, ContextCanceledError):  # pragma: no cover
        logger.debug(f"Unknown context error {type(err).__name__}, treating it as a cancellation")
    return StructuredError(
        status_code=0,
        error_kind=ErrorKind.CANCELED,
        message="request canceled",
        metadata=_metadata("canceled", cause),
        cause=cause,
    )


def _metadata(category: str, exc: BaseException) -> dict[str, Any]:
    return {"category": category, "cause_type": type(exc).__name__}


def _parse_error_payload(body: str) -> tuple[int, str, dict[str, Any]] | None:
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error_code = payload.get("errorCode", 0)
    message = payload.get("message", "")
    meta = payload.get("meta")
    if isinstance(error_code, bool) or not isinstance(error_code, int):
        return None
    if not isinstance(message, str):
        return None
    if meta is None:
        meta = {}
    elif not isinstance(meta, dict):
        return None
    return error_code, message, meta
