r"""Shared logic of the synchronous and asynchronous HTTP clients.

This module turns a received ``httpx.Response`` into either the decoded
JSON body or a classified error, and derives the context bounding one
logical request.
"""

from __future__ import annotations

__all__ = ["decode_response", "request_context", "request_timeout"]

import logging
from typing import TYPE_CHECKING, Any

from cloudsdk.classifier import classify_response, deserialization_error
from cloudsdk.context import with_cancel, with_timeout

if TYPE_CHECKING:
    import httpx

    from cloudsdk.context import Context

logger: logging.Logger = logging.getLogger(__name__)


def decode_response(response: httpx.Response) -> Any:
    """Decode a received response.

    Args:
        response: The response, with its body already read.

    Returns:
        The decoded JSON body, or ``None`` for an empty body.

    Raises:
        StructuredError: An ``http_status`` error for a status >= 400, or
            a ``deserialization`` error when the body is not valid JSON.
    """
    error = classify_response(response)
    if error is not None:
        raise error
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        logger.debug(f"Could not decode the {response.status_code} response body: {exc}")
        raise deserialization_error(response.status_code, exc) from exc


def request_context(ctx: Context, timeout: float) -> Context:
    """Derive the context bounding one logical request, retries
    included.

    Args:
        ctx: The caller context.
        timeout: Default timeout in seconds, applied when the caller
            context has no deadline.

    Returns:
        A derived context, to be released when the request completes.
    """
    if ctx.deadline is None:
        return with_timeout(ctx, timeout)
    return with_cancel(ctx)


def request_timeout(ctx: Context) -> float | None:
    """Return the httpx timeout of the next attempt.

    Args:
        ctx: The context bounding the request.

    Returns:
        The time left before the context deadline, so that an attempt
        never outlives the logical request. ``None`` (no timeout) when
        the context has no deadline.
    """
    return ctx.remaining()
