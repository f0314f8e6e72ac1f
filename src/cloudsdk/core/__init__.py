r"""Core shared defaults and validation for the retry and waiter
layers."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_MULTIPLIER",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_JITTER",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_INTERVAL",
    "DEFAULT_MAX_WAIT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_WAIT_INTERVAL",
    "RETRY_METHODS",
    "RETRY_STATUS_CODES",
    "decode_response",
    "request_context",
    "request_timeout",
    "validate_retry_params",
    "validate_timeout",
    "validate_wait_params",
]

from cloudsdk.core.config import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_BASE_DELAY,
    DEFAULT_JITTER,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_INTERVAL,
    DEFAULT_MAX_WAIT,
    DEFAULT_TIMEOUT,
    DEFAULT_WAIT_INTERVAL,
    RETRY_METHODS,
    RETRY_STATUS_CODES,
)
from cloudsdk.core.http_logic import decode_response, request_context, request_timeout
from cloudsdk.core.validation import validate_retry_params, validate_timeout, validate_wait_params
