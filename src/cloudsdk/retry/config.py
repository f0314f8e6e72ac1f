r"""Configuration dataclass for retry behavior.

This module provides the immutable ``RetryPolicy`` consumed by the retry
executors.
"""

from __future__ import annotations

__all__ = ["RetryPolicy"]

from dataclasses import dataclass, field, replace
from typing import Any

from cloudsdk.core.config import (
    DEFAULT_BASE_DELAY,
    DEFAULT_JITTER,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    RETRY_METHODS,
    RETRY_STATUS_CODES,
)
from cloudsdk.core.validation import validate_retry_params


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior.

    A policy is built once from the defaults and optionally overridden per
    call site with ``merge``. It is never mutated.

    Args:
        max_attempts: Maximum number of attempts, including the initial
            one. Must be >= 1.
        base_delay: Delay before the first retry, doubled for every
            further retry. Must be >= 0.
        max_delay: Cap of the exponential delay. Must be > 0.
        jitter: Upper bound of the uniform random jitter added to each
            capped delay. Must be >= 0.
        retry_methods: HTTP methods eligible for retry. Only idempotent
            methods should be listed. Compared case-insensitively. A
            single method may be given as a string.
        retry_status_codes: HTTP status codes that trigger a retry. A
            single status code may be given as an int.

    Example:
        ```pycon
        >>> from cloudsdk.retry import RetryPolicy
        >>> policy = RetryPolicy()
        >>> policy.max_attempts
        3
        >>> policy.retry_status_codes
        (429, 502, 503, 504)
        >>> merged = policy.merge(max_attempts=5)
        >>> merged.max_attempts, policy.max_attempts
        (5, 3)

        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    jitter: float = DEFAULT_JITTER
    retry_methods: tuple[str, ...] = field(default_factory=lambda: RETRY_METHODS)
    retry_status_codes: tuple[int, ...] = field(default_factory=lambda: RETRY_STATUS_CODES)

    def __post_init__(self) -> None:
        """Validate and normalize configuration parameters.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_retry_params(
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            jitter=self.jitter,
        )
        methods = self.retry_methods
        if isinstance(methods, str):
            methods = (methods,)
        object.__setattr__(self, "retry_methods", tuple(method.upper() for method in methods))
        status_codes = self.retry_status_codes
        if isinstance(status_codes, int):
            status_codes = (status_codes,)
        object.__setattr__(self, "retry_status_codes", tuple(status_codes))

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new RetryPolicy instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def is_retryable_method(self, method: str) -> bool:
        r"""Indicate if ``method`` may be retried under this policy."""
        return method.upper() in self.retry_methods
