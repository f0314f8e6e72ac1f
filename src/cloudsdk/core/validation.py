r"""Parameter validation utilities for the retry and waiter policies.

This module provides validation functions to ensure policy parameters
meet the required constraints before an operation starts.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout", "validate_wait_params"]


def validate_timeout(timeout: float) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from cloudsdk.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_attempts: int,
    base_delay: float = 0.0,
    max_delay: float = 1.0,
    jitter: float = 0.0,
) -> None:
    """Validate retry parameters.

    Args:
        max_attempts: Maximum number of attempts, including the initial
            one. Must be >= 1. A value of 1 disables retries.
        base_delay: Delay before the first retry. Must be >= 0.
        max_delay: Maximum backoff delay cap in seconds. Must be > 0.
        jitter: Upper bound of the random jitter added to each delay.
            Must be >= 0.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from cloudsdk.core import validate_retry_params
        >>> validate_retry_params(max_attempts=3)
        >>> validate_retry_params(max_attempts=3, base_delay=0.1, max_delay=5.0, jitter=0.1)
        >>> validate_retry_params(max_attempts=0)  # doctest: +SKIP

        ```
    """
    if max_attempts < 1:
        msg = f"max_attempts must be >= 1, got {max_attempts}"
        raise ValueError(msg)
    if base_delay < 0:
        msg = f"base_delay must be >= 0, got {base_delay}"
        raise ValueError(msg)
    if max_delay <= 0:
        msg = f"max_delay must be > 0, got {max_delay}"
        raise ValueError(msg)
    if jitter < 0:
        msg = f"jitter must be >= 0, got {jitter}"
        raise ValueError(msg)


def validate_wait_params(
    interval: float,
    max_wait: float,
    backoff_multiplier: float = 1.0,
    max_interval: float | None = None,
) -> None:
    """Validate waiter parameters.

    Args:
        interval: Initial delay between two polls. Must be > 0.
        max_wait: Maximum total wait duration. Must be > 0.
        backoff_multiplier: Growth factor of the interval after each
            unsuccessful poll. Must be >= 1; 1 disables backoff.
        max_interval: Optional interval cap. Must be > 0 if provided.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from cloudsdk.core import validate_wait_params
        >>> validate_wait_params(interval=2.0, max_wait=300.0)
        >>> validate_wait_params(interval=2.0, max_wait=300.0, backoff_multiplier=1.5, max_interval=30.0)

        ```
    """
    if interval <= 0:
        msg = f"interval must be > 0, got {interval}"
        raise ValueError(msg)
    if max_wait <= 0:
        msg = f"max_wait must be > 0, got {max_wait}"
        raise ValueError(msg)
    if backoff_multiplier < 1:
        msg = f"backoff_multiplier must be >= 1, got {backoff_multiplier}"
        raise ValueError(msg)
    if max_interval is not None and max_interval <= 0:
        msg = f"max_interval must be > 0, got {max_interval}"
        raise ValueError(msg)
