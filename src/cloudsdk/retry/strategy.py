r"""Retry strategy for calculating backoff delays.

This module provides the RetryStrategy class for calculating jittered
exponential delays between attempts.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

import logging
import random

from cloudsdk.backoff.exponential import ExponentialBackoff

logger: logging.Logger = logging.getLogger(__name__)


class RetryStrategy:
    """Strategy for calculating retry delays with backoff and jitter.

    The delay before retry ``n`` (0-indexed) is
    ``min(base_delay * 2 ** n, max_delay) + uniform(0, jitter)``. The
    jittered delay therefore never exceeds ``max_delay`` by more than
    ``jitter``.

    Args:
        base_delay: Delay before the first retry.
        max_delay: Cap of the exponential part of the delay.
        jitter: Upper bound of the random jitter. 0 disables jitter.

    Attributes:
        backoff_strategy: The exponential backoff computing the unjittered
            delay.
        jitter: Upper bound of the random jitter.

    Example:
        ```pycon
        >>> from cloudsdk.retry import RetryStrategy
        >>> strategy = RetryStrategy(base_delay=0.1, max_delay=5.0, jitter=0.0)
        >>> strategy.calculate_delay(0)
        0.1
        >>> strategy.calculate_delay(10)
        5.0

        ```
    """

    def __init__(self, base_delay: float, max_delay: float, jitter: float) -> None:
        self.backoff_strategy = ExponentialBackoff(base_delay=base_delay, max_delay=max_delay)
        self.jitter = jitter

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay before next retry.

        Args:
            attempt: The failed attempt number (0-indexed). For example,
                attempt=0 is the delay before the first retry.

        Returns:
            Sleep time in seconds.
        """
        sleep_time = self.backoff_strategy.calculate(attempt)
        if self.jitter > 0:
            jitter = random.uniform(0, self.jitter)  # noqa: S311
            logger.debug(
                f"Waiting {sleep_time + jitter:.3f}s before retry "
                f"(base={sleep_time:.3f}s, jitter={jitter:.3f}s)"
            )
            return sleep_time + jitter
        logger.debug(f"Waiting {sleep_time:.3f}s before retry")
        return sleep_time
