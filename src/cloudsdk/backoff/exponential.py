r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from cloudsdk.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (multiplier ** attempt), with optional
    max_delay cap. The delays are non-decreasing.

    The retry executor uses the default doubling multiplier, the waiter uses
    the multiplier of its ``WaitPolicy``.

    Args:
        base_delay: The delay of the first step (default: 0.1).
        multiplier: The growth factor between two steps (default: 2.0).
            Must be >= 1.
        max_delay: Optional maximum delay cap in seconds. If specified,
            delays will not exceed this value.

    Example:
        ```pycon
        >>> from cloudsdk.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.1)
        >>> backoff.calculate(0)
        0.1
        >>> backoff.calculate(1)
        0.2
        >>> backoff.calculate(2)
        0.4
        >>> # Polling interval growing by 50% and capped at 30s
        >>> backoff = ExponentialBackoff(base_delay=2.0, multiplier=1.5, max_delay=30.0)
        >>> backoff.calculate(1)
        3.0
        >>> backoff.calculate(20)
        30.0

        ```
    """

    def __init__(
        self, base_delay: float = 0.1, multiplier: float = 2.0, max_delay: float | None = None
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if multiplier < 1:
            msg = f"multiplier must be >= 1, got {multiplier}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.multiplier = multiplier
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(base_delay={self.base_delay}, "
            f"multiplier={self.multiplier}, max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The step number (0-indexed). Negative values are
                treated as 0.

        Returns:
            The calculated delay: base_delay * (multiplier ** attempt),
            capped at max_delay if set.
        """
        attempt = max(attempt, 0)
        try:
            delay = self.base_delay * (self.multiplier**attempt)
        except OverflowError:
            delay = float("inf")
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
