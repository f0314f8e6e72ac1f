r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from cloudsdk.backoff.base import BaseBackoffStrategy


class ConstantBackoff(BaseBackoffStrategy):
    """Constant/fixed backoff strategy.

    Returns the same delay for every step. This is the polling schedule of
    a waiter without backoff.

    Args:
        delay: The fixed delay in seconds (default: 1.0).

    Example:
        ```pycon
        >>> from cloudsdk.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=2.0)
        >>> backoff.calculate(0)
        2.0
        >>> backoff.calculate(10)
        2.0

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)

        self.delay = delay

    def __repr__(self) -> str:
        return f"{type(self).__name__}(delay={self.delay})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        """Calculate constant backoff delay.

        Args:
            attempt: The step number (0-indexed, unused).

        Returns:
            The fixed delay value.
        """
        return self.delay
