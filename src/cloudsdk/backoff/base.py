r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy maps a 0-indexed step number to a delay. The retry
    executor uses it between attempts and the waiter between polls.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the delay before the next step.

        Args:
            attempt: The step number (0-indexed). For example, attempt=0 is
                the delay before the first retry or the second poll.

        Returns:
            The calculated delay in seconds.
        """
