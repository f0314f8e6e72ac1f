r"""Configuration dataclass for waiter behavior."""

from __future__ import annotations

__all__ = ["WaitPolicy"]

from dataclasses import dataclass, replace
from typing import Any

from cloudsdk.backoff import BaseBackoffStrategy, ConstantBackoff, ExponentialBackoff
from cloudsdk.core.config import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_MAX_INTERVAL,
    DEFAULT_MAX_WAIT,
    DEFAULT_WAIT_INTERVAL,
)
from cloudsdk.core.validation import validate_wait_params


@dataclass(frozen=True)
class WaitPolicy:
    """Configuration for waiter polling.

    Args:
        interval: Delay between the first and the second poll, in seconds.
            Must be > 0.
        max_wait: Maximum total wait duration in seconds, only applied when
            the caller context has no deadline. Must be > 0.
        backoff_multiplier: Factor applied to the interval after each
            unsuccessful poll. 1 disables backoff. Must be >= 1.
        max_interval: Cap of the interval when backoff is enabled. ``None``
            means no cap.

    Example:
        ```pycon
        >>> from cloudsdk.waiter import WaitPolicy
        >>> policy = WaitPolicy()
        >>> policy.interval, policy.max_wait
        (2.0, 300.0)
        >>> policy = policy.with_backoff(1.5, max_interval=30.0)
        >>> [policy.interval_for(n) for n in range(3)]
        [2.0, 3.0, 4.5]

        ```
    """

    interval: float = DEFAULT_WAIT_INTERVAL
    max_wait: float = DEFAULT_MAX_WAIT
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    max_interval: float | None = DEFAULT_MAX_INTERVAL

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_wait_params(
            interval=self.interval,
            max_wait=self.max_wait,
            backoff_multiplier=self.backoff_multiplier,
            max_interval=self.max_interval,
        )

    def merge(self, **overrides: Any) -> WaitPolicy:
        """Create a new policy with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new WaitPolicy instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def with_backoff(self, multiplier: float, max_interval: float | None = None) -> WaitPolicy:
        """Create a new policy with interval backoff enabled.

        Args:
            multiplier: Factor applied to the interval after each
                unsuccessful poll (e.g. 1.5 for a 50% increase).
            max_interval: Optional interval cap. The current cap is kept
                when ``None``.

        Returns:
            A new WaitPolicy instance.
        """
        return self.merge(backoff_multiplier=multiplier, max_interval=max_interval)

    def backoff_strategy(self) -> BaseBackoffStrategy:
        r"""Return the polling schedule of this policy."""
        if self.backoff_multiplier > 1.0:
            return ExponentialBackoff(
                base_delay=self.interval,
                multiplier=self.backoff_multiplier,
                max_delay=self.max_interval,
            )
        return ConstantBackoff(self.interval)

    def interval_for(self, poll: int) -> float:
        """Return the sleep duration after the given unsuccessful poll.

        Args:
            poll: The poll number (0-indexed).

        Returns:
            ``min(interval * backoff_multiplier ** poll, max_interval)``
            when backoff is enabled, ``interval`` otherwise.
        """
        return self.backoff_strategy().calculate(poll)
