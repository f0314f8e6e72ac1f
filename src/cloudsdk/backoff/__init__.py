r"""Backoff strategies for retry and polling delays.

This package provides the strategies used to space out retry attempts
and waiter polls: exponential (optionally capped) and constant.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
]

from cloudsdk.backoff.base import BaseBackoffStrategy
from cloudsdk.backoff.constant import ConstantBackoff
from cloudsdk.backoff.exponential import ExponentialBackoff
