r"""Generic state-polling framework.

Public API:
    - WaitPolicy: Immutable polling configuration
    - Waiter / wait: Synchronous waiter
    - AsyncWaiter / wait_async: Asynchronous waiter
"""

from __future__ import annotations

__all__ = ["AsyncWaiter", "WaitPolicy", "Waiter", "wait", "wait_async"]

from cloudsdk.waiter.config import WaitPolicy
from cloudsdk.waiter.waiter import Waiter, wait
from cloudsdk.waiter.waiter_async import AsyncWaiter, wait_async
