r"""Default values of the retry and waiter policies.

These defaults reproduce the behavior of the cloud API clients: GET and
HEAD requests are retried up to three attempts on throttling and gateway
errors, and waiters poll every two seconds for at most five minutes.
"""

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
]

# Default timeout in seconds applied to a request when the caller context
# has no deadline
DEFAULT_TIMEOUT = 30.0

# Default maximum number of attempts, including the initial one
DEFAULT_MAX_ATTEMPTS = 3

# Default exponential backoff between attempts
# Delay = min(base_delay * (2 ** retry), max_delay) + uniform(0, jitter)
# The first retry waits between 100ms and 200ms
DEFAULT_BASE_DELAY = 0.1
DEFAULT_MAX_DELAY = 5.0
DEFAULT_JITTER = 0.1

# HTTP status codes that should trigger automatic retry
# 429: Too Many Requests - Rate limiting
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 502, 503, 504)

# Only idempotent methods are retried: repeating a side-effecting call
# could apply it twice
RETRY_METHODS = ("GET", "HEAD")

# Default waiter polling: every 2s for at most 5 minutes, no backoff
DEFAULT_WAIT_INTERVAL = 2.0
DEFAULT_MAX_WAIT = 300.0
DEFAULT_BACKOFF_MULTIPLIER = 1.0
# Interval cap applied when the backoff multiplier is > 1
DEFAULT_MAX_INTERVAL = 30.0
