r"""Structured error taxonomy shared by the retry and waiter layers.

Every failure that leaves the core is a ``StructuredError`` carrying one
``ErrorKind``. Callers branch on ``error_kind`` and ``status_code``,
never on the message text.

Example:
    ```pycon
    >>> from cloudsdk.exceptions import ErrorKind, StructuredError
    >>> err = StructuredError(
    ...     status_code=503, error_kind=ErrorKind.HTTP_STATUS, message="unavailable"
    ... )
    >>> str(err)
    'HTTP 503: unavailable'
    >>> err == StructuredError(status_code=503, error_kind=ErrorKind.HTTP_STATUS, message="other")
    True

    ```
"""

from __future__ import annotations

__all__ = ["ErrorKind", "StructuredError", "WaitTimeoutError"]

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class ErrorKind(str, Enum):
    """Closed set of failure categories.

    Attributes:
        NETWORK: No HTTP response was received (DNS, connection reset, ...).
        TIMEOUT: A deadline expired.
        CANCELED: The caller canceled the operation.
        HTTP_STATUS: An HTTP response with status >= 400 was received.
        DESERIALIZATION: A response body could not be decoded.
    """

    NETWORK = "network"
    TIMEOUT = "timeout"
    CANCELED = "canceled"
    HTTP_STATUS = "httpStatus"
    DESERIALIZATION = "deserialization"


class StructuredError(Exception):
    """Immutable, classified failure.

    Args:
        status_code: The HTTP status code, or 0 when no response was received.
        error_kind: The failure category.
        message: A human-readable description.
        error_code: The API error code from the response body, 0 if absent.
        metadata: Category-specific details, e.g. ``{"raw": body}``.
        cause: The underlying exception, also exposed as ``__cause__``.

    Equality and hashing only consider ``(status_code, error_kind)``.
    """

    _FIELDS = frozenset({"status_code", "error_kind", "error_code", "message", "metadata"})

    def __init__(
        self,
        *,
        status_code: int,
        error_kind: ErrorKind,
        message: str,
        error_code: int = 0,
        metadata: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        object.__setattr__(self, "status_code", status_code)
        object.__setattr__(self, "error_kind", ErrorKind(error_kind))
        object.__setattr__(self, "error_code", error_code)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "metadata", MappingProxyType(dict(metadata or {})))
        if cause is not None:
            self.__cause__ = cause

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._FIELDS:
            msg = f"{type(self).__name__} is immutable, cannot set {name!r}"
            raise AttributeError(msg)
        # __cause__, __traceback__, ... are still managed by the interpreter
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if name in self._FIELDS:
            msg = f"{type(self).__name__} is immutable, cannot delete {name!r}"
            raise AttributeError(msg)
        super().__delattr__(name)

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild, (type(self), self._kwargs()))

    def __str__(self) -> str:
        if self.status_code == 0:
            return f"{self.error_kind.value} error: {self.message}"
        if self.error_code != 0:
            return f"HTTP {self.status_code} (code {self.error_code}): {self.message}"
        return f"HTTP {self.status_code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"error_kind={self.error_kind.value!r}, error_code={self.error_code}, "
            f"message={self.message!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructuredError):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @property
    def key(self) -> tuple[int, ErrorKind]:
        r"""The ``(status_code, error_kind)`` pair used for branching."""
        return (self.status_code, self.error_kind)

    @property
    def cause(self) -> BaseException | None:
        r"""The wrapped underlying exception, if any."""
        return self.__cause__

    def is_retryable_status(self, status_codes: tuple[int, ...]) -> bool:
        """Indicate if this is an HTTP status error with a status in
        ``status_codes``."""
        return self.error_kind is ErrorKind.HTTP_STATUS and self.status_code in status_codes

    def _kwargs(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "error_kind": self.error_kind,
            "message": self.message,
            "error_code": self.error_code,
            "metadata": dict(self.metadata),
            "cause": self.__cause__,
        }


class WaitTimeoutError(StructuredError):
    """Raised when a waiter's own ``max_wait`` deadline expires.

    A deadline set by the caller never produces this error, which lets
    callers tell a policy timeout apart from their own deadline.

    Args:
        max_wait: The waiter's maximum wait duration in seconds.
        cause: The underlying context error.
    """

    def __init__(self, max_wait: float | None = None, cause: BaseException | None = None) -> None:
        message = "maximum wait duration exceeded"
        if max_wait is not None:
            message = f"{message} ({max_wait:g}s)"
        super().__init__(
            status_code=0,
            error_kind=ErrorKind.TIMEOUT,
            message=message,
            metadata={"category": "timeout", "source": "waiter", "max_wait": max_wait},
            cause=cause,
        )

    def _kwargs(self) -> dict[str, Any]:
        return {"max_wait": self.metadata.get("max_wait"), "cause": self.__cause__}


def _rebuild(cls: type[StructuredError], kwargs: dict[str, Any]) -> StructuredError:
    return cls(**kwargs)
