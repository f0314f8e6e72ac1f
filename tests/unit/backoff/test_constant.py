r"""Unit tests for ConstantBackoff strategy."""

from __future__ import annotations

import pytest

from cloudsdk.backoff.constant import ConstantBackoff


def test_constant_backoff_basic() -> None:
    """Test that the delay is the same for every step."""
    backoff = ConstantBackoff(delay=2.0)
    assert backoff.calculate(0) == 2.0
    assert backoff.calculate(1) == 2.0
    assert backoff.calculate(100) == 2.0


def test_constant_backoff_default_value() -> None:
    """Test constant backoff with default value."""
    assert ConstantBackoff().delay == 1.0


def test_constant_backoff_zero() -> None:
    """Test that a zero delay is accepted."""
    assert ConstantBackoff(delay=0.0).calculate(3) == 0.0


def test_constant_backoff_invalid_delay() -> None:
    """Test that negative delay raises ValueError."""
    with pytest.raises(ValueError, match=r"delay must be non-negative"):
        ConstantBackoff(delay=-1.0)


def test_constant_backoff_repr() -> None:
    """Test the repr of ConstantBackoff."""
    assert repr(ConstantBackoff(delay=2.0)) == "ConstantBackoff(delay=2.0)"
