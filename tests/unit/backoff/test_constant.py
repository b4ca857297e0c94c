r"""Unit tests for ConstantBackoff."""

from __future__ import annotations

import pytest

from httpmanager.backoff import ConstantBackoff

#####################################
#     Tests for ConstantBackoff     #
#####################################


def test_constant_backoff_default() -> None:
    assert ConstantBackoff().calculate(0) == 1.0


@pytest.mark.parametrize("attempt", [0, 1, 5, 100])
def test_constant_backoff_same_delay(attempt: int) -> None:
    assert ConstantBackoff(delay=0.25).calculate(attempt) == 0.25


def test_constant_backoff_zero_delay() -> None:
    assert ConstantBackoff(delay=0.0).calculate(3) == 0.0


def test_constant_backoff_negative_delay() -> None:
    with pytest.raises(ValueError, match="delay must be non-negative, got -1"):
        ConstantBackoff(delay=-1)


def test_constant_backoff_repr() -> None:
    assert repr(ConstantBackoff(delay=0.5)) == "ConstantBackoff(max_delay=None, delay=0.5)"
