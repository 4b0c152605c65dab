"""
Unit tests for the capacity guard.
"""

import pytest

from curtail_platform.errors import CapacityExceeded
from curtail_platform.manager.capacity import (
    CAPACITY_THRESHOLD,
    NAMESPACE_BITS,
    check_capacity,
    collision_probability,
)


def test_defaults():
    assert NAMESPACE_BITS == 16
    assert CAPACITY_THRESHOLD == 65


@pytest.mark.parametrize("count", [0, 1, 30, 64])
def test_below_threshold_allowed(count):
    assert check_capacity(count) is None


@pytest.mark.parametrize("count", [65, 66, 1000])
def test_at_or_above_threshold_refused(count):
    with pytest.raises(CapacityExceeded):
        check_capacity(count)


def test_custom_threshold():
    check_capacity(9, threshold=10)
    with pytest.raises(CapacityExceeded):
        check_capacity(10, threshold=10)


def test_refusal_logged_as_known_limitation(caplog):
    with caplog.at_level("WARNING", logger="curtail.manager"):
        with pytest.raises(CapacityExceeded):
            check_capacity(65)
    assert "widening is not implemented" in caplog.text


def test_collision_probability_matches_birthday_bound():
    assert collision_probability(0) == 0.0
    assert collision_probability(1) == 0.0
    assert collision_probability(65) == pytest.approx(0.0312, abs=1e-3)
    assert collision_probability(2) == pytest.approx(1.5259e-5, rel=1e-3)
    assert collision_probability(301) == pytest.approx(0.5, abs=0.01)
    assert collision_probability(4822, bits=24) == pytest.approx(0.5, abs=0.01)
