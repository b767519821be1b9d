"""
Unit tests for linear interpolation and extrapolation
"""

from datetime import datetime

import pytest

from meter_reconstruction.exceptions import DegenerateIntervalError, InvalidOrderError
from meter_reconstruction.interpolation import (
    extrapolate_value,
    interpolate_value,
    interpolation_ratio,
)
from tests.fixtures.mock_data import make_reading


class TestInterpolateValue:
    """Test suite for interpolate_value"""

    @pytest.fixture
    def prev_reading(self):
        return make_reading(datetime(2024, 1, 1), 1000.0)

    @pytest.fixture
    def next_reading(self):
        return make_reading(datetime(2024, 1, 31), 1100.0)

    def test_midpoint(self, prev_reading, next_reading):
        result = interpolate_value(prev_reading, next_reading, datetime(2024, 1, 16))

        assert result == pytest.approx(1050.0)

    def test_quarter_point(self, prev_reading, next_reading):
        """Jan 8 is 7 of 30 days through the interval"""
        result = interpolate_value(prev_reading, next_reading, datetime(2024, 1, 8))

        assert result == pytest.approx(1000.0 + 100.0 * 7 / 30)

    def test_at_previous_timestamp(self, prev_reading, next_reading):
        assert interpolate_value(prev_reading, next_reading, prev_reading.timestamp) == 1000.0

    def test_at_next_timestamp(self, prev_reading, next_reading):
        assert interpolate_value(prev_reading, next_reading, next_reading.timestamp) == 1100.0

    def test_exact_endpoints_with_inexact_floats(self):
        """Endpoints are returned unchanged even when the float sum would round"""
        prev_reading = make_reading(datetime(2024, 1, 1), 0.1)
        next_reading = make_reading(datetime(2024, 1, 2), 0.7)

        assert interpolate_value(prev_reading, next_reading, next_reading.timestamp) == 0.7
        assert interpolate_value(prev_reading, next_reading, prev_reading.timestamp) == 0.1

    def test_invalid_order(self, prev_reading, next_reading):
        with pytest.raises(InvalidOrderError, match="Invalid reading order"):
            interpolate_value(next_reading, prev_reading, datetime(2024, 1, 15))

    def test_same_timestamp(self):
        a = make_reading(datetime(2024, 1, 15), 1000.0)
        b = make_reading(datetime(2024, 1, 15), 1100.0)

        with pytest.raises(DegenerateIntervalError, match="same date"):
            interpolate_value(a, b, datetime(2024, 1, 15))

    def test_errors_are_value_errors(self, prev_reading, next_reading):
        with pytest.raises(ValueError):
            interpolate_value(next_reading, prev_reading, datetime(2024, 1, 15))

    def test_ratio(self, prev_reading, next_reading):
        assert interpolation_ratio(prev_reading, next_reading, datetime(2024, 1, 16)) == 0.5


class TestExtrapolateValue:
    """Test suite for extrapolate_value"""

    def test_forward(self):
        """100 units over 30 days, projected 29 days past the second reading"""
        a = make_reading(datetime(2024, 1, 1), 1000.0)
        b = make_reading(datetime(2024, 1, 31), 1100.0)

        result = extrapolate_value(a, b, datetime(2024, 2, 29))

        assert result == pytest.approx(1100.0 + 29 * (100.0 / 30))

    def test_backward(self):
        """Target 29 days before the first of two later readings"""
        a = make_reading(datetime(2024, 2, 29), 1200.0)
        b = make_reading(datetime(2024, 3, 31), 1300.0)

        result = extrapolate_value(a, b, datetime(2024, 1, 31))

        # 31 days from b back to a, 29 more days back to the target
        assert result == pytest.approx(1300.0 - 60 * (100.0 / 31))
        assert 1090 < result < 1120

    def test_zero_rate(self):
        a = make_reading(datetime(2024, 1, 1), 1000.0)
        b = make_reading(datetime(2024, 1, 31), 1000.0)

        assert extrapolate_value(a, b, datetime(2024, 2, 29)) == 1000.0

    def test_coincident_timestamps_return_second_amount(self):
        a = make_reading(datetime(2024, 1, 31), 1000.0)
        b = make_reading(datetime(2024, 1, 31), 1050.0)

        assert extrapolate_value(a, b, datetime(2024, 3, 31)) == 1050.0

    def test_negative_rate_is_not_clamped(self):
        a = make_reading(datetime(2024, 1, 1), 1100.0)
        b = make_reading(datetime(2024, 1, 31), 1000.0)

        assert extrapolate_value(a, b, datetime(2024, 3, 1)) < 1000.0
