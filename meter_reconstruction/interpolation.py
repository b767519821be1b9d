"""
Linear interpolation and extrapolation of cumulative meter readings
"""

from datetime import datetime

from .exceptions import DegenerateIntervalError, InvalidOrderError
from .models import Reading


def interpolation_ratio(
    prev_reading: Reading, next_reading: Reading, target: datetime
) -> float:
    """
    Position of target between two readings (0 = at prev, 1 = at next)

    Raises:
        InvalidOrderError: prev_reading is timestamped after next_reading
        DegenerateIntervalError: both readings share the same timestamp
    """
    if prev_reading.timestamp > next_reading.timestamp:
        raise InvalidOrderError(
            f"Invalid reading order: prev ({prev_reading.timestamp.isoformat()}) "
            f"must be before next ({next_reading.timestamp.isoformat()})"
        )
    if prev_reading.timestamp == next_reading.timestamp:
        raise DegenerateIntervalError(
            f"Cannot interpolate between readings on same date "
            f"({prev_reading.timestamp.isoformat()})"
        )

    span = (next_reading.timestamp - prev_reading.timestamp).total_seconds()
    return (target - prev_reading.timestamp).total_seconds() / span


def interpolate_value(
    prev_reading: Reading, next_reading: Reading, target: datetime
) -> float:
    """
    Linearly interpolate the meter value at target between two readings

    Args:
        prev_reading: Reading at or before target
        next_reading: Reading at or after target
        target: Instant to interpolate for

    Returns:
        Interpolated meter value; exactly prev_reading.amount at its timestamp
        and exactly next_reading.amount at its timestamp

    Example:
        prev_reading: 2024-01-01 -> 1000.0
        next_reading: 2024-01-31 -> 1100.0
        interpolate_value(prev_reading, next_reading, 2024-01-16) -> 1050.0
    """
    ratio = interpolation_ratio(prev_reading, next_reading, target)

    if target == next_reading.timestamp:
        return next_reading.amount

    return prev_reading.amount + ratio * (next_reading.amount - prev_reading.amount)


def extrapolate_value(a: Reading, b: Reading, target: datetime) -> float:
    """
    Project the meter value at target from the trend of two readings

    Both readings lie on the same side of target and a is earlier than b.
    For forward projection they are the last two readings before target, for
    backward projection the first two after it. The rate between them is
    applied from b; there is no smoothing and no clamping of negative rates.

    If a and b share a timestamp the rate is undefined and b.amount is returned.
    """
    seconds = (b.timestamp - a.timestamp).total_seconds()
    if seconds == 0:
        return b.amount

    rate = (b.amount - a.amount) / seconds
    return b.amount + rate * (target - b.timestamp).total_seconds()
