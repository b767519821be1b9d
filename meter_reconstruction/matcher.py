"""
Nearest reading lookup around a target date
"""

from datetime import datetime
from typing import Iterable, Optional

from .models import Reading

# Readings this many whole days from a month end still count as that month's reading
DEFAULT_TOLERANCE_DAYS = 3

SECONDS_PER_DAY = 24 * 3600


def day_distance(a: datetime, b: datetime) -> int:
    """Number of full days between two instants (absolute, truncated)"""
    return int(abs((a - b).total_seconds()) // SECONDS_PER_DAY)


def find_nearest_reading(
    readings: Iterable[Reading],
    target_date: datetime,
    tolerance_days: int,
) -> Optional[Reading]:
    """
    Find the reading closest to target_date within a tolerance window

    Args:
        readings: Readings to search (any order)
        target_date: Instant to search around, usually a month end
        tolerance_days: Maximum distance in full days; the boundary is inclusive

    Returns:
        The closest reading, or None if nothing lies within tolerance.
        When two readings are equally distant the later one wins.

    Example:
        readings on Jan 29 and Feb 2, target Jan 31 23:59, tolerance 3:
            Jan 29 -> 2 days, Feb 2 -> 1 day  => Feb 2 reading
    """
    nearest = None
    min_distance = None

    for reading in readings:
        distance = day_distance(reading.timestamp, target_date)
        if distance > tolerance_days:
            continue

        if min_distance is None or distance < min_distance:
            nearest, min_distance = reading, distance
        elif distance == min_distance and reading.timestamp > nearest.timestamp:
            nearest = reading

    return nearest
