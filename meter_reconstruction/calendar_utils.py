"""
Calendar helpers
Month boundaries and display labels for the monthly series
"""

import calendar
from datetime import datetime, tzinfo
from typing import Optional

import pandas as pd

from .exceptions import InvalidInputError


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidInputError(f"Month must be between 1 and 12, got {month}")


def month_end(year: int, month: int, tz: Optional[tzinfo] = None) -> datetime:
    """
    Get the last instant of a month

    Args:
        year: Calendar year (e.g. 2024)
        month: Month number, 1 = January
        tz: Optional timezone to attach, so the result can be compared
            against timezone-aware readings

    Returns:
        datetime at 23:59:59.999999 on the last day of the month

    Example:
        month_end(2024, 2) -> 2024-02-29 23:59:59.999999
        month_end(2025, 2) -> 2025-02-28 23:59:59.999999
    """
    _check_month(month)
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, last_day, 23, 59, 59, 999999, tzinfo=tz)


def month_label(month: int) -> str:
    """Three-letter English label for a month number ("Jan" .. "Dec")"""
    _check_month(month)
    # pandas month names are English regardless of LC_TIME
    return pd.Timestamp(year=2000, month=month, day=1).month_name()[:3]
