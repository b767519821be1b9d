"""
pandas adapters
Convert reading DataFrames into Reading objects and monthly results back into
DataFrames for charts and reports
"""

import logging
from typing import Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from .exceptions import InvalidInputError
from .models import CommodityType, MonthlyConsumptionPoint, MonthlyDataPoint, Reading

logger = logging.getLogger(__name__)

# Accepted (timestamp, amount) column pairs, in order of preference
COLUMN_PAIRS = [("timestamp", "value"), ("date", "amount")]


def readings_from_frame(
    df: pd.DataFrame,
    commodity_type: Optional[Union[CommodityType, str]] = None,
) -> List[Reading]:
    """
    Build Reading objects from a DataFrame of cumulative meter readings

    Args:
        df: DataFrame with either 'timestamp'/'value' or 'date'/'amount'
            columns and an optional 'type' column
        commodity_type: Commodity of the rows; required when df has no
                        'type' column, otherwise only rows of this type are kept

    Returns:
        List of Reading objects in frame order; rows with a missing amount
        or timestamp are dropped

    Example:
        Input:
            timestamp            value
            2024-01-31 00:00     1000.0
            2024-02-29 00:00     1100.0

        readings_from_frame(df, "power") -> [Reading(2024-01-31, 1000.0, POWER), ...]
    """
    if df.empty:
        return []

    for ts_col, amount_col in COLUMN_PAIRS:
        if ts_col in df.columns and amount_col in df.columns:
            break
    else:
        raise InvalidInputError(
            f"DataFrame needs 'timestamp'/'value' or 'date'/'amount' columns, "
            f"got {list(df.columns)}"
        )

    if commodity_type is None and "type" not in df.columns:
        raise InvalidInputError(
            "commodity_type is required when the DataFrame has no 'type' column"
        )

    frame = df.copy()
    frame[ts_col] = pd.to_datetime(frame[ts_col])
    frame[amount_col] = pd.to_numeric(frame[amount_col], errors="coerce")

    before = len(frame)
    frame = frame.dropna(subset=[ts_col, amount_col])
    if len(frame) < before:
        logger.warning(f"Dropped {before - len(frame)} rows without timestamp or amount")

    if "type" in frame.columns:
        types = [CommodityType.coerce(t) for t in frame["type"]]
    else:
        types = [CommodityType.coerce(commodity_type)] * len(frame)

    rows = zip(frame[ts_col], frame[amount_col], types)
    if commodity_type is not None:
        wanted = CommodityType.coerce(commodity_type)
        rows = [row for row in rows if row[2] is wanted]

    return [
        Reading(
            timestamp=ts.to_pydatetime(),
            amount=float(amount),
            commodity_type=commodity,
        )
        for ts, amount, commodity in rows
    ]


def monthly_readings_to_frame(points: Iterable[MonthlyDataPoint]) -> pd.DataFrame:
    """One row per month with the reading, quality and method; NaN when unavailable"""
    rows = [
        {
            "month": point.month,
            "month_label": point.month_label,
            "meter_reading": (
                np.nan if point.meter_reading is None else point.meter_reading
            ),
            "quality": point.quality.value,
            "method": point.calculation_details.method.value,
            "interpolation_ratio": (
                np.nan
                if point.calculation_details.interpolation_ratio is None
                else point.calculation_details.interpolation_ratio
            ),
        }
        for point in points
    ]
    return pd.DataFrame(
        rows,
        columns=[
            "month",
            "month_label",
            "meter_reading",
            "quality",
            "method",
            "interpolation_ratio",
        ],
    )


def monthly_consumption_to_frame(
    points: Iterable[MonthlyConsumptionPoint],
) -> pd.DataFrame:
    """One row per month with consumption and its quality flags; NaN when absent"""
    rows = [
        {
            "month": point.month,
            "month_label": point.month_label,
            "consumption": np.nan if point.consumption is None else point.consumption,
            "is_actual": point.is_actual,
            "is_derived": point.is_derived,
        }
        for point in points
    ]
    return pd.DataFrame(
        rows, columns=["month", "month_label", "consumption", "is_actual", "is_derived"]
    )
