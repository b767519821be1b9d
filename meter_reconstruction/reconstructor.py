"""
Monthly Reading Reconstructor
Rebuilds a full year of end-of-month meter readings from sparse readings
"""

import logging
from collections import Counter
from datetime import datetime, tzinfo
from typing import Callable, Iterable, List, NamedTuple, Optional, Sequence, Union

from .calendar_utils import month_end, month_label
from .interpolation import extrapolate_value, interpolate_value, interpolation_ratio
from .matcher import DEFAULT_TOLERANCE_DAYS, find_nearest_reading
from .models import (
    CalculationDetails,
    CommodityType,
    MonthlyDataPoint,
    QualityKind,
    Reading,
    SourceReading,
)

logger = logging.getLogger(__name__)


class MonthContext(NamedTuple):
    """Everything a strategy needs to resolve one month"""

    month: int
    target: datetime
    readings: Sequence[Reading]
    before: Sequence[Reading]
    after: Sequence[Reading]


Strategy = Callable[[MonthContext], Optional[MonthlyDataPoint]]


def _point(
    ctx: MonthContext,
    value: float,
    quality: QualityKind,
    sources: Sequence[Reading],
    ratio: Optional[float] = None,
) -> MonthlyDataPoint:
    return MonthlyDataPoint(
        month=ctx.month,
        month_label=month_label(ctx.month),
        meter_reading=value,
        quality=quality,
        calculation_details=CalculationDetails(
            method=quality,
            source_readings=tuple(SourceReading.from_reading(r) for r in sources),
            interpolation_ratio=ratio,
        ),
    )


class MonthlyReadingReconstructor:
    """
    Reconstructs 12 end-of-month meter readings for one commodity and year.

    Each month is resolved independently by the first strategy that yields a
    value:
    - actual reading within the tolerance window around month end
    - interpolation between the last reading before and first reading after
    - forward extrapolation from the last two readings before month end
    - backward extrapolation from the first two readings after month end
    Months that none of these can resolve are UNAVAILABLE.
    """

    def __init__(
        self,
        tolerance_days: int = DEFAULT_TOLERANCE_DAYS,
        tz: Optional[tzinfo] = None,
    ):
        self.tolerance_days = tolerance_days
        self.tz = tz
        self.strategies: Sequence[Strategy] = (
            self._actual_reading,
            self._interpolated_reading,
            self._extrapolated_forward,
            self._extrapolated_backward,
        )

    def _actual_reading(self, ctx: MonthContext) -> Optional[MonthlyDataPoint]:
        reading = find_nearest_reading(ctx.readings, ctx.target, self.tolerance_days)
        if reading is None:
            return None
        return _point(ctx, reading.amount, QualityKind.ACTUAL, [reading])

    @staticmethod
    def _interpolated_reading(ctx: MonthContext) -> Optional[MonthlyDataPoint]:
        if not ctx.before or not ctx.after:
            return None
        prev_reading, next_reading = ctx.before[-1], ctx.after[0]
        value = interpolate_value(prev_reading, next_reading, ctx.target)
        ratio = interpolation_ratio(prev_reading, next_reading, ctx.target)
        return _point(
            ctx, value, QualityKind.INTERPOLATED, [prev_reading, next_reading], ratio
        )

    @staticmethod
    def _extrapolated_forward(ctx: MonthContext) -> Optional[MonthlyDataPoint]:
        if len(ctx.before) < 2:
            return None
        a, b = ctx.before[-2], ctx.before[-1]
        value = extrapolate_value(a, b, ctx.target)
        return _point(ctx, value, QualityKind.EXTRAPOLATED, [a, b])

    @staticmethod
    def _extrapolated_backward(ctx: MonthContext) -> Optional[MonthlyDataPoint]:
        if len(ctx.after) < 2:
            return None
        a, b = ctx.after[0], ctx.after[1]
        value = extrapolate_value(a, b, ctx.target)
        return _point(ctx, value, QualityKind.EXTRAPOLATED, [a, b])

    def _month_end_tz(self, sorted_readings: Sequence[Reading]) -> Optional[tzinfo]:
        """
        Zone for month ends: naive readings get naive month ends; aware readings
        use the configured zone, else the first reading's tzinfo. A fixed UTC
        offset puts month ends of the other DST season one hour off, so readings
        parsed with offsets should be paired with a named zone.
        """
        if not sorted_readings:
            return None
        first = sorted_readings[0].timestamp.tzinfo
        if first is None:
            return None
        return self.tz if self.tz is not None else first

    def reconstruct_month(
        self, sorted_readings: Sequence[Reading], year: int, month: int
    ) -> MonthlyDataPoint:
        """
        Resolve the end-of-month reading for a single month

        Args:
            sorted_readings: Readings of one commodity, sorted by timestamp
            year: Calendar year
            month: Month number, 1 = January

        Returns:
            MonthlyDataPoint; UNAVAILABLE if no strategy applies
        """
        target = month_end(year, month, self._month_end_tz(sorted_readings))
        ctx = MonthContext(
            month=month,
            target=target,
            readings=sorted_readings,
            before=[r for r in sorted_readings if r.timestamp < target],
            after=[r for r in sorted_readings if r.timestamp > target],
        )

        for strategy in self.strategies:
            point = strategy(ctx)
            if point is not None:
                return point

        return MonthlyDataPoint(
            month=month,
            month_label=month_label(month),
            meter_reading=None,
            quality=QualityKind.UNAVAILABLE,
            calculation_details=CalculationDetails(method=QualityKind.UNAVAILABLE),
        )

    def reconstruct_year(
        self,
        readings: Iterable[Reading],
        year: int,
        commodity_type: Union[CommodityType, str],
    ) -> List[MonthlyDataPoint]:
        """
        Reconstruct end-of-month readings for all 12 months of a year

        Args:
            readings: Readings in any order; other commodity types are ignored
            year: Calendar year to reconstruct
            commodity_type: Commodity to reconstruct ("power" or "gas")

        Returns:
            List of 12 MonthlyDataPoint objects, January first

        Example:
            readings (power): Jan 31 -> 1000, Apr 30 -> 1300
            reconstruct_year(readings, 2024, "power"):
                Jan: 1000 (actual)
                Feb, Mar: interpolated between Jan 31 and Apr 30
                Apr: 1300 (actual)
                May..Dec: extrapolated forward from Jan 31 and Apr 30
        """
        commodity = CommodityType.coerce(commodity_type)
        filtered = sorted(
            (r for r in readings if r.commodity_type is commodity),
            key=lambda r: r.timestamp,
        )

        points = [
            self.reconstruct_month(filtered, year, month) for month in range(1, 13)
        ]

        for point in points:
            logger.debug(
                f"{commodity.value} {year}-{point.month:02d}: "
                f"{point.quality.value} -> {point.meter_reading}"
            )

        counts = Counter(point.quality.value for point in points)
        logger.info(
            f"Reconstructed {commodity.value} {year} from {len(filtered)} readings: "
            + ", ".join(f"{kind.value}={counts.get(kind.value, 0)}" for kind in QualityKind)
        )

        return points
