"""
Consumption Calculator for Monthly Meter Data
Calculates month-over-month consumption from end-of-month meter readings
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .exceptions import InvalidInputError
from .logging_config import log_with_context
from .models import (
    ConsumptionSources,
    MonthlyConsumptionPoint,
    MonthlyDataPoint,
    QualityKind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearSummary:
    """Totals over one year of monthly consumption"""

    total_consumption: float
    actual_months: int
    derived_months: int
    missing_months: int


class ConsumptionCalculator:
    """
    Calculator for consumption values from end-of-month meter readings.

    Provides methods to:
    - Derive monthly consumption for a year, including year boundaries
    - Summarize a year of monthly consumption
    """

    @staticmethod
    def _validate(monthly_data: Sequence[MonthlyDataPoint]) -> None:
        if len(monthly_data) != 12:
            raise InvalidInputError(
                f"monthly_data must contain exactly 12 months, got {len(monthly_data)}"
            )
        months = [point.month for point in monthly_data]
        if months != list(range(1, 13)):
            raise InvalidInputError(
                f"monthly_data must be ordered January to December, got months {months}"
            )

    @staticmethod
    def _difference(
        start: Optional[MonthlyDataPoint], end: Optional[MonthlyDataPoint]
    ) -> Tuple[Optional[float], bool, bool]:
        """Consumption between two month ends as (consumption, is_actual, is_derived)"""
        if start is None or end is None:
            return None, False, False
        if start.meter_reading is None or end.meter_reading is None:
            return None, False, False

        consumption = end.meter_reading - start.meter_reading
        is_actual = start.is_actual and end.is_actual
        return consumption, is_actual, not is_actual

    def derive_year(
        self,
        monthly_data: Sequence[MonthlyDataPoint],
        previous_december: Optional[MonthlyDataPoint] = None,
        next_january: Optional[MonthlyDataPoint] = None,
    ) -> List[MonthlyConsumptionPoint]:
        """
        Calculate monthly consumption from 12 end-of-month meter readings

        Args:
            monthly_data: 12 MonthlyDataPoint objects, January first
                          (as returned by MonthlyReadingReconstructor)
            previous_december: December point of the previous year, used as the
                               starting reading for January
            next_january: January point of the following year, used for
                          December only when November is UNAVAILABLE

        Returns:
            List of 12 MonthlyConsumptionPoint objects

        Raises:
            InvalidInputError: monthly_data is not 12 points ordered by month

        Example:
            Month-end readings:
                (prev Dec): 900.0
                Jan: 1000.0
                Feb: 1100.0

            Consumption:
                Jan: 100.0  (1000 - 900, needs previous_december)
                Feb: 100.0  (1100 - 1000)

        Notes:
            - Any resolved neighbour (actual, interpolated or extrapolated) is
              used as the previous reading; consumption is actual only when
              both readings are actual
            - December falls back to (next_january - December) when November
              is UNAVAILABLE; the January point is then set as sources.next
            - Negative consumption (meter replacement or correction) is logged
              as a warning and returned unchanged
        """
        self._validate(monthly_data)

        results = []
        for i, current in enumerate(monthly_data):
            previous = previous_december if i == 0 else monthly_data[i - 1]
            following = None

            if (
                i == 11
                and next_january is not None
                and (previous is None or previous.quality is QualityKind.UNAVAILABLE)
            ):
                following = next_january
                consumption, is_actual, is_derived = self._difference(current, following)
            else:
                consumption, is_actual, is_derived = self._difference(previous, current)

            if consumption is not None and consumption < 0:
                log_with_context(
                    logger,
                    logging.WARNING,
                    f"Negative consumption detected for {current.month_label} "
                    f"({current.month}): {consumption}",
                    month=current.month,
                    consumption=consumption,
                )

            results.append(
                MonthlyConsumptionPoint(
                    month=current.month,
                    month_label=current.month_label,
                    consumption=consumption,
                    is_actual=is_actual,
                    is_derived=is_derived,
                    source_readings=ConsumptionSources(
                        current=current, previous=previous, next=following
                    ),
                )
            )

        return results

    def summarize_year(
        self, consumption_points: Iterable[MonthlyConsumptionPoint]
    ) -> YearSummary:
        """
        Summarize monthly consumption for a year

        Args:
            consumption_points: Output of derive_year

        Returns:
            YearSummary with the sum of available consumption and the number
            of actual, derived and missing months
        """
        total = 0.0
        actual = derived = missing = 0

        for point in consumption_points:
            if point.consumption is None:
                missing += 1
                continue
            total += point.consumption
            if point.is_actual:
                actual += 1
            else:
                derived += 1

        return YearSummary(
            total_consumption=total,
            actual_months=actual,
            derived_months=derived,
            missing_months=missing,
        )
