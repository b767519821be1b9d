"""
Monthly Aggregation Service
Runs reconstruction and consumption derivation for whole years, wiring in the
neighbouring years' December and January as boundary context
"""

import hashlib
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .calculator import ConsumptionCalculator, YearSummary
from .config_loader import DEFAULT_CONFIG_PATH, ConfigLoader, EngineSettings
from .logging_config import log_with_context, setup_logging
from .models import (
    CommodityType,
    MonthlyConsumptionPoint,
    MonthlyDataPoint,
    QualityKind,
    Reading,
)
from .reconstructor import MonthlyReadingReconstructor

logger = logging.getLogger(__name__)


def _available(point: MonthlyDataPoint) -> Optional[MonthlyDataPoint]:
    return None if point.quality is QualityKind.UNAVAILABLE else point


class MonthlyAggregationService:
    """
    Entry point for callers that hold a reading list and want monthly data.

    The reading list may cover several years and commodities; every call
    works on one commodity.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.reconstructor = MonthlyReadingReconstructor(
            self.settings.tolerance_days, tz=self.settings.zone()
        )
        self.calculator = ConsumptionCalculator()

    @classmethod
    def from_config(cls, config_path: str = DEFAULT_CONFIG_PATH) -> "MonthlyAggregationService":
        """
        Build a service from a YAML config file and set up logging from its
        logging section

        Raises:
            FileNotFoundError: config_path does not exist
            pydantic.ValidationError: the file holds invalid settings
        """
        settings = ConfigLoader(config_path).get_settings()
        setup_logging(settings)
        logger.info(
            f"Monthly aggregation configured: tolerance_days={settings.tolerance_days}, "
            f"timezone={settings.timezone or 'from readings'}"
        )
        return cls(settings)

    def monthly_readings(
        self,
        readings: Iterable[Reading],
        year: int,
        commodity_type: Union[CommodityType, str],
    ) -> List[MonthlyDataPoint]:
        """12 end-of-month readings for one year"""
        return self.reconstructor.reconstruct_year(readings, year, commodity_type)

    def monthly_consumption(
        self,
        readings: Iterable[Reading],
        year: int,
        commodity_type: Union[CommodityType, str],
    ) -> List[MonthlyConsumptionPoint]:
        """
        12 monthly consumption points for one year

        With include_year_boundaries enabled the previous year's December and
        the next year's January are reconstructed from the same readings and
        used as boundary context. Context points that cannot be resolved are
        left out rather than passed as UNAVAILABLE.
        """
        readings = list(readings)
        monthly = self.monthly_readings(readings, year, commodity_type)

        previous_december = next_january = None
        if self.settings.include_year_boundaries:
            previous_december = _available(
                self.monthly_readings(readings, year - 1, commodity_type)[11]
            )
            next_january = _available(
                self.monthly_readings(readings, year + 1, commodity_type)[0]
            )

        return self.calculator.derive_year(monthly, previous_december, next_january)

    def consumption_for_years(
        self,
        readings: Iterable[Reading],
        years: Sequence[int],
        commodity_type: Union[CommodityType, str],
    ) -> Dict[int, List[MonthlyConsumptionPoint]]:
        """
        Monthly consumption for several years

        Each year is reconstructed once; adjacent years share their boundary
        points so that December of one year feeds January of the next.

        Returns:
            Dict mapping year -> 12 MonthlyConsumptionPoint objects
        """
        readings = list(readings)
        wanted = sorted(set(years))
        if not wanted:
            return {}

        span = set(wanted)
        if self.settings.include_year_boundaries:
            span |= {year - 1 for year in wanted} | {year + 1 for year in wanted}

        monthly_by_year = {
            year: self.monthly_readings(readings, year, commodity_type)
            for year in sorted(span)
        }

        results = {}
        for year in wanted:
            previous_december = next_january = None
            if self.settings.include_year_boundaries:
                previous_december = _available(monthly_by_year[year - 1][11])
                next_january = _available(monthly_by_year[year + 1][0])

            results[year] = self.calculator.derive_year(
                monthly_by_year[year], previous_december, next_january
            )

            summary = self.summarize(results[year])
            log_with_context(
                logger,
                logging.INFO,
                f"Monthly consumption {CommodityType.coerce(commodity_type).value} "
                f"{year}: total={summary.total_consumption:.2f}",
                year=year,
                actual_months=summary.actual_months,
                derived_months=summary.derived_months,
                missing_months=summary.missing_months,
            )

        return results

    def summarize(
        self, consumption_points: Iterable[MonthlyConsumptionPoint]
    ) -> YearSummary:
        return self.calculator.summarize_year(consumption_points)

    @staticmethod
    def source_data_hash(readings: Iterable[Reading]) -> str:
        """
        SHA-256 fingerprint of a reading list

        The readings are sorted first, so the same set of readings gives the
        same hash regardless of order. Callers compare it against the hash
        stored with cached results to decide whether to recompute.
        """
        entries = sorted(
            f"{r.timestamp.isoformat()}|{r.commodity_type.value}|{float(r.amount)!r}"
            for r in readings
        )
        return hashlib.sha256("\n".join(entries).encode("utf-8")).hexdigest()
