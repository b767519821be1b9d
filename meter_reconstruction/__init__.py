"""
Monthly meter-reading reconstruction and consumption derivation
"""
from .calculator import ConsumptionCalculator, YearSummary
from .calendar_utils import month_end, month_label
from .config_loader import ConfigLoader, EngineSettings, get_config_loader
from .exceptions import (
    DegenerateIntervalError,
    InvalidInputError,
    InvalidOrderError,
    MeterReconstructionError,
)
from .interpolation import extrapolate_value, interpolate_value
from .matcher import DEFAULT_TOLERANCE_DAYS, find_nearest_reading
from .models import (
    CalculationDetails,
    CommodityType,
    ConsumptionSources,
    MonthlyConsumptionPoint,
    MonthlyDataPoint,
    QualityKind,
    Reading,
    SourceReading,
)
from .reconstructor import MonthlyReadingReconstructor
from .service import MonthlyAggregationService

__all__ = [
    "CalculationDetails",
    "CommodityType",
    "ConfigLoader",
    "ConsumptionCalculator",
    "ConsumptionSources",
    "DEFAULT_TOLERANCE_DAYS",
    "DegenerateIntervalError",
    "EngineSettings",
    "InvalidInputError",
    "InvalidOrderError",
    "MeterReconstructionError",
    "MonthlyAggregationService",
    "MonthlyConsumptionPoint",
    "MonthlyDataPoint",
    "MonthlyReadingReconstructor",
    "QualityKind",
    "Reading",
    "SourceReading",
    "YearSummary",
    "extrapolate_value",
    "find_nearest_reading",
    "get_config_loader",
    "interpolate_value",
    "month_end",
    "month_label",
]
