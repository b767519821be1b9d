"""
Data model for monthly meter reconstruction

Readings come in, MonthlyDataPoint and MonthlyConsumptionPoint go out.
All records are immutable; a reconstruction creates new objects on every call.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import InvalidInputError


class CommodityType(str, Enum):
    """Metered commodity"""

    POWER = "power"
    GAS = "gas"

    @classmethod
    def coerce(cls, value: Union["CommodityType", str]) -> "CommodityType":
        """Accept either a member or its string value"""
        try:
            return cls(value)
        except ValueError:
            raise InvalidInputError(f"Unknown commodity type: {value!r}") from None


class QualityKind(str, Enum):
    """How a month-end meter reading was obtained"""

    ACTUAL = "actual"
    INTERPOLATED = "interpolated"
    EXTRAPOLATED = "extrapolated"
    UNAVAILABLE = "none"


@dataclass(frozen=True)
class Reading:
    """One cumulative meter observation"""

    timestamp: datetime
    amount: float
    commodity_type: CommodityType

    def __post_init__(self):
        # Frozen dataclass: coerce "power"/"gas" strings and int amounts in place
        object.__setattr__(
            self, "commodity_type", CommodityType.coerce(self.commodity_type)
        )
        object.__setattr__(self, "amount", float(self.amount))


@dataclass(frozen=True)
class SourceReading:
    timestamp: datetime
    amount: float

    @classmethod
    def from_reading(cls, reading: Reading) -> "SourceReading":
        return cls(timestamp=reading.timestamp, amount=reading.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.timestamp.isoformat(), "amount": self.amount}


@dataclass(frozen=True)
class CalculationDetails:
    """Audit trail for a month-end value: method, inputs and ratio"""

    method: QualityKind
    source_readings: Tuple[SourceReading, ...] = ()
    interpolation_ratio: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {"method": self.method.value}
        if self.source_readings:
            details["sourceReadings"] = [s.to_dict() for s in self.source_readings]
        if self.interpolation_ratio is not None:
            details["interpolationRatio"] = self.interpolation_ratio
        return details


@dataclass(frozen=True)
class MonthlyDataPoint:
    """
    End-of-month meter reading for one month

    meter_reading is None exactly when quality is UNAVAILABLE.
    """

    month: int
    month_label: str
    meter_reading: Optional[float]
    quality: QualityKind
    calculation_details: CalculationDetails = field(
        default_factory=lambda: CalculationDetails(method=QualityKind.UNAVAILABLE)
    )

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise InvalidInputError(f"Month must be between 1 and 12, got {self.month}")
        unavailable = self.quality is QualityKind.UNAVAILABLE
        if unavailable != (self.meter_reading is None):
            raise InvalidInputError(
                f"Month {self.month}: meter_reading must be set unless quality is "
                f"UNAVAILABLE (quality={self.quality.value}, "
                f"meter_reading={self.meter_reading})"
            )

    @property
    def is_actual(self) -> bool:
        return self.quality is QualityKind.ACTUAL

    @property
    def is_interpolated(self) -> bool:
        return self.quality is QualityKind.INTERPOLATED

    @property
    def is_extrapolated(self) -> bool:
        return self.quality is QualityKind.EXTRAPOLATED

    @property
    def is_available(self) -> bool:
        return self.meter_reading is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "monthLabel": self.month_label,
            "meterReading": self.meter_reading,
            "isActual": self.is_actual,
            "isInterpolated": self.is_interpolated,
            "isExtrapolated": self.is_extrapolated,
            "calculationDetails": self.calculation_details.to_dict(),
        }


@dataclass(frozen=True)
class ConsumptionSources:
    current: MonthlyDataPoint
    previous: Optional[MonthlyDataPoint] = None
    next: Optional[MonthlyDataPoint] = None


@dataclass(frozen=True)
class MonthlyConsumptionPoint:
    """Consumption for one month, derived from two month-end readings"""

    month: int
    month_label: str
    consumption: Optional[float]
    is_actual: bool
    is_derived: bool
    source_readings: ConsumptionSources

    def to_dict(self) -> Dict[str, Any]:
        sources = self.source_readings
        return {
            "month": self.month,
            "monthLabel": self.month_label,
            "consumption": self.consumption,
            "isActual": self.is_actual,
            "isDerived": self.is_derived,
            "sourceReadings": {
                "current": sources.current.to_dict(),
                "previous": sources.previous.to_dict() if sources.previous else None,
                "next": sources.next.to_dict() if sources.next else None,
            },
        }
