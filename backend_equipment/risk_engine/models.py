"""
Value types for the risk engine.

Sensor readings, normalized triples, weights, risk levels, and the ephemeral
RiskAssessment returned by the alert pipeline. All numeric values are Decimal
so scores and rounding are reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class RiskLevel(str, Enum):
    """Ordered severity tiers: LOW < MEDIUM < HIGH < CRITICAL."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_ORDER = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL)


class Metric(str, Enum):
    """Sensor metrics, declared in attribution priority order."""

    TEMPERATURE = "Temperature"
    VIBRATION = "Vibration"
    LOAD = "Load"


@dataclass(frozen=True)
class SensorReading:
    """One validated reading from a piece of equipment."""

    equipment_id: int
    timestamp: datetime
    temperature: Decimal
    """Degrees Celsius."""
    vibration: Decimal
    """mm/s."""
    load_percentage: Decimal
    """Percent of rated load."""

    def raw_value(self, metric: Metric) -> Decimal:
        if metric is Metric.TEMPERATURE:
            return self.temperature
        if metric is Metric.VIBRATION:
            return self.vibration
        return self.load_percentage


@dataclass(frozen=True)
class NormalizedTriple:
    """Per-metric values on the common 0-100 scale."""

    temperature: Decimal
    vibration: Decimal
    load: Decimal


@dataclass(frozen=True)
class RiskWeights:
    """Independent scoring coefficients; never renormalized to sum to 1."""

    temperature: Decimal = Decimal("0.40")
    vibration: Decimal = Decimal("0.35")
    load: Decimal = Decimal("0.25")

    @property
    def total(self) -> Decimal:
        return self.temperature + self.vibration + self.load

    def for_metric(self, metric: Metric) -> Decimal:
        if metric is Metric.TEMPERATURE:
            return self.temperature
        if metric is Metric.VIBRATION:
            return self.vibration
        return self.load


@dataclass(frozen=True)
class RiskAssessment:
    """Scorer + classifier + attributor output for one reading. Not stored by itself."""

    equipment_id: int
    equipment_name: str
    timestamp: datetime
    risk_score: Decimal
    risk_level: RiskLevel
    reason: str
    temperature: Decimal
    vibration: Decimal
    load_percentage: Decimal
    alert_recorded: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "equipment_id": self.equipment_id,
            "equipment_name": self.equipment_name,
            "timestamp": self.timestamp.isoformat(),
            "risk_score": str(self.risk_score),
            "risk_level": self.risk_level.value,
            "reason": self.reason,
            "temperature": str(self.temperature),
            "vibration": str(self.vibration),
            "load_percentage": str(self.load_percentage),
            "alert_recorded": self.alert_recorded,
        }
