"""
Domain records for database entities.

Equipment metadata, sensor log history, and the append-only alert event log.
Returned by the repository layer; no ORM coupling so callers never hold sessions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from backend_equipment.risk_engine.models import RiskLevel


@dataclass(frozen=True)
class EquipmentRecord:
    """Stored piece of equipment."""

    id: int
    name: str
    type: str
    location: str | None = None
    install_date: date | None = None
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "location": self.location,
            "install_date": self.install_date.isoformat() if self.install_date else None,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class SensorLogRecord:
    """Single stored sensor reading."""

    id: int
    equipment_id: int
    timestamp: datetime
    temperature: Decimal
    vibration: Decimal
    load_percentage: Decimal
    created_at: datetime | None = None


@dataclass(frozen=True)
class AlertEvent:
    """
    Persisted risk classification change. Immutable once written.

    id is None until the alert history store assigns one on save.
    """

    equipment_id: int
    timestamp: datetime
    risk_score: Decimal
    risk_level: RiskLevel
    reason: str
    id: int | None = None
