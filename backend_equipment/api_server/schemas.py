"""
Request/response models for the REST API.

SensorLogRequest is the validation boundary for readings: the risk engine and
alert pipeline assume these ranges were already enforced.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from backend_equipment.database.models import EquipmentRecord, SensorLogRecord
from backend_equipment.risk_engine.models import RiskAssessment


class EquipmentRequest(BaseModel):
    """POST/PUT /equipment body."""

    name: str = Field(..., min_length=1, max_length=256, description="Equipment name")
    type: str = Field(..., min_length=1, max_length=64, description="Equipment type (e.g. TURBINE)")
    location: str | None = Field(None, max_length=256)
    install_date: date | None = None
    notes: str | None = None


class EquipmentResponse(BaseModel):
    id: int
    name: str
    type: str
    location: str | None = None
    install_date: date | None = None
    notes: str | None = None

    @classmethod
    def from_record(cls, record: EquipmentRecord) -> "EquipmentResponse":
        return cls(
            id=record.id,
            name=record.name,
            type=record.type,
            location=record.location,
            install_date=record.install_date,
            notes=record.notes,
        )


class SensorLogRequest(BaseModel):
    """POST /equipment/{id}/logs body. Timestamp defaults to now."""

    timestamp: datetime | None = None
    temperature: Decimal = Field(..., ge=Decimal("-50"), le=Decimal("200"), description="°C")
    vibration: Decimal = Field(..., ge=Decimal("0"), le=Decimal("100"), description="mm/s")
    load_percentage: Decimal = Field(..., ge=Decimal("0"), le=Decimal("100"), description="% of rated load")


class SensorLogResponse(BaseModel):
    id: int
    equipment_id: int
    timestamp: datetime
    temperature: Decimal
    vibration: Decimal
    load_percentage: Decimal

    @classmethod
    def from_record(cls, record: SensorLogRecord) -> "SensorLogResponse":
        return cls(
            id=record.id,
            equipment_id=record.equipment_id,
            timestamp=record.timestamp,
            temperature=record.temperature,
            vibration=record.vibration,
            load_percentage=record.load_percentage,
        )


class RiskResponse(BaseModel):
    """Risk classification for one reading or one stored alert event."""

    equipment_id: int
    equipment_name: str
    timestamp: datetime
    risk_score: Decimal
    risk_level: str
    reason: str
    temperature: Decimal | None = None
    vibration: Decimal | None = None
    load_percentage: Decimal | None = None

    @classmethod
    def from_assessment(cls, assessment: RiskAssessment) -> "RiskResponse":
        return cls(
            equipment_id=assessment.equipment_id,
            equipment_name=assessment.equipment_name,
            timestamp=assessment.timestamp,
            risk_score=assessment.risk_score,
            risk_level=assessment.risk_level.value,
            reason=assessment.reason,
            temperature=assessment.temperature,
            vibration=assessment.vibration,
            load_percentage=assessment.load_percentage,
        )


class SensorLogCreatedResponse(SensorLogResponse):
    """POST /equipment/{id}/logs response: stored log plus its risk assessment."""

    risk: RiskResponse
    alert_recorded: bool = Field(..., description="True if the reading produced a new alert event")


class AlertResponse(BaseModel):
    id: int
    equipment_id: int
    equipment_name: str
    equipment_type: str
    timestamp: datetime
    risk_score: Decimal
    risk_level: str
    reason: str


class DashboardStatsResponse(BaseModel):
    total_equipment: int
    critical_equipment: int
    high_risk_equipment: int
    medium_risk_equipment: int
    low_risk_equipment: int
