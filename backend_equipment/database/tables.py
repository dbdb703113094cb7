"""
SQLAlchemy table definitions: equipment, sensor_log, risk_event.

Decimal readings and scores are stored as strings; string avoids precision loss
on backends without a native decimal type (SQLite).
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

from backend_equipment.database.models import AlertEvent, EquipmentRecord, SensorLogRecord
from backend_equipment.risk_engine.models import RiskLevel

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC now; all stored timestamps are naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Equipment(Base):
    """Monitored equipment (turbine, pump, press...)."""

    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False, index=True)
    type = Column(String(64), nullable=False, index=True)
    location = Column(String(256), nullable=True)
    install_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    def to_record(self) -> EquipmentRecord:
        return EquipmentRecord(
            id=self.id,
            name=self.name,
            type=self.type,
            location=self.location,
            install_date=self.install_date,
            notes=self.notes,
        )


class SensorLog(Base):
    """
    Raw sensor reading history (append-only). One row per accepted reading.
    """

    __tablename__ = "sensor_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    equipment_id = Column(Integer, nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False, index=True)
    temperature = Column(String(32), nullable=False)
    vibration = Column(String(32), nullable=False)
    load_percentage = Column(String(32), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (Index("ix_sensor_log_equipment_timestamp", "equipment_id", "timestamp"),)

    def to_record(self) -> SensorLogRecord:
        return SensorLogRecord(
            id=self.id,
            equipment_id=self.equipment_id,
            timestamp=self.timestamp,
            temperature=Decimal(self.temperature),
            vibration=Decimal(self.vibration),
            load_percentage=Decimal(self.load_percentage),
            created_at=self.created_at,
        )


class RiskEvent(Base):
    """
    Alert event log (append-only). Latest row per equipment is the debounce reference.
    """

    __tablename__ = "risk_event"

    id = Column(Integer, primary_key=True, autoincrement=True)
    equipment_id = Column(Integer, nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False, index=True)
    risk_score = Column(String(32), nullable=False)
    risk_level = Column(String(20), nullable=False, index=True)
    reason = Column(Text, nullable=True)

    __table_args__ = (Index("ix_risk_event_equipment_timestamp", "equipment_id", "timestamp"),)

    def to_event(self) -> AlertEvent:
        return AlertEvent(
            id=self.id,
            equipment_id=self.equipment_id,
            timestamp=self.timestamp,
            risk_score=Decimal(self.risk_score),
            risk_level=RiskLevel(self.risk_level),
            reason=self.reason or "",
        )
