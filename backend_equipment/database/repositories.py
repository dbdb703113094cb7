"""
Repositories over the SQLAlchemy tables.

EquipmentRepository, SensorLogRepository, and AlertEventRepository return plain
records (database.models); sessions never leak to callers. Failures are logged
and re-raised so the caller decides whether they are fatal.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import func

from backend_equipment.database.models import AlertEvent, EquipmentRecord, SensorLogRecord
from backend_equipment.database.session import session_scope
from backend_equipment.database.tables import Equipment, RiskEvent, SensorLog, utcnow
from backend_equipment.equipment_logging import get_logger
from backend_equipment.risk_engine.models import RiskLevel

logger = get_logger(__name__)


class EquipmentRepository:
    """Equipment metadata: CRUD, search, and display-name lookup for the pipeline."""

    def create(
        self,
        name: str,
        type: str,
        *,
        location: str | None = None,
        install_date: date | None = None,
        notes: str | None = None,
    ) -> EquipmentRecord:
        try:
            with session_scope() as session:
                row = Equipment(
                    name=name.strip(),
                    type=type.strip(),
                    location=location,
                    install_date=install_date,
                    notes=notes,
                )
                session.add(row)
                session.flush()
                record = row.to_record()
            logger.info("equipment_created", equipment_id=record.id, name=record.name)
            return record
        except Exception as e:
            logger.exception("equipment_create_failed", name=name, error=str(e))
            raise

    def get(self, equipment_id: int) -> EquipmentRecord | None:
        with session_scope() as session:
            row = session.get(Equipment, equipment_id)
            return row.to_record() if row else None

    def find_equipment(self, equipment_id: int) -> EquipmentRecord | None:
        """Equipment lookup used for display-name enrichment; None when unknown."""
        return self.get(equipment_id)

    def exists(self, equipment_id: int) -> bool:
        with session_scope() as session:
            return session.get(Equipment, equipment_id) is not None

    def list_all(self) -> list[EquipmentRecord]:
        with session_scope() as session:
            rows = session.query(Equipment).order_by(Equipment.id).all()
            return [r.to_record() for r in rows]

    def get_many(self, equipment_ids: Iterable[int]) -> dict[int, EquipmentRecord]:
        ids = list(set(equipment_ids))
        if not ids:
            return {}
        with session_scope() as session:
            rows = session.query(Equipment).filter(Equipment.id.in_(ids)).all()
            return {r.id: r.to_record() for r in rows}

    def search_by_name(self, name: str) -> list[EquipmentRecord]:
        pattern = f"%{(name or '').strip().lower()}%"
        with session_scope() as session:
            rows = (
                session.query(Equipment)
                .filter(func.lower(Equipment.name).like(pattern))
                .order_by(Equipment.id)
                .all()
            )
            return [r.to_record() for r in rows]

    def update(
        self,
        equipment_id: int,
        name: str,
        type: str,
        *,
        location: str | None = None,
        install_date: date | None = None,
        notes: str | None = None,
    ) -> EquipmentRecord | None:
        try:
            with session_scope() as session:
                row = session.get(Equipment, equipment_id)
                if row is None:
                    return None
                row.name = name.strip()
                row.type = type.strip()
                row.location = location
                row.install_date = install_date
                row.notes = notes
                session.flush()
                record = row.to_record()
            logger.info("equipment_updated", equipment_id=equipment_id, name=record.name)
            return record
        except Exception as e:
            logger.exception("equipment_update_failed", equipment_id=equipment_id, error=str(e))
            raise

    def delete(self, equipment_id: int) -> bool:
        try:
            with session_scope() as session:
                row = session.get(Equipment, equipment_id)
                if row is None:
                    return False
                session.delete(row)
            logger.info("equipment_deleted", equipment_id=equipment_id)
            return True
        except Exception as e:
            logger.exception("equipment_delete_failed", equipment_id=equipment_id, error=str(e))
            raise


class SensorLogRepository:
    """Sensor reading history per equipment."""

    def add(
        self,
        equipment_id: int,
        timestamp: datetime,
        temperature: Decimal,
        vibration: Decimal,
        load_percentage: Decimal,
    ) -> SensorLogRecord:
        try:
            with session_scope() as session:
                row = SensorLog(
                    equipment_id=equipment_id,
                    timestamp=timestamp,
                    temperature=str(temperature),
                    vibration=str(vibration),
                    load_percentage=str(load_percentage),
                    created_at=utcnow(),
                )
                session.add(row)
                session.flush()
                return row.to_record()
        except Exception as e:
            logger.exception("sensor_log_add_failed", equipment_id=equipment_id, error=str(e))
            raise

    def list_for_equipment(
        self,
        equipment_id: int,
        *,
        limit: int = 100,
        ascending: bool = False,
    ) -> list[SensorLogRecord]:
        order = SensorLog.timestamp.asc() if ascending else SensorLog.timestamp.desc()
        tiebreak = SensorLog.id.asc() if ascending else SensorLog.id.desc()
        with session_scope() as session:
            rows = (
                session.query(SensorLog)
                .filter(SensorLog.equipment_id == equipment_id)
                .order_by(order, tiebreak)
                .limit(limit)
                .all()
            )
            return [r.to_record() for r in rows]

    def list_between(
        self,
        equipment_id: int,
        since: datetime,
        until: datetime,
        *,
        limit: int = 100,
    ) -> list[SensorLogRecord]:
        """Readings with since <= timestamp <= until, newest first."""
        with session_scope() as session:
            rows = (
                session.query(SensorLog)
                .filter(
                    SensorLog.equipment_id == equipment_id,
                    SensorLog.timestamp >= since,
                    SensorLog.timestamp <= until,
                )
                .order_by(SensorLog.timestamp.desc(), SensorLog.id.desc())
                .limit(limit)
                .all()
            )
            return [r.to_record() for r in rows]

    def latest(self, equipment_id: int) -> SensorLogRecord | None:
        rows = self.list_for_equipment(equipment_id, limit=1)
        return rows[0] if rows else None


class AlertEventRepository:
    """
    Append-only alert history. Implements the alert history store used by the
    debounce gate: latest_alert_event() and save_alert_event().
    """

    def latest_alert_event(self, equipment_id: int) -> AlertEvent | None:
        """Most recent event for the equipment (timestamp desc, then id desc), or None."""
        try:
            with session_scope() as session:
                row = (
                    session.query(RiskEvent)
                    .filter(RiskEvent.equipment_id == equipment_id)
                    .order_by(RiskEvent.timestamp.desc(), RiskEvent.id.desc())
                    .first()
                )
                return row.to_event() if row else None
        except Exception as e:
            logger.exception("alert_event_latest_failed", equipment_id=equipment_id, error=str(e))
            raise

    def save_alert_event(self, event: AlertEvent) -> AlertEvent:
        """Insert a new event row (never an upsert). Returns the event with its assigned id."""
        try:
            with session_scope() as session:
                row = RiskEvent(
                    equipment_id=event.equipment_id,
                    timestamp=event.timestamp,
                    risk_score=str(event.risk_score),
                    risk_level=event.risk_level.value,
                    reason=event.reason,
                )
                session.add(row)
                session.flush()
                return row.to_event()
        except Exception as e:
            logger.exception(
                "alert_event_save_failed",
                equipment_id=event.equipment_id,
                risk_level=event.risk_level.value,
                error=str(e),
            )
            raise

    def history(self, equipment_id: int, *, limit: int = 100) -> list[AlertEvent]:
        with session_scope() as session:
            rows = (
                session.query(RiskEvent)
                .filter(RiskEvent.equipment_id == equipment_id)
                .order_by(RiskEvent.timestamp.desc(), RiskEvent.id.desc())
                .limit(limit)
                .all()
            )
            return [r.to_event() for r in rows]

    def by_levels(self, levels: Iterable[RiskLevel], *, limit: int = 50) -> list[AlertEvent]:
        """Events whose level is in levels, newest first."""
        values = [lvl.value for lvl in levels]
        with session_scope() as session:
            rows = (
                session.query(RiskEvent)
                .filter(RiskEvent.risk_level.in_(values))
                .order_by(RiskEvent.timestamp.desc(), RiskEvent.id.desc())
                .limit(limit)
                .all()
            )
            return [r.to_event() for r in rows]

    def latest_levels(self) -> dict[int, RiskLevel]:
        """Latest risk level per equipment id that has any event."""
        latest: dict[int, RiskLevel] = {}
        with session_scope() as session:
            rows = (
                session.query(RiskEvent.equipment_id, RiskEvent.risk_level)
                .order_by(
                    RiskEvent.equipment_id,
                    RiskEvent.timestamp.desc(),
                    RiskEvent.id.desc(),
                )
                .all()
            )
        for equipment_id, level in rows:
            if equipment_id not in latest:
                latest[equipment_id] = RiskLevel(level)
        return latest

    def count(self, equipment_id: int | None = None) -> int:
        with session_scope() as session:
            q = session.query(func.count(RiskEvent.id))
            if equipment_id is not None:
                q = q.filter(RiskEvent.equipment_id == equipment_id)
            return int(q.scalar() or 0)
