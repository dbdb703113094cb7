"""
Sensor log service: store validated readings and run the alert pipeline on each.

The caller (API) validates ranges; this service only checks that the equipment
exists, fills a default timestamp, persists the log, then scores it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from backend_equipment.alerts.pipeline import AlertPipeline
from backend_equipment.core.exceptions import ResourceNotFoundError
from backend_equipment.database.models import SensorLogRecord
from backend_equipment.database.repositories import EquipmentRepository, SensorLogRepository
from backend_equipment.database.tables import utcnow
from backend_equipment.equipment_logging import bind_equipment
from backend_equipment.risk_engine.models import RiskAssessment, SensorReading


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class SensorLogService:
    def __init__(
        self,
        pipeline: AlertPipeline,
        equipment: EquipmentRepository | None = None,
        logs: SensorLogRepository | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._equipment = equipment or EquipmentRepository()
        self._logs = logs or SensorLogRepository()

    def _require_equipment(self, equipment_id: int) -> None:
        if not self._equipment.exists(equipment_id):
            raise ResourceNotFoundError(f"Equipment not found with id: {equipment_id}")

    def add_sensor_log(
        self,
        equipment_id: int,
        temperature: Decimal,
        vibration: Decimal,
        load_percentage: Decimal,
        timestamp: datetime | None = None,
    ) -> tuple[SensorLogRecord, RiskAssessment]:
        """
        Persist one reading and score it. Returns (stored log, assessment).
        Raises ResourceNotFoundError for unknown equipment and AlertPersistenceError
        when alert history cannot be written.
        """
        self._require_equipment(equipment_id)
        saved = self._logs.add(
            equipment_id,
            _as_naive_utc(timestamp) if timestamp else utcnow(),
            temperature,
            vibration,
            load_percentage,
        )
        bind_equipment(equipment_id).info(
            "sensor_log_added",
            sensor_log_id=saved.id,
            temperature=saved.temperature,
            vibration=saved.vibration,
            load_percentage=saved.load_percentage,
        )
        reading = SensorReading(
            equipment_id=saved.equipment_id,
            timestamp=saved.timestamp,
            temperature=saved.temperature,
            vibration=saved.vibration,
            load_percentage=saved.load_percentage,
        )
        return saved, self._pipeline.process(reading)

    def get_sensor_logs(
        self,
        equipment_id: int,
        *,
        limit: int = 100,
        order: str = "desc",
    ) -> list[SensorLogRecord]:
        self._require_equipment(equipment_id)
        ascending = (order or "").strip().lower() == "asc"
        return self._logs.list_for_equipment(equipment_id, limit=limit, ascending=ascending)

    def get_sensor_logs_between(
        self,
        equipment_id: int,
        since: datetime,
        until: datetime,
        *,
        limit: int = 100,
    ) -> list[SensorLogRecord]:
        self._require_equipment(equipment_id)
        return self._logs.list_between(equipment_id, since, until, limit=limit)

    def get_latest_sensor_log(self, equipment_id: int) -> SensorLogRecord:
        self._require_equipment(equipment_id)
        latest = self._logs.latest(equipment_id)
        if latest is None:
            raise ResourceNotFoundError(f"No sensor logs found for equipment: {equipment_id}")
        return latest
