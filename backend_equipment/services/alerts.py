"""
Alert queries for the API and dashboard: alert feed, latest risk, risk history, stats.

Read-only over the alert event log; never writes events.
"""

from __future__ import annotations

from typing import Any

from backend_equipment.core.exceptions import ResourceNotFoundError
from backend_equipment.database.models import AlertEvent, EquipmentRecord
from backend_equipment.database.repositories import AlertEventRepository, EquipmentRepository
from backend_equipment.risk_engine.models import RiskLevel

UNKNOWN = "Unknown"
DEFAULT_ALERT_LIMIT = 50
DEFAULT_HISTORY_LIMIT = 100
# Alert feed shows these levels unless a specific level is requested
DEFAULT_ALERT_LEVELS = (RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL)


def _risk_dict(event: AlertEvent, equipment_name: str) -> dict[str, Any]:
    return {
        "equipment_id": event.equipment_id,
        "equipment_name": equipment_name,
        "timestamp": event.timestamp,
        "risk_score": event.risk_score,
        "risk_level": event.risk_level.value,
        "reason": event.reason,
    }


class AlertService:
    def __init__(
        self,
        events: AlertEventRepository | None = None,
        equipment: EquipmentRepository | None = None,
    ) -> None:
        self._events = events or AlertEventRepository()
        self._equipment = equipment or EquipmentRepository()

    def _require_equipment(self, equipment_id: int) -> EquipmentRecord:
        record = self._equipment.get(equipment_id)
        if record is None:
            raise ResourceNotFoundError(f"Equipment not found with id: {equipment_id}")
        return record

    def get_alerts(self, level: str | None = None, limit: int | None = None) -> list[dict[str, Any]]:
        """
        Alert feed, newest first. Without level: MEDIUM, HIGH and CRITICAL.
        Raises ValueError for an unknown level name.
        """
        if level:
            levels: tuple[RiskLevel, ...] = (RiskLevel(level.strip().upper()),)
        else:
            levels = DEFAULT_ALERT_LEVELS
        events = self._events.by_levels(levels, limit=limit or DEFAULT_ALERT_LIMIT)
        equipment = self._equipment.get_many(e.equipment_id for e in events)
        alerts = []
        for event in events:
            record = equipment.get(event.equipment_id)
            alerts.append(
                {
                    "id": event.id,
                    "equipment_id": event.equipment_id,
                    "equipment_name": record.name if record else UNKNOWN,
                    "equipment_type": record.type if record else UNKNOWN,
                    "timestamp": event.timestamp,
                    "risk_score": event.risk_score,
                    "risk_level": event.risk_level.value,
                    "reason": event.reason,
                }
            )
        return alerts

    def get_latest_risk(self, equipment_id: int) -> dict[str, Any]:
        record = self._require_equipment(equipment_id)
        latest = self._events.latest_alert_event(equipment_id)
        if latest is None:
            raise ResourceNotFoundError(f"No risk data found for equipment: {equipment_id}")
        return _risk_dict(latest, record.name)

    def get_risk_history(self, equipment_id: int, limit: int | None = None) -> list[dict[str, Any]]:
        record = self._require_equipment(equipment_id)
        events = self._events.history(equipment_id, limit=limit or DEFAULT_HISTORY_LIMIT)
        return [_risk_dict(e, record.name) for e in events]

    def get_dashboard_stats(self) -> dict[str, int]:
        """Count equipment by the level of its most recent alert event."""
        all_equipment = self._equipment.list_all()
        latest = self._events.latest_levels()
        counts = {lvl: 0 for lvl in RiskLevel}
        for record in all_equipment:
            level = latest.get(record.id)
            if level is not None:
                counts[level] += 1
        return {
            "total_equipment": len(all_equipment),
            "critical_equipment": counts[RiskLevel.CRITICAL],
            "high_risk_equipment": counts[RiskLevel.HIGH],
            "medium_risk_equipment": counts[RiskLevel.MEDIUM],
            "low_risk_equipment": counts[RiskLevel.LOW],
        }
