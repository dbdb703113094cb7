"""
Application services used by the API: equipment CRUD, sensor log ingestion, alert queries.
"""

from backend_equipment.services.alerts import AlertService
from backend_equipment.services.equipment import EquipmentService
from backend_equipment.services.sensor_logs import SensorLogService

__all__ = ["AlertService", "EquipmentService", "SensorLogService"]
