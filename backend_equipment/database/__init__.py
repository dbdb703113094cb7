"""
Database abstraction layer — equipment, sensor log history, alert event log.

SQLAlchemy engine from EQUIPMENT_DB_URL / DATABASE_URL, else SQLite; the
repositories hide sessions and return plain records.
"""

from backend_equipment.database.models import (
    AlertEvent,
    EquipmentRecord,
    SensorLogRecord,
)
from backend_equipment.database.repositories import (
    AlertEventRepository,
    EquipmentRepository,
    SensorLogRepository,
)
from backend_equipment.database.session import (
    init_db,
    reset_engine_for_test,
    session_scope,
)

__all__ = [
    "AlertEvent",
    "EquipmentRecord",
    "SensorLogRecord",
    "AlertEventRepository",
    "EquipmentRepository",
    "SensorLogRepository",
    "init_db",
    "reset_engine_for_test",
    "session_scope",
]
