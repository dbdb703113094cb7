"""
Structured logging for Backend Equipment.

JSON logs with timestamp, equipment_id, event_type, risk_level.
Use get_logger() in all modules for production-ready, aggregation-friendly output.
"""

from backend_equipment.equipment_logging.logger import bind_equipment, get_logger

__all__ = ["bind_equipment", "get_logger"]
