"""
Core utilities — shared exceptions and cross-cutting concerns.

Used across the risk engine, alert pipeline, services, and API server.
"""

from backend_equipment.core.exceptions import (
    AlertPersistenceError,
    ConfigurationError,
    EquipmentRiskError,
    ResourceNotFoundError,
)

__all__ = [
    "AlertPersistenceError",
    "ConfigurationError",
    "EquipmentRiskError",
    "ResourceNotFoundError",
]
