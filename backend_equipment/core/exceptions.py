"""
Application-level exceptions.

Domain exceptions with stable error codes, used by the services, the alert
pipeline, and the API error handlers.
"""

from __future__ import annotations


class EquipmentRiskError(Exception):
    """Base class for all backend_equipment errors."""

    code = "equipment_risk_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(EquipmentRiskError):
    """Requested equipment, sensor log, or risk record does not exist."""

    code = "not_found"


class AlertPersistenceError(EquipmentRiskError):
    """Alert history could not be read or an AlertEvent could not be saved.

    Fatal to AlertPipeline.process: the reading must not be silently lost,
    since future debounce decisions depend on durable history.
    """

    code = "alert_persistence_failed"


class ConfigurationError(EquipmentRiskError):
    """Invalid configuration value (e.g. a risk weight that is not a number)."""

    code = "configuration_error"
