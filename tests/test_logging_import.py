"""
Test that equipment_logging can be imported without circular import and logger works.
"""

from __future__ import annotations

from decimal import Decimal


def test_logging_import():
    """Import get_logger from equipment_logging and use the logger."""
    from backend_equipment.equipment_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_equipment_logs_decimals():
    """Loggers bound to an equipment id accept Decimal fields."""
    from backend_equipment.equipment_logging import bind_equipment

    logger = bind_equipment(7)
    logger.info("risk_calculated", risk_score=Decimal("56.67"), risk_level="MEDIUM")
