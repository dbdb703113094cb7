"""
Pytest fixtures for equipment risk tests. Uses a temporary SQLite DB per test.
"""

from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def equipment_db(tmp_path, monkeypatch):
    """
    Point the database layer at a temporary SQLite DB and init tables.
    Resets engine, settings and broadcaster caches so each test gets a fresh state.
    Unset EQUIPMENT_DB_URL / DATABASE_URL so we use SQLite.
    """
    monkeypatch.delenv("EQUIPMENT_DB_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    for name in ("RISK_WEIGHT_TEMPERATURE", "RISK_WEIGHT_VIBRATION", "RISK_WEIGHT_LOAD"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "equipment.db"))

    from backend_equipment.alerts.notifier import reset_broadcaster_for_test
    from backend_equipment.api_server.server import reset_pipeline_for_test
    from backend_equipment.config.settings import reset_settings_for_test
    from backend_equipment.database import init_db, reset_engine_for_test

    reset_settings_for_test()
    reset_engine_for_test()
    reset_broadcaster_for_test()
    reset_pipeline_for_test()
    init_db()
    yield
    reset_engine_for_test()
    reset_pipeline_for_test()
    reset_broadcaster_for_test()
    reset_settings_for_test()


@pytest.fixture
def client(equipment_db):
    """FastAPI TestClient. Depends on equipment_db so temp DB is set before app runs."""
    from fastapi.testclient import TestClient

    from backend_equipment.api_server.server import app

    return TestClient(app)


@pytest.fixture
def turbine(equipment_db):
    """One stored piece of equipment."""
    from backend_equipment.database import EquipmentRepository

    return EquipmentRepository().create("Turbine A", "TURBINE", location="Hall 1")


@pytest.fixture
def base_time():
    return datetime(2024, 1, 15, 10, 0, 0)
