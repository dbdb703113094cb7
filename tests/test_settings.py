"""
Tests for environment-driven settings (weights, database URL, API bind).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from backend_equipment.config.env import get_database_url, mask_database_url
from backend_equipment.config.settings import load_settings
from backend_equipment.core.exceptions import ConfigurationError

WEIGHT_VARS = ("RISK_WEIGHT_TEMPERATURE", "RISK_WEIGHT_VIBRATION", "RISK_WEIGHT_LOAD")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in WEIGHT_VARS + ("EQUIPMENT_DB_URL", "DATABASE_URL", "DATABASE_PATH", "ALERT_TOPIC"):
        monkeypatch.delenv(name, raising=False)


def test_default_weights():
    settings = load_settings()
    assert settings.weight_temperature == Decimal("0.40")
    assert settings.weight_vibration == Decimal("0.35")
    assert settings.weight_load == Decimal("0.25")
    assert settings.alert_topic == "/topic/alerts"


def test_weights_from_env(monkeypatch):
    monkeypatch.setenv("RISK_WEIGHT_TEMPERATURE", "0.5")
    monkeypatch.setenv("RISK_WEIGHT_VIBRATION", "0.3")
    monkeypatch.setenv("RISK_WEIGHT_LOAD", "0.2")
    settings = load_settings()
    assert settings.weight_temperature == Decimal("0.5")
    assert settings.weight_vibration == Decimal("0.3")
    assert settings.weight_load == Decimal("0.2")


def test_weights_not_summing_to_one_are_kept(monkeypatch):
    monkeypatch.setenv("RISK_WEIGHT_TEMPERATURE", "1")
    settings = load_settings()
    assert settings.weight_temperature == Decimal("1")


@pytest.mark.parametrize("raw", ["abc", "-0.1", "NaN"])
def test_invalid_weight_raises(monkeypatch, raw):
    monkeypatch.setenv("RISK_WEIGHT_LOAD", raw)
    with pytest.raises(ConfigurationError, match="RISK_WEIGHT_LOAD"):
        load_settings()


def test_database_url_precedence(monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", "/tmp/x.db")
    assert get_database_url() == "sqlite:////tmp/x.db"
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/equipment")
    assert get_database_url() == "postgresql://u:p@db:5432/equipment"
    monkeypatch.setenv("EQUIPMENT_DB_URL", "sqlite:///override.db")
    assert get_database_url() == "sqlite:///override.db"


def test_mask_database_url_hides_credentials():
    assert mask_database_url("postgresql://user:secret@db:5432/equipment?sslmode=require") == "db:5432/equipment"


def test_settings_expose_risk_weights(monkeypatch):
    monkeypatch.setenv("RISK_WEIGHT_TEMPERATURE", "0.6")
    weights = load_settings().risk_weights
    assert weights.temperature == Decimal("0.6")
    assert weights.total == Decimal("1.20")
