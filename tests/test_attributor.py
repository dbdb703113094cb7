"""
Tests for dominant-factor attribution and the explanation text.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from backend_equipment.risk_engine import (
    Metric,
    RiskWeights,
    SensorReading,
    explain,
    explain_reading,
    normalize_reading,
    primary_factor,
)
from backend_equipment.risk_engine.attributor import format_reading

D = Decimal


def test_explain_temperature_dominant():
    text = explain(D("93.33"), D("90.00"), D("95.00"), D("140"), D("45"), D("95"))
    assert text == "Primary risk factor: Temperature (140.0°C)"


def test_explain_vibration_dominant():
    text = explain(D("10.00"), D("90.00"), D("20.00"), D("15"), D("45"), D("20"))
    assert text == "Primary risk factor: Vibration (45.0 mm/s)"


def test_explain_load_dominant():
    text = explain(D("0.00"), D("0.00"), D("80.00"), D("0"), D("0"), D("80"))
    assert text == "Primary risk factor: Load (80.0%)"


def test_tie_temperature_beats_vibration():
    """Temp 52.5°C -> 35.00*0.40 = 14; vib 20 mm/s -> 40.00*0.35 = 14."""
    assert primary_factor(D("35.00"), D("40.00"), D("10.00")) is Metric.TEMPERATURE
    text = explain(D("35.00"), D("40.00"), D("10.00"), D("52.5"), D("20"), D("10"))
    assert text == "Primary risk factor: Temperature (52.5°C)"


def test_tie_vibration_beats_load():
    """Vib 25 -> 50*0.35 = 17.5; load 70 -> 70*0.25 = 17.5."""
    assert primary_factor(D("0.00"), D("50.00"), D("70.00")) is Metric.VIBRATION
    text = explain(D("0.00"), D("50.00"), D("70.00"), D("0"), D("25"), D("70"))
    assert text == "Primary risk factor: Vibration (25.0 mm/s)"


def test_all_zero_contributions_pick_temperature():
    assert primary_factor(D("0"), D("0"), D("0")) is Metric.TEMPERATURE
    text = explain(D("0.00"), D("0.00"), D("0.00"), D("-10"), D("0"), D("0"))
    assert text == "Primary risk factor: Temperature (-10.0°C)"


def test_attribution_uses_custom_weights():
    weights = RiskWeights(temperature=D("0.10"), vibration=D("0.10"), load=D("0.80"))
    assert primary_factor(D("90.00"), D("90.00"), D("50.00"), weights) is Metric.LOAD


def test_format_reading_rounds_half_up_to_one_place():
    assert format_reading(Metric.TEMPERATURE, D("52.45")) == "52.5°C"
    assert format_reading(Metric.VIBRATION, D("3")) == "3.0 mm/s"
    assert format_reading(Metric.LOAD, D("99.95")) == "100.0%"


def test_explain_reading_quotes_raw_value_of_primary_metric():
    reading = SensorReading(
        equipment_id=1,
        timestamp=datetime(2024, 1, 15, 10, 0),
        temperature=D("0"),
        vibration=D("25"),
        load_percentage=D("70"),
    )
    triple = normalize_reading(reading)
    assert explain_reading(reading, triple) == "Primary risk factor: Vibration (25.0 mm/s)"
    assert reading.raw_value(Metric.LOAD) == D("70")
