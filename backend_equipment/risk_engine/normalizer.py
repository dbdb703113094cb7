"""
Normalization of heterogeneous sensor units onto a common 0-100 scale.

Clamps at the range floor/ceiling, otherwise interpolates linearly and rounds
to 2 decimal places (ROUND_HALF_UP). Total: out-of-range input is clamped, never rejected.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from backend_equipment.risk_engine.models import Metric, NormalizedTriple, SensorReading

SCALE_MIN = Decimal("0")
SCALE_MAX = Decimal("100")
TWO_PLACES = Decimal("0.01")

# Fixed per-metric ranges (min, max)
METRIC_RANGES: dict[Metric, tuple[Decimal, Decimal]] = {
    Metric.TEMPERATURE: (Decimal("0"), Decimal("150")),
    Metric.VIBRATION: (Decimal("0"), Decimal("50")),
    Metric.LOAD: (Decimal("0"), Decimal("100")),
}


def normalize(value: Decimal, range_min: Decimal, range_max: Decimal) -> Decimal:
    """
    Map value into [0, 100] given range_min < range_max.

    value <= range_min -> 0; value >= range_max -> 100; otherwise
    (value - range_min) * 100 / (range_max - range_min), rounded half-up to 0.01.
    """
    value = Decimal(value)
    if value <= range_min:
        return SCALE_MIN.quantize(TWO_PLACES)
    if value >= range_max:
        return SCALE_MAX.quantize(TWO_PLACES)
    scaled = (value - range_min) * SCALE_MAX / (range_max - range_min)
    return scaled.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def normalize_metric(metric: Metric, value: Decimal) -> Decimal:
    range_min, range_max = METRIC_RANGES[metric]
    return normalize(value, range_min, range_max)


def normalize_reading(reading: SensorReading) -> NormalizedTriple:
    """Normalize all three metrics of a reading with the fixed ranges."""
    return NormalizedTriple(
        temperature=normalize_metric(Metric.TEMPERATURE, reading.temperature),
        vibration=normalize_metric(Metric.VIBRATION, reading.vibration),
        load=normalize_metric(Metric.LOAD, reading.load_percentage),
    )
