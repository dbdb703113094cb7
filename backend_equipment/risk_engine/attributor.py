"""
Dominant-factor attribution for human-readable alert explanations.

Each metric contributes norm_x * w_x to the score; the strictly largest
contribution is the primary factor. Equal contributions are resolved by the
fixed priority Temperature > Vibration > Load, never by mapping order.
The explanation quotes the raw (unnormalized) reading with its unit.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from backend_equipment.risk_engine.models import Metric, NormalizedTriple, RiskWeights, SensorReading

ONE_PLACE = Decimal("0.1")

# Tie-break order: earlier wins on equal contribution
ATTRIBUTION_PRIORITY: tuple[Metric, ...] = (
    Metric.TEMPERATURE,
    Metric.VIBRATION,
    Metric.LOAD,
)

METRIC_UNITS: dict[Metric, str] = {
    Metric.TEMPERATURE: "°C",
    Metric.VIBRATION: " mm/s",
    Metric.LOAD: "%",
}


def contributions(
    norm_temperature: Decimal,
    norm_vibration: Decimal,
    norm_load: Decimal,
    weights: RiskWeights,
) -> list[tuple[Metric, Decimal]]:
    """Weighted normalized contribution per metric, in priority order."""
    normalized = {
        Metric.TEMPERATURE: norm_temperature,
        Metric.VIBRATION: norm_vibration,
        Metric.LOAD: norm_load,
    }
    return [(m, normalized[m] * weights.for_metric(m)) for m in ATTRIBUTION_PRIORITY]


def primary_factor(
    norm_temperature: Decimal,
    norm_vibration: Decimal,
    norm_load: Decimal,
    weights: RiskWeights | None = None,
) -> Metric:
    """Return the metric with the strictly largest weighted contribution (first-seen wins ties)."""
    w = weights or RiskWeights()
    ranked = contributions(norm_temperature, norm_vibration, norm_load, w)
    best_metric, best_value = ranked[0]
    for metric, value in ranked[1:]:
        if value > best_value:
            best_metric, best_value = metric, value
    return best_metric


def format_reading(metric: Metric, raw_value: Decimal) -> str:
    rounded = Decimal(raw_value).quantize(ONE_PLACE, rounding=ROUND_HALF_UP)
    return f"{rounded}{METRIC_UNITS[metric]}"


def _reason(metric: Metric, raw_value: Decimal) -> str:
    return f"Primary risk factor: {metric.value} ({format_reading(metric, raw_value)})"


def explain(
    norm_temperature: Decimal,
    norm_vibration: Decimal,
    norm_load: Decimal,
    raw_temperature: Decimal,
    raw_vibration: Decimal,
    raw_load: Decimal,
    weights: RiskWeights | None = None,
) -> str:
    """
    Build the explanation text, e.g. "Primary risk factor: Temperature (140.0°C)".
    """
    metric = primary_factor(norm_temperature, norm_vibration, norm_load, weights)
    raw = {
        Metric.TEMPERATURE: raw_temperature,
        Metric.VIBRATION: raw_vibration,
        Metric.LOAD: raw_load,
    }[metric]
    return _reason(metric, raw)


def explain_reading(
    reading: SensorReading,
    triple: NormalizedTriple,
    weights: RiskWeights | None = None,
) -> str:
    """explain() for a reading and its normalized triple."""
    metric = primary_factor(triple.temperature, triple.vibration, triple.load, weights)
    return _reason(metric, reading.raw_value(metric))
