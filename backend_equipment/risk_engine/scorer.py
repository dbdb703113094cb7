"""
Risk score computation — weighted sum of normalized metrics.

score = norm_t * w_t + norm_v * w_v + norm_l * w_l, rounded to 2 decimal places
(ROUND_HALF_UP) after the sum, not per term. Weights are used exactly as given;
if they do not sum to 1 the score can leave the 0-100 scale.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from backend_equipment.risk_engine.models import NormalizedTriple, RiskWeights

TWO_PLACES = Decimal("0.01")


def score(
    norm_temperature: Decimal,
    norm_vibration: Decimal,
    norm_load: Decimal,
    weights: RiskWeights | None = None,
) -> Decimal:
    """
    Compute the weighted risk score from the three normalized values.

    Args:
        norm_temperature: Normalized temperature (0-100).
        norm_vibration: Normalized vibration (0-100).
        norm_load: Normalized load (0-100).
        weights: Scoring coefficients; defaults to 0.40 / 0.35 / 0.25.

    Returns:
        Decimal score with exactly two decimal places.
    """
    w = weights or RiskWeights()
    total = (
        norm_temperature * w.temperature
        + norm_vibration * w.vibration
        + norm_load * w.load
    )
    return total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def score_triple(triple: NormalizedTriple, weights: RiskWeights | None = None) -> Decimal:
    return score(triple.temperature, triple.vibration, triple.load, weights)
