"""
Severity classification from risk score.

Fixed thresholds with inclusive lower bounds:
score >= 85 CRITICAL, >= 65 HIGH, >= 40 MEDIUM, else LOW.
"""

from __future__ import annotations

from decimal import Decimal

from backend_equipment.risk_engine.models import RiskLevel

CRITICAL_THRESHOLD = Decimal("85")
HIGH_THRESHOLD = Decimal("65")
MEDIUM_THRESHOLD = Decimal("40")

# Highest tier first
_TIERS: tuple[tuple[Decimal, RiskLevel], ...] = (
    (CRITICAL_THRESHOLD, RiskLevel.CRITICAL),
    (HIGH_THRESHOLD, RiskLevel.HIGH),
    (MEDIUM_THRESHOLD, RiskLevel.MEDIUM),
)


def classify(risk_score: Decimal) -> RiskLevel:
    """Map a risk score to its severity tier."""
    for threshold, level in _TIERS:
        if risk_score >= threshold:
            return level
    return RiskLevel.LOW
