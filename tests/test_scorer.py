"""
Tests for weighted risk scoring and severity classification.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from backend_equipment.risk_engine import RiskLevel, RiskWeights, classify, score

D = Decimal


def test_score_default_weights():
    """66.67*0.40 + 50*0.35 + 50*0.25 = 56.668 -> 56.67."""
    assert score(D("66.67"), D("50.00"), D("50.00")) == D("56.67")
    assert score(D("93.33"), D("90.00"), D("95.00")) == D("92.58")


def test_score_bounds_with_default_weights():
    assert str(score(D("0.00"), D("0.00"), D("0.00"))) == "0.00"
    assert str(score(D("100.00"), D("100.00"), D("100.00"))) == "100.00"


def test_score_rounds_after_sum():
    """Per-term rounding would give 0.00; rounding the sum gives 0.01."""
    assert score(D("0.01"), D("0.01"), D("0.01")) == D("0.01")


def test_score_uses_weights_as_given():
    """Weights are never renormalized, so the score may exceed 100."""
    weights = RiskWeights(temperature=D("1"), vibration=D("1"), load=D("1"))
    assert score(D("100"), D("100"), D("100"), weights) == D("300.00")
    assert weights.total == D("3")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("100.00", RiskLevel.CRITICAL),
        ("85.00", RiskLevel.CRITICAL),
        ("84.99", RiskLevel.HIGH),
        ("65.00", RiskLevel.HIGH),
        ("64.99", RiskLevel.MEDIUM),
        ("40.00", RiskLevel.MEDIUM),
        ("39.99", RiskLevel.LOW),
        ("0.00", RiskLevel.LOW),
    ],
)
def test_classify_thresholds_inclusive(value, expected):
    assert classify(D(value)) is expected


def test_classify_out_of_scale_scores():
    assert classify(D("300.00")) is RiskLevel.CRITICAL
    assert classify(D("-1")) is RiskLevel.LOW


def test_risk_level_ordering():
    assert RiskLevel.LOW < RiskLevel.MEDIUM < RiskLevel.HIGH < RiskLevel.CRITICAL
    assert max([RiskLevel.HIGH, RiskLevel.CRITICAL, RiskLevel.LOW]) is RiskLevel.CRITICAL
    assert RiskLevel("HIGH") is RiskLevel.HIGH
