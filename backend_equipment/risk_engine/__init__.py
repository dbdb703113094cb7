"""
Risk engine package — normalization, weighted scoring, classification, attribution.

Pure, deterministic functions over Decimal values. No I/O; the alert pipeline
composes them per incoming sensor reading.
"""

from backend_equipment.risk_engine.attributor import (
    ATTRIBUTION_PRIORITY,
    METRIC_UNITS,
    explain,
    explain_reading,
    primary_factor,
)
from backend_equipment.risk_engine.classifier import (
    CRITICAL_THRESHOLD,
    HIGH_THRESHOLD,
    MEDIUM_THRESHOLD,
    classify,
)
from backend_equipment.risk_engine.models import (
    Metric,
    NormalizedTriple,
    RiskAssessment,
    RiskLevel,
    RiskWeights,
    SensorReading,
)
from backend_equipment.risk_engine.normalizer import (
    METRIC_RANGES,
    normalize,
    normalize_reading,
)
from backend_equipment.risk_engine.scorer import score, score_triple

__all__ = [
    "ATTRIBUTION_PRIORITY",
    "METRIC_UNITS",
    "explain",
    "explain_reading",
    "primary_factor",
    "CRITICAL_THRESHOLD",
    "HIGH_THRESHOLD",
    "MEDIUM_THRESHOLD",
    "classify",
    "Metric",
    "NormalizedTriple",
    "RiskAssessment",
    "RiskLevel",
    "RiskWeights",
    "SensorReading",
    "METRIC_RANGES",
    "normalize",
    "normalize_reading",
    "score",
    "score_triple",
]
