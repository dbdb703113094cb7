"""
Alert debounce gate.

Decides, from the new severity and the equipment's previous persisted severity,
whether a reading produces a new AlertEvent:

- any non-LOW level is recorded, even when it repeats the previous level;
- LOW after a non-LOW level is recorded (recovery);
- LOW after LOW or after no history is suppressed.

The previous level is always read from alert history by the caller; the gate
itself holds no state.
"""

from __future__ import annotations

from backend_equipment.risk_engine.models import RiskLevel

RECORD = "record"
SUPPRESS = "suppress"


def should_record(current: RiskLevel, previous: RiskLevel | None) -> bool:
    """Return True when a new AlertEvent must be created for this transition."""
    if current is not RiskLevel.LOW:
        return True
    return previous is not None and previous is not RiskLevel.LOW


def decision(current: RiskLevel, previous: RiskLevel | None) -> str:
    """Gate output as a log-friendly label: 'record' or 'suppress'."""
    return RECORD if should_record(current, previous) else SUPPRESS
