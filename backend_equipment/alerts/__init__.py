"""
Alert pipeline — debounce gate, notification channel, per-reading orchestration.

Turns a scored reading into at most one persisted AlertEvent (debounced against
the latest stored level) and pushes HIGH/CRITICAL assessments to subscribers.
"""

from backend_equipment.alerts.debounce import should_record
from backend_equipment.alerts.notifier import AlertBroadcaster, Subscription, get_broadcaster
from backend_equipment.alerts.pipeline import (
    AlertPipeline,
    KeyedLocks,
    build_default_pipeline,
)

__all__ = [
    "should_record",
    "AlertBroadcaster",
    "Subscription",
    "get_broadcaster",
    "AlertPipeline",
    "KeyedLocks",
    "build_default_pipeline",
]
