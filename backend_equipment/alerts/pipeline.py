"""
Alert pipeline — per-reading orchestration of scoring, debouncing, persistence, and push.

For each SensorReading: look up the equipment name, normalize the three metrics,
score, classify, explain, consult the debounce gate against the latest persisted
AlertEvent, save a new AlertEvent when the gate says so, and push HIGH/CRITICAL
assessments to subscribers. The RiskAssessment is always returned.

Processing for one equipment id is serialized with a per-id lock so the
read-latest / decide / write sequence is race-free inside one process; different
equipment ids never contend. The saved event is durable before any push, and a
failed push never undoes it.
"""

from __future__ import annotations

import threading
from decimal import Decimal
from typing import Any, Protocol

from backend_equipment.alerts.debounce import decision, should_record
from backend_equipment.core.exceptions import AlertPersistenceError
from backend_equipment.database.models import AlertEvent, EquipmentRecord
from backend_equipment.equipment_logging import get_logger
from backend_equipment.risk_engine.attributor import explain_reading
from backend_equipment.risk_engine.classifier import classify
from backend_equipment.risk_engine.models import (
    RiskAssessment,
    RiskLevel,
    RiskWeights,
    SensorReading,
)
from backend_equipment.risk_engine.normalizer import normalize_reading
from backend_equipment.risk_engine.scorer import score_triple

logger = get_logger(__name__)

UNKNOWN_EQUIPMENT_NAME = "Unknown"
DEFAULT_ALERT_TOPIC = "/topic/alerts"
# Levels pushed to real-time subscribers
BROADCAST_LEVELS = frozenset({RiskLevel.HIGH, RiskLevel.CRITICAL})


class EquipmentLookup(Protocol):
    def find_equipment(self, equipment_id: int) -> EquipmentRecord | None: ...


class AlertHistoryStore(Protocol):
    def latest_alert_event(self, equipment_id: int) -> AlertEvent | None: ...

    def save_alert_event(self, event: AlertEvent) -> AlertEvent: ...


class NotificationChannel(Protocol):
    def publish(self, topic: str, payload: Any) -> Any: ...


class KeyedLocks:
    """Lazily created lock per key; the registry itself is guarded by one lock."""

    def __init__(self) -> None:
        self._locks: dict[Any, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: Any) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class AlertPipeline:
    """
    Composition root for risk scoring and alert debouncing.

    Collaborators are injected: equipment lookup (display name only), alert
    history store (debounce reference + append), and notification channel.
    """

    def __init__(
        self,
        equipment: EquipmentLookup,
        history: AlertHistoryStore,
        notifier: NotificationChannel | None = None,
        *,
        weights: RiskWeights | None = None,
        alert_topic: str = DEFAULT_ALERT_TOPIC,
    ) -> None:
        self._equipment = equipment
        self._history = history
        self._notifier = notifier
        self.weights = weights or RiskWeights()
        self.alert_topic = alert_topic
        self._locks = KeyedLocks()

    def process(self, reading: SensorReading) -> RiskAssessment:
        """
        Score one reading, record an AlertEvent if the debounce gate says so,
        and push HIGH/CRITICAL results. Raises AlertPersistenceError when alert
        history cannot be read or written.
        """
        equipment_name = self._lookup_name(reading.equipment_id)

        triple = normalize_reading(reading)
        risk_score = score_triple(triple, self.weights)
        risk_level = classify(risk_score)
        reason = explain_reading(reading, triple, self.weights)
        logger.info(
            "risk_calculated",
            equipment_id=reading.equipment_id,
            risk_score=risk_score,
            risk_level=risk_level.value,
            reason=reason,
        )

        with self._locks.get(reading.equipment_id):
            recorded = self._record_if_needed(reading, risk_score, risk_level, reason)

        assessment = RiskAssessment(
            equipment_id=reading.equipment_id,
            equipment_name=equipment_name,
            timestamp=reading.timestamp,
            risk_score=risk_score,
            risk_level=risk_level,
            reason=reason,
            temperature=reading.temperature,
            vibration=reading.vibration,
            load_percentage=reading.load_percentage,
            alert_recorded=recorded,
        )

        if risk_level in BROADCAST_LEVELS:
            self._broadcast(assessment)

        return assessment

    def _lookup_name(self, equipment_id: int) -> str:
        record = self._equipment.find_equipment(equipment_id)
        if record is None:
            logger.warning("equipment_not_found", equipment_id=equipment_id)
            return UNKNOWN_EQUIPMENT_NAME
        return record.name

    def _record_if_needed(
        self,
        reading: SensorReading,
        risk_score: Decimal,
        risk_level: RiskLevel,
        reason: str,
    ) -> bool:
        try:
            latest = self._history.latest_alert_event(reading.equipment_id)
        except Exception as e:
            raise AlertPersistenceError(
                f"Could not read alert history for equipment {reading.equipment_id}: {e}"
            ) from e

        previous = latest.risk_level if latest is not None else None
        if not should_record(risk_level, previous):
            logger.debug(
                "alert_event_suppressed",
                equipment_id=reading.equipment_id,
                risk_level=risk_level.value,
                previous_level=previous.value if previous else None,
            )
            return False

        event = AlertEvent(
            equipment_id=reading.equipment_id,
            timestamp=reading.timestamp,
            risk_score=risk_score,
            risk_level=risk_level,
            reason=reason,
        )
        try:
            saved = self._history.save_alert_event(event)
        except Exception as e:
            raise AlertPersistenceError(
                f"Could not save alert event for equipment {reading.equipment_id}: {e}"
            ) from e

        logger.info(
            "alert_event_recorded",
            equipment_id=reading.equipment_id,
            alert_event_id=saved.id,
            risk_level=risk_level.value,
            previous_level=previous.value if previous else None,
            gate=decision(risk_level, previous),
        )
        return True

    def _broadcast(self, assessment: RiskAssessment) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.publish(self.alert_topic, assessment.to_dict())
            logger.info(
                "alert_broadcast",
                equipment_id=assessment.equipment_id,
                equipment_name=assessment.equipment_name,
                risk_level=assessment.risk_level.value,
                topic=self.alert_topic,
            )
        except Exception as e:
            logger.error(
                "alert_broadcast_failed",
                equipment_id=assessment.equipment_id,
                risk_level=assessment.risk_level.value,
                error=str(e),
            )


def build_default_pipeline() -> AlertPipeline:
    """Wire the pipeline to the SQLAlchemy repositories, the process broadcaster, and configured weights."""
    from backend_equipment.alerts.notifier import get_broadcaster
    from backend_equipment.config import get_settings
    from backend_equipment.database.repositories import AlertEventRepository, EquipmentRepository

    settings = get_settings()
    return AlertPipeline(
        EquipmentRepository(),
        AlertEventRepository(),
        get_broadcaster(),
        weights=settings.risk_weights,
        alert_topic=settings.alert_topic,
    )
