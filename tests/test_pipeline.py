"""
Tests for the alert pipeline: scoring, debounced persistence, and push.

Uses in-memory collaborators so persistence and notification can be observed
and made to fail.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from backend_equipment.alerts.pipeline import AlertPipeline, KeyedLocks
from backend_equipment.core.exceptions import AlertPersistenceError
from backend_equipment.database.models import AlertEvent, EquipmentRecord
from backend_equipment.risk_engine import RiskLevel, RiskWeights, SensorReading

D = Decimal
T0 = datetime(2024, 1, 15, 10, 0, 0)

CRITICAL = (D("140"), D("45"), D("95"))
HIGH = (D("100"), D("30"), D("70"))
MEDIUM = (D("100"), D("25"), D("50"))
LOW = (D("20"), D("5"), D("10"))


class InMemoryEquipment:
    def __init__(self, records=None):
        self.records = {r.id: r for r in (records or [])}

    def find_equipment(self, equipment_id):
        return self.records.get(equipment_id)


class InMemoryHistory:
    def __init__(self):
        self.events: list[AlertEvent] = []
        self._lock = threading.Lock()

    def latest_alert_event(self, equipment_id):
        with self._lock:
            matching = [e for e in self.events if e.equipment_id == equipment_id]
        if not matching:
            return None
        return max(matching, key=lambda e: (e.timestamp, e.id))

    def save_alert_event(self, event):
        with self._lock:
            saved = AlertEvent(
                equipment_id=event.equipment_id,
                timestamp=event.timestamp,
                risk_score=event.risk_score,
                risk_level=event.risk_level,
                reason=event.reason,
                id=len(self.events) + 1,
            )
            self.events.append(saved)
        return saved

    def for_equipment(self, equipment_id):
        return [e for e in self.events if e.equipment_id == equipment_id]


def reading(values, equipment_id=1, offset=0):
    temperature, vibration, load = values
    return SensorReading(
        equipment_id=equipment_id,
        timestamp=T0 + timedelta(minutes=offset),
        temperature=temperature,
        vibration=vibration,
        load_percentage=load,
    )


@pytest.fixture
def history():
    return InMemoryHistory()


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def pipeline(history, notifier):
    equipment = InMemoryEquipment([EquipmentRecord(id=1, name="Turbine A", type="TURBINE")])
    return AlertPipeline(equipment, history, notifier)


def test_critical_reading_records_and_pushes(pipeline, history, notifier):
    result = pipeline.process(reading(CRITICAL))
    assert result.risk_score == D("92.58")
    assert result.risk_level is RiskLevel.CRITICAL
    assert result.reason == "Primary risk factor: Temperature (140.0°C)"
    assert result.equipment_name == "Turbine A"
    assert result.alert_recorded is True
    assert len(history.events) == 1
    event = history.events[0]
    assert event.risk_level is RiskLevel.CRITICAL
    assert event.risk_score == D("92.58")
    assert event.timestamp == T0
    notifier.publish.assert_called_once()
    topic, payload = notifier.publish.call_args.args
    assert topic == "/topic/alerts"
    assert payload["risk_level"] == "CRITICAL"
    assert payload["equipment_name"] == "Turbine A"
    assert payload["risk_score"] == "92.58"


def test_medium_reading_records_without_push(pipeline, history, notifier):
    result = pipeline.process(reading(MEDIUM))
    assert result.risk_score == D("56.67")
    assert result.risk_level is RiskLevel.MEDIUM
    assert len(history.events) == 1
    notifier.publish.assert_not_called()


def test_low_without_history_records_nothing(pipeline, history, notifier):
    result = pipeline.process(reading(LOW))
    assert result.risk_score == D("11.33")
    assert result.risk_level is RiskLevel.LOW
    assert result.alert_recorded is False
    assert history.events == []
    notifier.publish.assert_not_called()


def test_high_then_low_records_recovery_once(pipeline, history):
    first = pipeline.process(reading(HIGH, offset=0))
    assert first.risk_level is RiskLevel.HIGH
    assert first.risk_score == D("65.17")
    second = pipeline.process(reading(LOW, offset=1))
    third = pipeline.process(reading(LOW, offset=2))
    assert second.alert_recorded is True
    assert third.alert_recorded is False
    assert [e.risk_level for e in history.events] == [RiskLevel.HIGH, RiskLevel.LOW]


def test_repeated_non_low_level_recorded_each_time(pipeline, history):
    pipeline.process(reading(HIGH, offset=0))
    pipeline.process(reading(HIGH, offset=1))
    assert [e.risk_level for e in history.events] == [RiskLevel.HIGH, RiskLevel.HIGH]


def test_push_failure_is_not_fatal(pipeline, history, notifier):
    notifier.publish.side_effect = RuntimeError("broker down")
    result = pipeline.process(reading(CRITICAL))
    assert result.risk_level is RiskLevel.CRITICAL
    assert result.alert_recorded is True
    assert len(history.events) == 1


def test_save_failure_raises_persistence_error(history, notifier):
    history.save_alert_event = MagicMock(side_effect=OSError("disk full"))
    pipeline = AlertPipeline(InMemoryEquipment(), history, notifier)
    with pytest.raises(AlertPersistenceError, match="Could not save alert event"):
        pipeline.process(reading(CRITICAL))
    notifier.publish.assert_not_called()


def test_history_read_failure_raises_persistence_error(history, notifier):
    history.latest_alert_event = MagicMock(side_effect=OSError("db gone"))
    pipeline = AlertPipeline(InMemoryEquipment(), history, notifier)
    with pytest.raises(AlertPersistenceError, match="Could not read alert history"):
        pipeline.process(reading(HIGH))


def test_unknown_equipment_name(history, notifier):
    pipeline = AlertPipeline(InMemoryEquipment(), history, notifier)
    result = pipeline.process(reading(CRITICAL, equipment_id=99))
    assert result.equipment_name == "Unknown"
    assert len(history.for_equipment(99)) == 1
    payload = notifier.publish.call_args.args[1]
    assert payload["equipment_name"] == "Unknown"


def test_without_notifier_still_records(history):
    pipeline = AlertPipeline(InMemoryEquipment(), history)
    result = pipeline.process(reading(CRITICAL))
    assert result.alert_recorded is True
    assert len(history.events) == 1


def test_custom_weights_and_topic(history, notifier):
    weights = RiskWeights(temperature=D("1"), vibration=D("0"), load=D("0"))
    pipeline = AlertPipeline(InMemoryEquipment(), history, notifier, weights=weights, alert_topic="/topic/test")
    result = pipeline.process(reading((D("135"), D("0"), D("0"))))
    assert result.risk_score == D("90.00")
    assert result.risk_level is RiskLevel.CRITICAL
    assert notifier.publish.call_args.args[0] == "/topic/test"


def test_equipment_histories_are_independent(pipeline, history):
    pipeline.process(reading(HIGH, equipment_id=1))
    result = pipeline.process(reading(LOW, equipment_id=2))
    assert result.alert_recorded is False
    assert len(history.for_equipment(1)) == 1
    assert history.for_equipment(2) == []


def test_concurrent_recovery_recorded_once(pipeline, history):
    """Concurrent LOW readings after HIGH: exactly one recovery event."""
    pipeline.process(reading(HIGH, offset=0))
    barrier = threading.Barrier(8)
    errors = []

    def worker(i):
        try:
            barrier.wait()
            pipeline.process(reading(LOW, offset=1 + i))
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    levels = [e.risk_level for e in history.for_equipment(1)]
    assert levels == [RiskLevel.HIGH, RiskLevel.LOW]


def test_keyed_locks_reuse_lock_per_key():
    locks = KeyedLocks()
    assert locks.get(1) is locks.get(1)
    assert locks.get(1) is not locks.get(2)
    assert len(locks) == 2


def test_identical_reading_twice_records_two_events(pipeline, history):
    """Processing the same non-LOW reading twice is not idempotent: two events."""
    same = reading(CRITICAL)
    first = pipeline.process(same)
    second = pipeline.process(same)
    assert first.alert_recorded is True
    assert second.alert_recorded is True
    assert len(history.events) == 2
    assert history.events[0].id != history.events[1].id
    assert history.events[0].timestamp == history.events[1].timestamp
