"""
Real-time alert notification channel.

In-process pub/sub keyed by topic. Each subscriber gets a bounded deque; when a
slow subscriber's buffer is full the oldest message is dropped so publish never
blocks. Publish is fire-and-forget from the pipeline's point of view.

A subscriber may register an on_message callback (used by the WebSocket relay
to wake its event loop from the publishing thread).
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable

from backend_equipment.equipment_logging import get_logger

logger = get_logger(__name__)

DEFAULT_SUBSCRIBER_QUEUE_SIZE = 256


@dataclass(eq=False)
class Subscription:
    """One subscriber's buffer for a topic."""

    topic: str
    maxlen: int = DEFAULT_SUBSCRIBER_QUEUE_SIZE
    on_message: Callable[[], None] | None = None
    dropped: int = 0
    _buffer: deque = field(default_factory=deque, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self._buffer = deque(maxlen=self.maxlen)

    def push(self, payload: Any) -> None:
        with self._lock:
            if len(self._buffer) == self._buffer.maxlen:
                self.dropped += 1
            self._buffer.append(payload)
        if self.on_message is not None:
            self.on_message()

    def drain(self) -> list[Any]:
        """Return and clear all buffered payloads, oldest first."""
        with self._lock:
            items = list(self._buffer)
            self._buffer.clear()
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)


class AlertBroadcaster:
    """Topic-based fan-out to in-process subscribers."""

    def __init__(self, queue_size: int = DEFAULT_SUBSCRIBER_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        topic: str,
        on_message: Callable[[], None] | None = None,
    ) -> Subscription:
        sub = Subscription(topic=topic, maxlen=self._queue_size, on_message=on_message)
        with self._lock:
            self._subscriptions.setdefault(topic, []).append(sub)
        logger.debug("alert_subscriber_added", topic=topic)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.topic, [])
            if subscription in subs:
                subs.remove(subscription)
        logger.debug("alert_subscriber_removed", topic=subscription.topic)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(topic, []))

    def publish(self, topic: str, payload: Any) -> int:
        """
        Deliver payload to every subscriber of topic. Returns number of subscribers reached.

        A subscriber whose callback raises is logged and skipped; the others still receive.
        """
        with self._lock:
            subs = list(self._subscriptions.get(topic, []))
        reached = 0
        for sub in subs:
            try:
                sub.push(payload)
                reached += 1
            except Exception as e:
                logger.warning("alert_subscriber_failed", topic=topic, error=str(e))
        logger.debug("alert_published", topic=topic, subscribers=len(subs), reached=reached)
        return reached


_broadcaster: AlertBroadcaster | None = None


def get_broadcaster() -> AlertBroadcaster:
    """Process-wide broadcaster shared by the pipeline and the WebSocket endpoint."""
    global _broadcaster
    if _broadcaster is None:
        from backend_equipment.config import get_settings

        _broadcaster = AlertBroadcaster(queue_size=get_settings().subscriber_queue_size)
    return _broadcaster


def reset_broadcaster_for_test() -> None:
    global _broadcaster
    _broadcaster = None
