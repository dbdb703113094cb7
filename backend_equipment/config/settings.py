"""
Application settings.

Loads configuration from environment variables and .env once at process start
and exposes it as a typed Settings object (database URL, risk weights, API bind,
alert topic). Weights are not hot-reloaded; call reset_settings_for_test() in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from backend_equipment.config.env import (
    get_api_bind,
    get_database_url,
    get_raw_weights,
)
from backend_equipment.core.exceptions import ConfigurationError
from backend_equipment.equipment_logging import get_logger
from backend_equipment.risk_engine.models import RiskWeights

logger = get_logger(__name__)

DEFAULT_ALERT_TOPIC = "/topic/alerts"
DEFAULT_SUBSCRIBER_QUEUE_SIZE = 256


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration."""

    database_url: str
    weight_temperature: Decimal
    weight_vibration: Decimal
    weight_load: Decimal
    api_host: str
    api_port: int
    log_level: str = "INFO"
    alert_topic: str = DEFAULT_ALERT_TOPIC
    subscriber_queue_size: int = DEFAULT_SUBSCRIBER_QUEUE_SIZE

    @property
    def risk_weights(self) -> RiskWeights:
        return RiskWeights(
            temperature=self.weight_temperature,
            vibration=self.weight_vibration,
            load=self.weight_load,
        )


def _parse_weight(name: str, raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}") from e
    if not value.is_finite() or value < 0:
        raise ConfigurationError(f"{name} must be a finite non-negative number, got {raw!r}")
    return value


def load_settings() -> Settings:
    """Build Settings from the environment. Raises ConfigurationError on bad weights."""
    raw_t, raw_v, raw_l = get_raw_weights()
    weights = RiskWeights(
        temperature=_parse_weight("RISK_WEIGHT_TEMPERATURE", raw_t),
        vibration=_parse_weight("RISK_WEIGHT_VIBRATION", raw_v),
        load=_parse_weight("RISK_WEIGHT_LOAD", raw_l),
    )
    if weights.total != Decimal("1"):
        # Weights are used as-is; scores may then exceed the 0-100 scale.
        logger.warning(
            "risk_weights_not_normalized",
            weight_temperature=weights.temperature,
            weight_vibration=weights.vibration,
            weight_load=weights.load,
            total=weights.total,
        )
    host, port = get_api_bind()
    queue_size = int((os.getenv("ALERT_SUBSCRIBER_QUEUE_SIZE") or "").strip() or DEFAULT_SUBSCRIBER_QUEUE_SIZE)
    return Settings(
        database_url=get_database_url(),
        weight_temperature=weights.temperature,
        weight_vibration=weights.vibration,
        weight_load=weights.load,
        api_host=host,
        api_port=port,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        alert_topic=(os.getenv("ALERT_TOPIC") or "").strip() or DEFAULT_ALERT_TOPIC,
        subscriber_queue_size=queue_size,
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the current application settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings_for_test() -> None:
    """Clear cached settings. For tests only; use after monkeypatching env vars."""
    global _settings
    _settings = None
