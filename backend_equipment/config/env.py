"""
Environment variable loading for Backend Equipment.

- EQUIPMENT_DB_URL / DATABASE_URL: SQLAlchemy URL (PostgreSQL etc.)
- DATABASE_PATH: SQLite file used when no URL is set (default: equipment.db)
- RISK_WEIGHT_TEMPERATURE / RISK_WEIGHT_VIBRATION / RISK_WEIGHT_LOAD: scoring weights
- API_HOST / API_PORT: uvicorn bind address
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_equipment/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SQLITE_PATH = "equipment.db"

# Weights for the risk score (temperature, vibration, load)
DEFAULT_WEIGHT_TEMPERATURE = "0.40"
DEFAULT_WEIGHT_VIBRATION = "0.35"
DEFAULT_WEIGHT_LOAD = "0.25"

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000


def load_equipment_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env vars."""
    load_dotenv(_ENV_PATH, override=False)


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def get_database_url() -> str:
    """
    Resolve the database URL.
    Order: EQUIPMENT_DB_URL > DATABASE_URL > sqlite:///<DATABASE_PATH or equipment.db>.
    """
    load_equipment_env()
    url = _env("EQUIPMENT_DB_URL") or _env("DATABASE_URL")
    if url:
        return url
    path = _env("DATABASE_PATH") or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"


def get_raw_weights() -> tuple[str, str, str]:
    """Return (temperature, vibration, load) weight strings from env, falling back to defaults."""
    load_equipment_env()
    return (
        _env("RISK_WEIGHT_TEMPERATURE") or DEFAULT_WEIGHT_TEMPERATURE,
        _env("RISK_WEIGHT_VIBRATION") or DEFAULT_WEIGHT_VIBRATION,
        _env("RISK_WEIGHT_LOAD") or DEFAULT_WEIGHT_LOAD,
    )


def get_api_bind() -> tuple[str, int]:
    """Return (host, port) for the API server."""
    load_equipment_env()
    host = _env("API_HOST") or DEFAULT_API_HOST
    port = int(_env("API_PORT") or DEFAULT_API_PORT)
    return host, port


def mask_database_url(url: str) -> str:
    """Strip credentials and query string from a DB URL for logging."""
    return url.split("?")[0].split("@")[-1].split("//")[-1]
