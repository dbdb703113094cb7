"""
Configuration management for Backend Equipment.

Loads settings from environment variables and an optional .env file. Exposes
a single source of truth for database URL, risk weights, and API bind address.
"""

from backend_equipment.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
