"""
Main entrypoint: create tables, then run the FastAPI server.

Env: EQUIPMENT_DB_URL / DATABASE_URL / DATABASE_PATH, RISK_WEIGHT_TEMPERATURE,
RISK_WEIGHT_VIBRATION, RISK_WEIGHT_LOAD, API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT.

API-only (same thing, via uvicorn): uvicorn backend_equipment.api_server.app:app --host 0.0.0.0 --port 8000
"""

import sys

# Configure structured JSON logging before other imports that may log
from backend_equipment.equipment_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings, create tables, and serve the API in the main thread."""
    from backend_equipment.config import get_settings
    from backend_equipment.config.env import mask_database_url
    from backend_equipment.core.exceptions import ConfigurationError

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("main_config_error", message=e.message)
        sys.exit(1)

    from backend_equipment.database import init_db

    init_db()
    logger.info("main_db_ready", database=mask_database_url(settings.database_url))

    from backend_equipment.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
