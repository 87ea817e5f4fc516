"""
Logging configuration for the inventory service.

One call to configure_logging() at startup sets the root handler and format,
and pins third-party loggers that are too chatty at INFO.
"""

import logging
import os

from core.config import settings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def configure_logging():
    """Configure logging for the application."""
    log_level = getattr(logging, settings.log_level, logging.INFO)

    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    loggers_config = {
        "services": os.getenv("LOG_LEVEL_SERVICES", settings.log_level).upper(),
        "db": os.getenv("LOG_LEVEL_DB", settings.log_level).upper(),
        "uvicorn.access": os.getenv("LOG_LEVEL_ACCESS", "WARNING").upper(),
    }
    # DATABASE_ECHO turns the engine logger up on its own
    if not settings.database_echo:
        loggers_config["sqlalchemy.engine"] = "WARNING"

    for logger_name, level_name in loggers_config.items():
        logging.getLogger(logger_name).setLevel(getattr(logging, level_name, log_level))
