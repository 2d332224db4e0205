"""Logging configuration"""

import logging
import logging.config

from .config import settings

def setup_logging() -> None:
    """Configure root and library loggers once per process"""
    level = "DEBUG" if settings.DEBUG else "INFO"

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            "sqlalchemy.engine": {"level": "INFO" if settings.DATABASE_ECHO else "WARNING"},
            "aiosmtplib": {"level": "WARNING"},
        },
    })
