#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Logging setup for the service process.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import logging.config

from .config import Settings


# -----------------------------------------------------------------------------

def configure_logging(settings: Settings) -> None:
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "inkwell": {"handlers": ["console"], "level": level, "propagate": False},
            "sqlalchemy.engine": {"level": "INFO" if settings.db_echo else "WARNING"},
        },
    })


# -----------------------------------------------------------------------------
