"""Logging configuration for the CineRate API.

One stdout handler on the root logger; uvicorn's loggers are routed to it so
access lines and application events share one stream. The level comes from
`LOG_LEVEL` (default INFO).
"""

from __future__ import annotations

import logging
import os
from logging.config import dictConfig
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def build_logging_config(level: str = "INFO") -> dict:
    level = level.upper()
    routed = {"level": level, "handlers": ["console"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": _FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "cinerate": {"level": level},
            "uvicorn": dict(routed),
            "uvicorn.error": dict(routed),
            "uvicorn.access": dict(routed),
            # statement echo is governed by DatabaseConfig.echo
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Install the handler once; a root logger that already has handlers is left alone."""
    if logging.getLogger().handlers:
        return
    dictConfig(build_logging_config(level or os.environ.get("LOG_LEVEL", "INFO")))


__all__ = ["build_logging_config", "configure_logging"]
