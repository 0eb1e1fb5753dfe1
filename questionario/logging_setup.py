"""Stdout logging for the questionario service.

Module loggers (``questionario.logic.recorder`` and friends) propagate to one
root console handler. The uvicorn loggers get the same handler so server and
application lines share a format.
"""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def build_logging_config(level: str = "INFO") -> Dict[str, Any]:
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
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
            name: {"level": level, "handlers": ["console"], "propagate": False}
            for name in _SERVER_LOGGERS
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Install the console handler, or only retune the level if one exists.

    ``create_app`` runs once per app instance; tests build many apps in one
    process and must not stack handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    dictConfig(build_logging_config(level))


__all__ = ["LOG_FORMAT", "build_logging_config", "configure_logging"]
