"""Logging configuration for the questionnaire service.

One stdout handler on the root logger; every record carries the id of the
HTTP request that produced it (``-`` outside a request).
"""
from __future__ import annotations

import logging
from contextvars import ContextVar
from logging.config import dictConfig

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def _dict_config(level: str) -> dict:
    console = {"level": level, "handlers": ["console"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "filters": ["request_id"],
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn.error": console,
            "uvicorn.access": console,
            "sqlalchemy.engine": {"level": "WARNING", "propagate": True},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Install the console handler once; later calls only move the level.

    pytest and uvicorn's reloader both call into here more than once.
    """
    level = (level or "INFO").upper()
    root = logging.getLogger()
    if any(isinstance(f, RequestIdFilter) for h in root.handlers for f in h.filters):
        root.setLevel(level)
        return
    if root.handlers:
        # Someone else (pytest's caplog, a host process) owns the handlers
        root.setLevel(level)
        return
    dictConfig(_dict_config(level))


__all__ = ["configure_logging", "request_id_var", "RequestIdFilter"]
