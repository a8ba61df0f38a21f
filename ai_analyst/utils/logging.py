"""Structured logging configuration for the AI Analyst."""

from __future__ import annotations

import logging
import sys
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Render log records as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        line = " ".join(f"{key}={value}" for key, value in log_data.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str) -> logging.Logger:
    """Return a logger that writes structured lines to stderr.

    The handler is attached only once per logger. The level follows
    ``ANALYST_ENV``: DEBUG in ``dev``, INFO elsewhere.
    """

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        try:
            from ..config import get_settings

            env = get_settings().ANALYST_ENV
        except Exception:  # pragma: no cover - invalid environment
            env = "prod"
        logger.setLevel(logging.DEBUG if env == "dev" else logging.INFO)

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """Log ``msg`` with extra ``key=value`` fields."""

    logger.log(level, msg, extra={"extra_data": kwargs})
