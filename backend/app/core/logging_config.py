"""Structured JSON logging configuration.

Every record is one JSON object on stdout. Barter services log transitions
with the barter id and acting user in the message; request logs carry the
fields added by ``RequestLoggingMiddleware`` as extra keys.
"""

import logging
import sys

from pythonjsonlogger import jsonlogger

from app.core.config import settings

_NOISY_LOGGERS = ("uvicorn.access", "httpx", "sqlalchemy.engine")


def setup_logging(level: str | None = None) -> None:
    """Install the JSON handler on the root logger.

    ``level`` defaults to ``settings.log_level`` (APP_LOG_LEVEL).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or settings.log_level).upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
