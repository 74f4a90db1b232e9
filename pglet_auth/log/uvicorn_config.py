# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Uvicorn ``log_config`` writing the same JSON lines as StdoutLogger."""

import logging
from typing import Any, Dict

from .stdout_logger import format_entry


class JSONFormatter(logging.Formatter):
    """Formats uvicorn records as JSON lines under one service name.

    A record carrying an exception gets the formatted traceback in the
    ``traceback`` field.
    """

    def __init__(self, logger_name: str = "uvicorn"):
        super().__init__()
        self.logger_name = logger_name

    def format(self, record: logging.LogRecord) -> str:
        fields = dict(getattr(record, "extra", None) or {})
        if record.exc_info:
            fields["traceback"] = self.formatException(record.exc_info)
        return format_entry(record.levelname, self.logger_name, record.getMessage(), fields)


def _stdout_logger(level: str) -> Dict[str, Any]:
    return {"handlers": ["console"], "level": level, "propagate": False}


def create_uvicorn_log_config(service_name: str, log_level: str = "INFO") -> Dict[str, Any]:
    """Create a dictConfig for uvicorn's loggers.

    ``uvicorn`` and ``uvicorn.error`` are limited to ``log_level``. The
    access logger is set to DEBUG, so one access line is written per
    request whatever ``log_level`` is; pass ``access_log=False`` to
    ``uvicorn.run`` to turn them off.

    Example:
        >>> log_config = create_uvicorn_log_config("pglet-auth", "INFO")
        >>> uvicorn.run(app, host="0.0.0.0", port=5000, log_config=log_config)
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter, "logger_name": service_name},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": _stdout_logger(log_level),
            "uvicorn.error": _stdout_logger(log_level),
            "uvicorn.access": _stdout_logger("DEBUG"),
        },
    }
