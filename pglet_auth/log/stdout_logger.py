# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Stdout logger implementation with structured JSON output."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .logger import LEVELS, Logger, parse_level


def format_entry(level: str, logger_name: str, message: str, extra: dict[str, Any] | None = None) -> str:
    """Render one log entry as a JSON line."""
    entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": level,
        "logger": logger_name,
        "message": message,
    }
    if extra:
        entry["extra"] = extra
    return json.dumps(entry, default=str)


class StdoutLogger(Logger):
    """Logger that outputs structured JSON logs to stdout.

    Records are also emitted through the stdlib ``logging`` module so
    handlers and pytest's ``caplog`` can capture them.
    """

    def __init__(self, level: str = "INFO", name: str | None = None):
        """Initialize stdout logger.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            name: Optional logger name for identification

        Raises:
            ValueError: If the level is not recognized
        """
        self.level = parse_level(level)
        self.name = name or "pglet_auth"

        self._stdlib_logger = logging.getLogger(self.name)
        # Filtering happens in _emit using self.level
        self._stdlib_logger.setLevel(logging.NOTSET)

    def _emit(self, level: str, message: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        if not self.is_enabled_for(level):
            return

        try:
            line = format_entry(level, self.name, message, fields)
        except (TypeError, ValueError) as e:
            print(f"{level}: {message} (JSON serialization failed: {e})", file=sys.stderr, flush=True)
        else:
            print(line, file=sys.stdout, flush=True)

        extra = {"extra": fields} if fields else None
        self._stdlib_logger.log(LEVELS[level], message, exc_info=exc_info, extra=extra)
