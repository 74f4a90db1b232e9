# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Logger interface shared by the login service components.

Every log call takes a message plus keyword fields, e.g.
``logger.warning("Login failed", provider="github", status_code=401)``.
The fields travel with the entry instead of being formatted into the
message, so log consumers can filter on them.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def parse_level(level: str) -> str:
    """Return the canonical level name.

    Raises:
        ValueError: If the level is not one of ``LEVELS``
    """
    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of {list(LEVELS)}")
    return name


class Logger(ABC):
    """Base class for structured loggers.

    Subclasses only implement ``_emit``; the level methods are shared.

    Attributes:
        level: Minimum level name
        name: Logger name reported with each entry
    """

    level: str = "INFO"
    name: str = "pglet_auth"

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS[level] >= LEVELS.get(self.level, logging.INFO)

    def debug(self, message: str, **fields: Any) -> None:
        self._emit("DEBUG", message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit("INFO", message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit("WARNING", message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit("ERROR", message, fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR together with the exception currently being handled."""
        self._emit("ERROR", message, fields, exc_info=True)

    @abstractmethod
    def _emit(self, level: str, message: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        """Write one entry.

        Args:
            level: Level name from ``LEVELS``
            message: Log message
            fields: Structured fields, possibly empty
            exc_info: Attach the exception being handled
        """
        pass
