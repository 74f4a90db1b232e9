# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""In-memory logger for tests."""

import sys
from typing import Any

from .logger import Logger


class SilentLogger(Logger):
    """Keeps every entry in ``logs`` and prints nothing.

    Entries are recorded at all levels regardless of ``level``, so tests
    can assert on debug output too. ``exception()`` calls made inside an
    ``except`` block also record the exception as ``"Type: message"``.
    """

    def __init__(self, level: str = "INFO", name: str | None = None):
        self.level = level.upper()
        self.name = name or "pglet_auth"
        self.logs: list[dict[str, Any]] = []

    def _emit(self, level: str, message: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        entry: dict[str, Any] = {"level": level, "message": message}
        if fields:
            entry["extra"] = dict(fields)

        error = sys.exc_info()[1] if exc_info else None
        if error is not None:
            entry["exception"] = f"{type(error).__name__}: {error}"

        self.logs.append(entry)

    def clear_logs(self) -> None:
        self.logs.clear()

    def get_logs(self, level: str | None = None) -> list[dict[str, Any]]:
        if level is None:
            return self.logs
        return [entry for entry in self.logs if entry["level"] == level]

    def has_log(self, message: str, level: str | None = None) -> bool:
        """Check for an entry whose message contains ``message``."""
        return any(message in entry["message"] for entry in self.get_logs(level))
