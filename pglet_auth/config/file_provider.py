# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""YAML file-backed configuration provider."""

import os
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from .base import ConfigProvider

CONFIG_FILE_NAME = "config.yaml"


def default_config_paths() -> list[Path]:
    """Return the directories searched for ``config.yaml``, in order."""
    if sys.platform == "win32":
        paths = [
            Path(os.getenv("ProgramData", "")) / "pglet",
            Path(os.getenv("USERPROFILE", "")) / ".pglet",
        ]
    else:
        paths = [
            Path("/etc/pglet"),
            Path.home() / ".config" / "pglet",
        ]
    paths.append(Path("."))
    return paths


def find_config_file(search_paths: Optional[list[Path]] = None) -> Optional[Path]:
    """Find the first existing config file in the search paths."""
    for directory in search_paths if search_paths is not None else default_config_paths():
        candidate = Path(directory) / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


class FileConfigProvider(ConfigProvider):
    """Configuration provider that reads a YAML file.

    Keys are case-insensitive. Dot-separated keys walk nested mappings,
    so ``REDIS.ADDR`` reads ``redis: {addr: ...}``; a flat ``redis.addr``
    key is matched first.

    Attributes:
        path: Path of the loaded file, None when no file was given
    """

    def __init__(self, path: Optional[Path | str] = None):
        """Load the configuration file.

        Args:
            path: YAML file to read; None yields an empty provider

        Raises:
            ValueError: If the file exists but is not a YAML mapping
        """
        self.path = Path(path) if path is not None else None
        self._config: dict[str, Any] = {}

        if self.path is None:
            return

        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {self.path} must contain a mapping at the top level")

        self._config = _lower_keys(data)

    def get(self, key: str, default: Any = None) -> Any:
        key = key.lower()
        if key in self._config:
            value = self._config[key]
            return default if value is None else value

        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]

        return default if value is None else value
