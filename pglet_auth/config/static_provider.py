# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Static/dictionary-backed configuration provider."""

from typing import Any

from .base import ConfigProvider


class StaticConfigProvider(ConfigProvider):
    """Configuration provider with static values (useful for tests)."""

    def __init__(self, config: dict[str, Any] | None = None):
        self._config = config if config is not None else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._config[key] = value
