# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Configuration provider that overlays several providers."""

from typing import Any

from .base import ConfigProvider


class LayeredConfigProvider(ConfigProvider):
    """Looks a key up in each provider in turn; the first hit wins.

    Pass the environment provider before the file provider so environment
    values take precedence.
    """

    def __init__(self, *providers: ConfigProvider):
        self.providers = list(providers)

    def get(self, key: str, default: Any = None) -> Any:
        for provider in self.providers:
            value = provider.get(key)
            if value is not None:
                return value
        return default
