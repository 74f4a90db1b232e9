# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Environment-backed configuration provider."""

import os
from typing import Any, Mapping, Optional

from .base import ConfigProvider

DEFAULT_ENV_PREFIX = "PGLET_"


class EnvConfigProvider(ConfigProvider):
    """Configuration provider that reads from environment variables.

    Key ``REDIS.ADDR`` is looked up as ``PGLET_REDIS_ADDR``.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None, prefix: str = DEFAULT_ENV_PREFIX):
        self._environ = environ if environ is not None else os.environ
        self._prefix = prefix

    def env_name(self, key: str) -> str:
        return f"{self._prefix}{key}".replace(".", "_").upper()

    def get(self, key: str, default: Any = None) -> Any:
        return self._environ.get(self.env_name(key), default)
