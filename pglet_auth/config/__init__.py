# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Configuration providers.

Values are looked up by stable key names. The layered provider reads the
environment first and the YAML config file second.
"""

from .base import ConfigProvider
from .env_provider import EnvConfigProvider
from .factory import create_config_provider
from .file_provider import FileConfigProvider, default_config_paths, find_config_file
from .layered_provider import LayeredConfigProvider
from .static_provider import StaticConfigProvider

__all__ = [
    "ConfigProvider",
    "EnvConfigProvider",
    "FileConfigProvider",
    "LayeredConfigProvider",
    "StaticConfigProvider",
    "create_config_provider",
    "default_config_paths",
    "find_config_file",
]
