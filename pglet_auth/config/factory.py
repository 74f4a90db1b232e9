# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Factory helpers for configuration providers."""

from typing import Optional

from .base import ConfigProvider
from .env_provider import EnvConfigProvider
from .file_provider import FileConfigProvider, find_config_file
from .layered_provider import LayeredConfigProvider
from .static_provider import StaticConfigProvider


def create_config_provider(provider_type: Optional[str] = None, **kwargs) -> ConfigProvider:
    """Create a configuration provider by type.

    Args:
        provider_type: Type of config provider (required).
                      Options: "env", "file", "static", "layered"
        **kwargs: Provider-specific parameters:
            - env: environ (optional), prefix (optional)
            - file: path (optional, searched for when omitted)
            - static: config (optional)
            - layered: environ, prefix, path as above

    Returns:
        ConfigProvider instance

    Raises:
        ValueError: If provider_type is unknown or missing
    """
    if not provider_type:
        raise ValueError(
            "provider_type parameter is required. "
            "Must be one of: env, file, static, layered"
        )

    provider_type = provider_type.lower()

    env_kwargs = {k: kwargs[k] for k in ("environ", "prefix") if k in kwargs}

    if provider_type == "env":
        return EnvConfigProvider(**env_kwargs)
    if provider_type == "file":
        return FileConfigProvider(kwargs.get("path") or find_config_file())
    if provider_type == "static":
        return StaticConfigProvider(kwargs.get("config"))
    if provider_type == "layered":
        # Environment wins over the config file
        return LayeredConfigProvider(
            EnvConfigProvider(**env_kwargs),
            FileConfigProvider(kwargs.get("path") or find_config_file()),
        )

    raise ValueError(
        f"Unknown provider_type: {provider_type}. "
        f"Must be one of: env, file, static, layered"
    )
