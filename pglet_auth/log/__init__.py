# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Structured logging.

Example:
    >>> from pglet_auth.log import create_logger
    >>> logger = create_logger(logger_type="stdout", level="INFO", name="pglet_auth")
    >>> logger.info("Login initiated", provider="github")
"""

from .factory import create_logger
from .logger import Logger
from .silent_logger import SilentLogger
from .stdout_logger import StdoutLogger
from .uvicorn_config import create_uvicorn_log_config

__all__ = [
    "Logger",
    "SilentLogger",
    "StdoutLogger",
    "create_logger",
    "create_uvicorn_log_config",
]
