# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""pglet auth service entry point."""

import argparse
import os
import sys

import uvicorn

from .api import create_app
from .log import create_logger, create_uvicorn_log_config
from .settings import load_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pglet-auth", description="pglet OAuth login service")
    parser.add_argument("--config", help="Path to config.yaml (searched for when omitted)")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    logger = create_logger(level=settings.log_level, name="pglet_auth")

    try:
        settings.validate()
    except ValueError as e:
        logger.error("Invalid configuration", error=str(e))
        return 1

    if not settings.enabled_providers():
        logger.warning("No OAuth providers configured; logins will fail")

    app = create_app(settings, logger=logger)

    uvicorn.run(
        app,
        host=args.host,
        port=settings.server_port,
        log_config=create_uvicorn_log_config("pglet-auth", settings.log_level),
        access_log=True,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
