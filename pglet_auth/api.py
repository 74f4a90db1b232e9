# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""HTTP surface of the login flow.

``GET /api/oauth/{provider}`` starts a login when called without a
``code`` and completes it when the provider calls back. Every login
failure produces the same ``{"message": "Login failed"}`` body; the
details only go to the log.
"""

from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, Query, Response
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from . import __version__
from .errors import (
    LoginError,
    RedirectNotAllowedError,
    StateExpiredError,
    StateInvalidError,
    UnsupportedProviderError,
)
from .handoff import CookieSessionHandoff, SessionHandoff
from .log import Logger, create_logger
from .service import LoginService
from .settings import Settings

LOGIN_FAILED = "Login failed"


def login_failure_status(error: LoginError) -> int:
    """Map a login error to the HTTP status of the generic failure response."""
    if isinstance(error, UnsupportedProviderError):
        return 404
    if isinstance(error, (RedirectNotAllowedError, StateInvalidError, StateExpiredError)):
        return 400
    return 401


def create_api_router(service: LoginService, handoff: SessionHandoff, logger: Logger) -> APIRouter:
    """Create the ``/api`` router.

    Args:
        service: Login service
        handoff: Session hand-off receiving resolved principals
        logger: Logger for request outcomes

    Returns:
        APIRouter with the login and health routes
    """
    router = APIRouter(prefix="/api")

    def login_failed(provider: str, error: LoginError) -> JSONResponse:
        status_code = login_failure_status(error)
        logger.warning(
            LOGIN_FAILED,
            provider=provider,
            error=type(error).__name__,
            detail=str(error),
            status_code=status_code,
            provider_status_code=getattr(error, "status_code", None),
        )
        return JSONResponse(status_code=status_code, content={"message": LOGIN_FAILED})

    @router.get("/")
    def ping() -> dict[str, str]:
        return {"message": "pong"}

    @router.get("/health")
    def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy" if service.is_ready() else "degraded",
            "service": "pglet-auth",
            "version": __version__,
            "providers": service.enabled_providers(),
            **service.get_stats(),
        }

    @router.get("/oauth/{provider}")
    def oauth(
        provider: str,
        code: Optional[str] = Query(None, description="Authorization code from the provider"),
        state: Optional[str] = Query(None, description="Encoded OAuth state"),
        error: Optional[str] = Query(None, description="Error reported by the provider"),
        error_description: Optional[str] = Query(None),
        redirect_url: Optional[str] = Query(None, description="Post-login destination"),
        groups: bool = Query(False, description="Request group membership"),
        persist: bool = Query(False, description="Keep the login after the browser closes"),
    ) -> Response:
        """Start a login, or complete it on the provider callback."""
        try:
            if error:
                message = f"{provider} returned error: {error}"
                if error_description:
                    message += f" ({error_description})"
                raise LoginError(message)

            if code is None and state is None:
                authorization_url = service.initiate_login(
                    provider,
                    redirect_url=redirect_url,
                    groups=groups,
                    persist=persist,
                )
                return RedirectResponse(url=authorization_url, status_code=302)

            principal, decoded = service.handle_callback(provider, code, state)
            return handoff.accept(principal, decoded)

        except LoginError as e:
            return login_failed(provider, e)
        except Exception as e:
            logger.exception("Unexpected error during login", provider=provider, error=str(e))
            return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @router.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    def not_found(path: str) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": "API endpoint not found"})

    return router


def create_app(
    settings: Settings,
    service: Optional[LoginService] = None,
    handoff: Optional[SessionHandoff] = None,
    logger: Optional[Logger] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings
        service: Login service, built from settings by default
        handoff: Session hand-off, the cookie implementation by default
        logger: Logger, a stdout logger by default

    Returns:
        FastAPI application
    """
    logger = logger or create_logger(level=settings.log_level, name="pglet_auth.api")
    service = service or LoginService(settings, logger=logger)
    handoff = handoff or CookieSessionHandoff(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting pglet auth service", providers=service.enabled_providers())
        yield
        logger.info("Shutting down pglet auth service")

    app = FastAPI(
        title="pglet auth",
        version=__version__,
        description="OAuth login and identity resolution",
        lifespan=lifespan,
    )

    if settings.force_ssl:
        app.add_middleware(HTTPSRedirectMiddleware)

    app.include_router(create_api_router(service, handoff, logger))
    return app
