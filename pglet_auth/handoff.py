# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Hand-off of a resolved principal to the session layer."""

import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import jwt
from fastapi import Response
from fastapi.responses import RedirectResponse

from .principal import SecurityPrincipal
from .settings import Settings
from .state import State

_ALGORITHM = "HS256"


class SessionHandoff(ABC):
    """Receives the principal once a login has completed."""

    @abstractmethod
    def accept(self, principal: SecurityPrincipal, state: State) -> Response:
        """Establish the session and build the callback response.

        Args:
            principal: Resolved principal
            state: Decoded login state (redirect target, persistence flag)

        Returns:
            HTTP response sent to the browser
        """
        pass


class CookieSessionHandoff(SessionHandoff):
    """Stores the principal in a signed session cookie and redirects.

    The cookie holds an HS256 JWT signed with ``Settings.cookie_signing_key``:
    the hash key of the first ``COOKIE_SECRETS`` entry ("<hash-key>
    <encrypt-key>"), or a key derived from the master secret when no
    cookie secret other than the shipped default is configured. Persistent
    logins get a cookie that lives for ``PAGE_LIFETIME_MINUTES``; other
    logins get a browser-session cookie.
    """

    def __init__(self, settings: Settings):
        signing_key = settings.cookie_signing_key
        if not signing_key:
            raise ValueError("Session cookies need COOKIE_SECRETS or MASTER_SECRET_KEY")

        self.cookie_name = settings.cookie_name
        self.lifetime_seconds = settings.page_lifetime_minutes * 60
        self.secure = settings.force_ssl
        self._signing_key = signing_key

    def encode(self, principal: SecurityPrincipal, now: Optional[float] = None) -> str:
        issued_at = int(now if now is not None else time.time())
        payload = principal.to_dict()
        payload["sub"] = principal.qualified_id
        payload["iat"] = issued_at
        payload["exp"] = issued_at + self.lifetime_seconds
        return jwt.encode(payload, self._signing_key, algorithm=_ALGORITHM)

    def decode(self, value: str) -> dict[str, Any]:
        """Verify a session cookie value and return its claims.

        Raises:
            jwt.InvalidTokenError: If the cookie is invalid or expired
        """
        return jwt.decode(value, self._signing_key, algorithms=[_ALGORITHM])

    def accept(self, principal: SecurityPrincipal, state: State) -> Response:
        response = RedirectResponse(url=state.redirect_url or "/", status_code=302)
        response.set_cookie(
            key=self.cookie_name,
            value=self.encode(principal),
            max_age=self.lifetime_seconds if state.persist_login else None,
            httponly=True,
            secure=self.secure,
            samesite="lax",
            path="/",
        )
        return response
