# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""OAuth token value and the token retrieval contract."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OAuthToken:
    """Access token returned by a provider's token endpoint.

    Attributes:
        access_token: Bearer token used for provider API calls
        token_type: Token type, normally "Bearer"
        refresh_token: Refresh token if the provider issued one
        expires_at: Unix time the access token expires, None if unknown
    """
    access_token: str
    token_type: str = "Bearer"
    refresh_token: str | None = None
    expires_at: float | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "OAuthToken":
        """Build a token from a token endpoint JSON response."""
        expires_in = data.get("expires_in")
        expires_at = None
        if expires_in:
            try:
                expires_at = time.time() + float(expires_in)
            except (TypeError, ValueError):
                expires_at = None
        return cls(
            access_token=data.get("access_token") or "",
            token_type=data.get("token_type") or "Bearer",
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
        )

    @property
    def valid(self) -> bool:
        if not self.access_token:
            return False
        return self.expires_at is None or self.expires_at > time.time()


class TokenSource(ABC):
    """Retrieves the OAuth token bound to a principal's login."""

    @abstractmethod
    def get_token(self) -> OAuthToken | None:
        """Return the current token, or None if there is none.

        Raises:
            Exception: Any retrieval failure; callers treat it as
                "token unavailable"
        """
        pass


class StaticTokenSource(TokenSource):
    """Token source holding a token obtained from a code exchange."""

    def __init__(self, token: OAuthToken | None):
        self._token = token

    def get_token(self) -> OAuthToken | None:
        return self._token
