# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""OAuth state carried across the provider redirect.

The state is a short-lived HS256 JWT signed with a server-held secret, so
a client cannot change the provider, the group request or the login
persistence flag in flight. The redirect URL is integrity protected only;
callers must still check it against the redirect allow-list.
"""

import secrets
import threading
import time
from dataclasses import dataclass
from typing import Any

import jwt

from .errors import StateExpiredError, StateInvalidError

DEFAULT_STATE_TTL_SECONDS = 600

_ALGORITHM = "HS256"
_CLAIMS = ("id", "redirectUrl", "authProvider", "groupsEnabled", "persistLogin")


@dataclass(frozen=True)
class State:
    """Login context carried through the OAuth redirect.

    Attributes:
        id: Random correlation token
        redirect_url: Post-login destination
        auth_provider: Provider the state was minted for
        groups_enabled: Whether group membership was requested
        persist_login: Whether the session should outlive the browser session
    """
    id: str
    redirect_url: str
    auth_provider: str
    groups_enabled: bool = False
    persist_login: bool = False

    @classmethod
    def new(
        cls,
        auth_provider: str,
        redirect_url: str = "/",
        groups_enabled: bool = False,
        persist_login: bool = False,
    ) -> "State":
        """Create a state with a fresh random id."""
        return cls(
            id=secrets.token_urlsafe(32),
            redirect_url=redirect_url,
            auth_provider=auth_provider,
            groups_enabled=groups_enabled,
            persist_login=persist_login,
        )

    def to_claims(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "redirectUrl": self.redirect_url,
            "authProvider": self.auth_provider,
            "groupsEnabled": self.groups_enabled,
            "persistLogin": self.persist_login,
        }

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "State":
        missing = [name for name in _CLAIMS if name not in claims]
        if missing:
            raise StateInvalidError(f"OAuth state missing claims: {', '.join(missing)}")

        state_id = claims["id"]
        provider = claims["authProvider"]
        if not isinstance(state_id, str) or not state_id:
            raise StateInvalidError("OAuth state has an empty id")
        if not isinstance(provider, str) or not provider:
            raise StateInvalidError("OAuth state has an empty provider")

        return cls(
            id=state_id,
            redirect_url=str(claims["redirectUrl"] or ""),
            auth_provider=provider,
            groups_enabled=bool(claims["groupsEnabled"]),
            persist_login=bool(claims["persistLogin"]),
        )


class StateCodec:
    """Encodes and decodes signed OAuth state values.

    Attributes:
        ttl_seconds: Validity window of an encoded state
    """

    def __init__(self, secret: str, ttl_seconds: int = DEFAULT_STATE_TTL_SECONDS):
        """Initialize the codec.

        Args:
            secret: Signing secret
            ttl_seconds: Validity window of an encoded state

        Raises:
            ValueError: If the secret is empty or the TTL is not positive
        """
        if not secret:
            raise ValueError("OAuth state signing secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError(f"OAuth state TTL must be positive, got {ttl_seconds}")

        self._secret = secret
        self.ttl_seconds = ttl_seconds

    def encode(self, state: State, now: float | None = None) -> str:
        issued_at = int(now if now is not None else time.time())
        payload = state.to_claims()
        payload["iat"] = issued_at
        payload["exp"] = issued_at + self.ttl_seconds
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def decode(self, token: str) -> State:
        """Verify and decode an encoded state.

        Raises:
            StateExpiredError: If the state is past its validity window
            StateInvalidError: If the signature or payload is invalid
        """
        if not token:
            raise StateInvalidError("OAuth state is empty")

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise StateExpiredError("OAuth state has expired") from e
        except jwt.InvalidTokenError as e:
            raise StateInvalidError(f"Invalid OAuth state: {e}") from e

        return State.from_claims(claims)


class StateReplayGuard:
    """Tracks consumed state ids so each state is accepted only once.

    Ids are remembered for the state validity window; after that the
    codec rejects the state as expired anyway. This is an in-process
    store: several server processes need a shared one.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_STATE_TTL_SECONDS, cleanup_interval_seconds: int = 60):
        self.ttl_seconds = ttl_seconds
        self._cleanup_interval_seconds = cleanup_interval_seconds
        self._consumed: dict[str, float] = {}
        self._lock = threading.Lock()
        self._last_cleanup_time = time.time()

    def consume(self, state_id: str, now: float | None = None) -> None:
        """Mark a state id as used.

        Raises:
            StateInvalidError: If the id was already consumed
        """
        now = now if now is not None else time.time()
        with self._lock:
            self._cleanup_expired(now)
            expires_at = self._consumed.get(state_id)
            if expires_at is not None and expires_at > now:
                raise StateInvalidError("OAuth state has already been used")
            self._consumed[state_id] = now + self.ttl_seconds

    def _cleanup_expired(self, now: float) -> None:
        # Called with the lock held
        if now - self._last_cleanup_time < self._cleanup_interval_seconds:
            return
        self._last_cleanup_time = now
        expired = [sid for sid, expires_at in self._consumed.items() if expires_at <= now]
        for sid in expired:
            del self._consumed[sid]

    def __len__(self) -> int:
        with self._lock:
            return len(self._consumed)
