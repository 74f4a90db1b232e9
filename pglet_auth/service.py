# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Login service implementation."""

import threading
from typing import Any, Optional

import httpx

from .errors import MissingTokenError, StateInvalidError, UnsupportedProviderError
from .factory import ProviderRegistry, default_registry
from .log import Logger, create_logger
from .oauth import OAuthClientConfig, get_oauth_config
from .principal import SecurityPrincipal
from .redirect import RedirectValidator
from .settings import Settings
from .state import State, StateCodec, StateReplayGuard
from .token import StaticTokenSource


class LoginService:
    """Coordinates the OAuth login flow across providers.

    Builds signed states and authorization URLs, and on callback verifies
    the state, exchanges the authorization code and resolves the
    ``SecurityPrincipal``.

    Attributes:
        settings: Application settings
        registry: Provider registry
        stats: Service statistics
    """

    def __init__(
        self,
        settings: Settings,
        registry: Optional[ProviderRegistry] = None,
        codec: Optional[StateCodec] = None,
        replay_guard: Optional[StateReplayGuard] = None,
        redirect_validator: Optional[RedirectValidator] = None,
        logger: Optional[Logger] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the login service.

        Args:
            settings: Application settings
            registry: Provider registry, the built-in providers by default
            codec: State codec, keyed with the master secret by default
            replay_guard: Consumed state tracker
            redirect_validator: Redirect allow-list, from settings by default
            logger: Logger, a stdout logger by default
            transport: Optional httpx transport for all provider calls

        Raises:
            ValueError: If no codec is given and the master secret is empty
        """
        self.settings = settings
        self.registry = registry or default_registry()
        ttl = settings.oauth_state_ttl_seconds
        self.codec = codec or StateCodec(settings.master_secret_key, ttl_seconds=ttl)
        self.replay_guard = replay_guard or StateReplayGuard(ttl_seconds=self.codec.ttl_seconds)
        self.redirect_validator = redirect_validator or RedirectValidator(settings.redirect_allowed_hosts)
        self.logger = logger or create_logger(name="pglet_auth.service")
        self._transport = transport

        self._stats_lock = threading.Lock()
        self.stats = {
            "logins_initiated": 0,
            "logins_succeeded": 0,
            "logins_failed": 0,
        }

    def enabled_providers(self) -> list[str]:
        """List registered providers that have client credentials configured."""
        return [name for name in self.registry.names() if all(self.settings.client_credentials(name))]

    def is_ready(self) -> bool:
        """Check if the service can handle logins."""
        return len(self.enabled_providers()) > 0

    def initiate_login(
        self,
        provider: str,
        redirect_url: Optional[str] = None,
        groups: bool = False,
        persist: bool = False,
    ) -> str:
        """Start a login.

        Args:
            provider: Provider name
            redirect_url: Post-login destination, "/" when empty
            groups: Request group membership
            persist: Keep the session after the browser closes

        Returns:
            Provider authorization URL carrying the encoded state

        Raises:
            UnsupportedProviderError: If the provider is unknown or not configured
            RedirectNotAllowedError: If the redirect target is not allowed
        """
        provider = (provider or "").lower()
        oauth_config = self._oauth_config(provider, groups)
        redirect_url = self.redirect_validator.validate(redirect_url)

        state = State.new(
            auth_provider=provider,
            redirect_url=redirect_url,
            groups_enabled=groups,
            persist_login=persist,
        )
        authorization_url = oauth_config.authorization_url(self.codec.encode(state))

        self._count("logins_initiated")
        self.logger.info(
            "Login initiated",
            provider=provider,
            groups_enabled=groups,
            persist_login=persist,
        )
        return authorization_url

    def handle_callback(self, provider: str, code: Optional[str], state: Optional[str]) -> tuple[SecurityPrincipal, State]:
        """Complete a login from the provider callback.

        The state is consumed before the code exchange, so a state cannot
        be replayed even when the login fails.

        Args:
            provider: Provider name from the callback path
            code: Authorization code
            state: Encoded state returned by the provider

        Returns:
            Tuple of (resolved principal, decoded state)

        Raises:
            LoginError: Any login failure
        """
        provider = (provider or "").lower()
        try:
            decoded = self.codec.decode(state or "")
            if decoded.auth_provider != provider:
                raise StateInvalidError(
                    f"OAuth state was issued for {decoded.auth_provider}, not {provider}"
                )
            self.redirect_validator.validate(decoded.redirect_url)
            self.replay_guard.consume(decoded.id)

            if not code:
                raise MissingTokenError(f"{provider} callback has no authorization code")

            oauth_config = self._oauth_config(provider, decoded.groups_enabled)
            token = oauth_config.exchange_code(code)

            principal = SecurityPrincipal(
                StaticTokenSource(token),
                self.settings,
                groups_enabled=decoded.groups_enabled,
                registry=self.registry,
                redirect_url=oauth_config.redirect_url,
                transport=self._transport,
            )
            principal.update_from_provider(provider)
        except Exception:
            self._count("logins_failed")
            raise

        self._count("logins_succeeded")
        self.logger.info(
            "Login succeeded",
            provider=provider,
            principal=principal.qualified_id,
            groups_supported=principal.groups.supported,
        )
        return principal, decoded

    def get_stats(self) -> dict[str, Any]:
        """Get service statistics."""
        with self._stats_lock:
            stats = self.stats.copy()
        stats["consumed_states"] = len(self.replay_guard)
        return stats

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self.stats[key] += 1

    def _oauth_config(self, provider: str, groups_enabled: bool) -> OAuthClientConfig:
        if not provider or provider not in self.registry:
            raise UnsupportedProviderError(provider, self.registry.names())

        oauth_config = get_oauth_config(
            self.settings,
            provider,
            groups_enabled,
            transport=self._transport,
            endpoints=self.registry.endpoints(provider),
        )
        if not oauth_config.client_id or not oauth_config.client_secret:
            raise UnsupportedProviderError(provider, message=f"Provider {provider} is not configured")
        return oauth_config
