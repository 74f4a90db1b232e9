# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Security principal resolved from an identity provider.

A ``SecurityPrincipal`` starts empty and is populated once per login by
``update_from_provider``. Its identity is kept in a single immutable
``PrincipalIdentity`` together with the provider name, so an update is
either fully visible or not visible at all.
"""

from typing import Any, Optional

import httpx

from .errors import MissingTokenError, TokenUnavailableError, UnsupportedProviderError
from .factory import ProviderRegistry, create_identity_provider, default_registry
from .models import Groups, PrincipalIdentity
from .settings import Settings
from .token import TokenSource


class SecurityPrincipal:
    """Authenticated end user, normalized across providers.

    Attributes:
        groups_enabled: Whether group membership was requested for this login
    """

    def __init__(
        self,
        token_source: TokenSource,
        settings: Settings,
        groups_enabled: bool = False,
        registry: Optional[ProviderRegistry] = None,
        redirect_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Create an empty principal.

        Args:
            token_source: Source of the OAuth token bound to this login
            settings: Application settings
            groups_enabled: Whether group membership was requested
            registry: Provider registry, the built-in providers by default
            redirect_url: Callback URL the token was issued for
            transport: Optional httpx transport for provider calls
        """
        self.groups_enabled = groups_enabled
        self._token_source = token_source
        self._settings = settings
        self._registry = registry or default_registry()
        self._redirect_url = redirect_url
        self._transport = transport
        # (auth_provider, identity), always replaced as a whole
        self._resolved: tuple[str, PrincipalIdentity] = ("", PrincipalIdentity())

    @property
    def auth_provider(self) -> str:
        return self._resolved[0]

    @property
    def identity(self) -> PrincipalIdentity:
        return self._resolved[1]

    @property
    def id(self) -> str:
        return self._resolved[1].id

    @property
    def login(self) -> str:
        return self._resolved[1].login

    @property
    def name(self) -> str:
        return self._resolved[1].name

    @property
    def email(self) -> str:
        return self._resolved[1].email

    @property
    def groups(self) -> Groups:
        return self._resolved[1].groups

    @property
    def qualified_id(self) -> str:
        """Identifier unique across providers, ``<provider>:<id>``."""
        provider, identity = self._resolved
        if identity.is_empty:
            return ""
        return f"{provider}:{identity.id}"

    @property
    def is_authenticated(self) -> bool:
        return not self._resolved[1].is_empty

    def update_from_provider(self, provider_name: str) -> None:
        """Resolve the principal's identity from ``provider_name``.

        On failure the principal keeps its previous identity.

        Args:
            provider_name: Registered provider name

        Raises:
            TokenUnavailableError: If the token source fails
            MissingTokenError: If there is no token for this login
            UnsupportedProviderError: If no provider is registered under the name
            ProviderUnavailableError: On provider transport errors or non-2xx responses
            ProviderResponseInvalidError: If the provider response cannot be mapped
        """
        try:
            token = self._token_source.get_token()
        except Exception as e:
            raise TokenUnavailableError(f"Failed to retrieve {provider_name} OAuth token: {e}") from e

        if token is None:
            raise MissingTokenError(f"{provider_name} OAuth token is not set")

        if not provider_name or provider_name not in self._registry:
            raise UnsupportedProviderError(provider_name or "", self._registry.names())

        try:
            provider = create_identity_provider(
                provider_name,
                self._settings,
                groups_enabled=self.groups_enabled,
                registry=self._registry,
                redirect_url=self._redirect_url,
                transport=self._transport,
            )
        except ValueError as e:
            raise UnsupportedProviderError(
                provider_name, message=f"Provider {provider_name} is not configured: {e}"
            ) from e

        identity = provider.normalize(token, self.groups_enabled)

        self._resolved = (provider_name.lower(), identity)

    def to_dict(self) -> dict[str, Any]:
        """Convert principal to dictionary for the session layer."""
        data = self.identity.to_dict()
        data["auth_provider"] = self.auth_provider
        return data
