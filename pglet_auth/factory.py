# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Registry and factory for identity providers.

Providers are looked up by name. New providers are added with
``ProviderRegistry.register`` without touching the existing ones.
"""

from typing import Callable, Optional

import httpx

from .azure_provider import AzureIdentityProvider
from .errors import UnsupportedProviderError
from .github_provider import GitHubIdentityProvider
from .google_provider import GoogleIdentityProvider
from .oauth import OAuthClientConfig, ProviderEndpoints, get_oauth_config
from .provider import IdentityProvider
from .settings import Settings

ProviderFactory = Callable[[OAuthClientConfig], IdentityProvider]


class ProviderRegistry:
    """Maps provider names to identity provider factories."""

    def __init__(self, providers: Optional[dict[str, ProviderFactory]] = None):
        self._providers: dict[str, ProviderFactory] = dict(providers or {})
        self._endpoints: dict[str, ProviderEndpoints] = {}

    def register(self, name: str, factory: ProviderFactory, endpoints: Optional[ProviderEndpoints] = None) -> None:
        """Register a provider factory (usually the provider class).

        Args:
            name: Provider name used in URLs and states
            factory: Callable creating the provider from its OAuth client config
            endpoints: OAuth endpoints; required for providers without built-in endpoints

        Raises:
            ValueError: If the name is empty or already registered
        """
        name = name.lower()
        if not name:
            raise ValueError("Provider name must not be empty")
        if name in self._providers:
            raise ValueError(f"Provider already registered: {name}")
        self._providers[name] = factory
        if endpoints is not None:
            self._endpoints[name] = endpoints

    def endpoints(self, name: str) -> Optional[ProviderEndpoints]:
        return self._endpoints.get(name.lower())

    def names(self) -> list[str]:
        return sorted(self._providers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._providers

    def create(self, name: str, oauth_config: OAuthClientConfig) -> IdentityProvider:
        """Create the provider registered under ``name``.

        Raises:
            UnsupportedProviderError: If no provider is registered under ``name``
        """
        factory = self._providers.get(name.lower() if name else "")
        if factory is None:
            raise UnsupportedProviderError(name, self.names())
        return factory(oauth_config)


def default_registry() -> ProviderRegistry:
    """Create a registry with the built-in providers."""
    return ProviderRegistry({
        "google": GoogleIdentityProvider,
        "github": GitHubIdentityProvider,
        "azure": AzureIdentityProvider,
    })


def create_identity_provider(
    provider_type: Optional[str],
    settings: Settings,
    groups_enabled: bool = False,
    registry: Optional[ProviderRegistry] = None,
    redirect_url: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> IdentityProvider:
    """Create an identity provider with its OAuth client configuration.

    Args:
        provider_type: Provider name ("google", "github", "azure" or any
            name registered in ``registry``)
        settings: Application settings holding the client secrets
        groups_enabled: Whether the login requested group membership
        registry: Registry to use, the built-in providers by default
        redirect_url: Callback URL override
        transport: Optional httpx transport

    Returns:
        IdentityProvider instance

    Raises:
        UnsupportedProviderError: If the provider is unknown
        ValueError: If the provider's client id or secret is not configured
    """
    registry = registry or default_registry()

    if not provider_type or provider_type not in registry:
        raise UnsupportedProviderError(provider_type or "", registry.names())

    provider_type = provider_type.lower()
    oauth_config = get_oauth_config(
        settings,
        provider_type,
        groups_enabled,
        redirect_url=redirect_url,
        transport=transport,
        endpoints=registry.endpoints(provider_type),
    )

    if not oauth_config.client_id:
        raise ValueError(
            f"client_id is required for {provider_type} provider. "
            f"Set {provider_type.upper()}_CLIENT_ID in the configuration"
        )

    if not oauth_config.client_secret:
        raise ValueError(
            f"client_secret is required for {provider_type} provider. "
            f"Set {provider_type.upper()}_CLIENT_SECRET in the configuration"
        )

    return registry.create(provider_type, oauth_config)
