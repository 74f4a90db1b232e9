# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Tests for the provider registry and factory."""

import pytest

from pglet_auth.azure_provider import AzureIdentityProvider
from pglet_auth.errors import UnsupportedProviderError
from pglet_auth.factory import ProviderRegistry, create_identity_provider, default_registry
from pglet_auth.github_provider import GitHubIdentityProvider
from pglet_auth.google_provider import GoogleIdentityProvider
from pglet_auth.models import PrincipalIdentity
from pglet_auth.oauth import ProviderEndpoints
from pglet_auth.provider import IdentityProvider

GITLAB_ENDPOINTS = ProviderEndpoints(
    auth_url="https://gitlab.com/oauth/authorize",
    token_url="https://gitlab.com/oauth/token",
    scopes=("read_user",),
)


class GitLabIdentityProvider(IdentityProvider):
    name = "gitlab"
    userinfo_url = "https://gitlab.com/api/v4/user"

    def _map_userinfo(self, userinfo, client):
        return PrincipalIdentity(
            id=str(userinfo["id"]),
            login=userinfo["username"],
            name=userinfo["name"],
            email=userinfo["email"],
        )


class TestProviderRegistry:
    """Tests for ProviderRegistry."""

    def test_default_providers(self):
        """Test the built-in providers are registered."""
        registry = default_registry()

        assert registry.names() == ["azure", "github", "google"]
        assert "github" in registry
        assert "GitHub" in registry
        assert "myspace" not in registry
        assert None not in registry

    def test_register(self):
        """Test registering a provider leaves the others untouched."""
        registry = default_registry()

        registry.register("gitlab", GitLabIdentityProvider, endpoints=GITLAB_ENDPOINTS)

        assert registry.names() == ["azure", "github", "gitlab", "google"]
        assert registry.endpoints("gitlab") == GITLAB_ENDPOINTS
        assert registry.endpoints("github") is None

    def test_register_duplicate(self):
        """Test a name cannot be registered twice."""
        registry = default_registry()

        with pytest.raises(ValueError, match="already registered"):
            registry.register("google", GitLabIdentityProvider)

    def test_register_empty_name(self):
        """Test an empty name is rejected."""
        with pytest.raises(ValueError):
            ProviderRegistry().register("", GitLabIdentityProvider)

    def test_create_unknown(self):
        """Test creating an unregistered provider fails."""
        with pytest.raises(UnsupportedProviderError) as exc_info:
            default_registry().create("myspace", None)

        assert exc_info.value.supported == ["azure", "github", "google"]
        assert "Supported providers: azure, github, google" in str(exc_info.value)


class TestCreateIdentityProvider:
    """Tests for create_identity_provider."""

    @pytest.mark.parametrize("name,cls", [
        ("google", GoogleIdentityProvider),
        ("github", GitHubIdentityProvider),
        ("azure", AzureIdentityProvider),
        ("GitHub", GitHubIdentityProvider),
    ])
    def test_builtin(self, settings, name, cls):
        """Test built-in providers are created by name."""
        provider = create_identity_provider(name, settings)

        assert isinstance(provider, cls)
        assert provider.oauth_config.provider == name.lower()

    def test_groups_enabled_scopes(self, settings):
        """Test groups_enabled reaches the OAuth client configuration."""
        provider = create_identity_provider("azure", settings, groups_enabled=True)

        assert "GroupMember.Read.All" in provider.oauth_config.scopes

    @pytest.mark.parametrize("name", ["myspace", "", None])
    def test_unsupported(self, settings, name):
        """Test unknown names are unsupported."""
        with pytest.raises(UnsupportedProviderError):
            create_identity_provider(name, settings)

    def test_missing_client_id(self, make_settings):
        """Test a provider without a client id cannot be created."""
        settings = make_settings(GITHUB_CLIENT_ID=None)

        with pytest.raises(ValueError, match="GITHUB_CLIENT_ID"):
            create_identity_provider("github", settings)

    def test_missing_client_secret(self, make_settings):
        """Test a provider without a client secret cannot be created."""
        settings = make_settings(GOOGLE_CLIENT_SECRET=None)

        with pytest.raises(ValueError, match="GOOGLE_CLIENT_SECRET"):
            create_identity_provider("google", settings)

    def test_registered_provider(self, make_settings):
        """Test a registered provider is created with its endpoints."""
        settings = make_settings(GITLAB_CLIENT_ID="gl-id", GITLAB_CLIENT_SECRET="gl-secret")
        registry = default_registry()
        registry.register("gitlab", GitLabIdentityProvider, endpoints=GITLAB_ENDPOINTS)

        provider = create_identity_provider("gitlab", settings, registry=registry)

        assert isinstance(provider, GitLabIdentityProvider)
        assert provider.oauth_config.token_url == "https://gitlab.com/oauth/token"
        assert provider.oauth_config.client_id == "gl-id"

    def test_registered_provider_without_endpoints(self, make_settings):
        """Test a registered provider without endpoints is unsupported."""
        settings = make_settings(GITLAB_CLIENT_ID="gl-id", GITLAB_CLIENT_SECRET="gl-secret")
        registry = default_registry()
        registry.register("gitlab", GitLabIdentityProvider)

        with pytest.raises(UnsupportedProviderError):
            create_identity_provider("gitlab", settings, registry=registry)
