# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Tests for SecurityPrincipal."""

import pytest

from pglet_auth.errors import (
    MissingTokenError,
    ProviderUnavailableError,
    TokenUnavailableError,
    UnsupportedProviderError,
)
from pglet_auth.models import Groups
from pglet_auth.principal import SecurityPrincipal
from pglet_auth.token import OAuthToken, StaticTokenSource, TokenSource
from tests.fakes import GITHUB_API, GOOGLE_USER, GOOGLE_USERINFO_URL

TOKEN = OAuthToken(access_token="provider-token")


class FailingTokenSource(TokenSource):
    def get_token(self):
        raise RuntimeError("token store unreachable")


def _principal(settings, provider_api, token=TOKEN, groups_enabled=False):
    return SecurityPrincipal(
        StaticTokenSource(token),
        settings,
        groups_enabled=groups_enabled,
        transport=provider_api.transport,
    )


class TestSecurityPrincipal:
    """Tests for SecurityPrincipal.update_from_provider."""

    def test_starts_empty(self, settings, provider_api):
        """Test a new principal has no identity."""
        principal = _principal(settings, provider_api)

        assert not principal.is_authenticated
        assert principal.id == ""
        assert principal.auth_provider == ""
        assert principal.qualified_id == ""
        assert principal.groups == Groups.unsupported()

    def test_update_from_google(self, settings, provider_api):
        """Test the Google profile populates the principal."""
        provider_api.add("GET", GOOGLE_USERINFO_URL, json=GOOGLE_USER)
        principal = _principal(settings, provider_api)

        principal.update_from_provider("google")

        assert principal.id == "117000000000000000001"
        assert principal.login == "a@x.com"
        assert principal.name == "A. User"
        assert principal.email == "a@x.com"
        assert principal.groups.supported is False
        assert principal.auth_provider == "google"
        assert principal.qualified_id == "google:117000000000000000001"
        assert principal.is_authenticated

    def test_update_from_github_with_groups(self, settings, provider_api):
        """Test requested groups are resolved."""
        provider_api.add("GET", f"{GITHUB_API}/user", json={
            "id": 1, "login": "octocat", "name": "Octo", "email": "o@x.com",
        })
        provider_api.add("GET", f"{GITHUB_API}/user/teams?per_page=100", json=[
            {"slug": "core", "organization": {"login": "octo-org"}},
        ])
        principal = _principal(settings, provider_api, groups_enabled=True)

        principal.update_from_provider("github")

        assert principal.groups == Groups.of(["octo-org/core"])

    def test_missing_token(self, settings, provider_api):
        """Test a missing token fails and leaves the principal unchanged."""
        principal = _principal(settings, provider_api, token=None)

        with pytest.raises(MissingTokenError):
            principal.update_from_provider("google")

        assert not principal.is_authenticated
        assert provider_api.requests == []

    def test_token_source_failure(self, settings, provider_api):
        """Test token retrieval failures are chained."""
        principal = SecurityPrincipal(FailingTokenSource(), settings, transport=provider_api.transport)

        with pytest.raises(TokenUnavailableError) as exc_info:
            principal.update_from_provider("google")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert not principal.is_authenticated

    def test_unsupported_provider_makes_no_request(self, settings, provider_api):
        """Test an unregistered provider fails before any network call."""
        principal = _principal(settings, provider_api)

        with pytest.raises(UnsupportedProviderError):
            principal.update_from_provider("myspace")

        assert provider_api.requests == []
        assert not principal.is_authenticated

    def test_unconfigured_provider(self, make_settings, provider_api):
        """Test a registered but unconfigured provider is unsupported."""
        principal = _principal(make_settings(AZURE_CLIENT_ID=None), provider_api)

        with pytest.raises(UnsupportedProviderError, match="not configured"):
            principal.update_from_provider("azure")

        assert provider_api.requests == []

    def test_provider_401_leaves_principal_unchanged(self, settings, provider_api):
        """Test a rejected token keeps the previous identity."""
        provider_api.add("GET", GOOGLE_USERINFO_URL, json=GOOGLE_USER)
        principal = _principal(settings, provider_api)
        principal.update_from_provider("google")
        before = principal.to_dict()

        provider_api.add("GET", GOOGLE_USERINFO_URL, status_code=401, json={"error": "invalid_token"})
        with pytest.raises(ProviderUnavailableError):
            principal.update_from_provider("google")

        assert principal.to_dict() == before

    def test_partial_failure_leaves_principal_unchanged(self, settings, provider_api):
        """Test a failure after the profile was read changes nothing."""
        provider_api.add("GET", f"{GITHUB_API}/user", json={
            "id": 1, "login": "octocat", "name": "Octo", "email": "o@x.com",
        })
        provider_api.add("GET", f"{GITHUB_API}/user/teams?per_page=100", status_code=500, text="boom")
        principal = _principal(settings, provider_api, groups_enabled=True)

        with pytest.raises(ProviderUnavailableError):
            principal.update_from_provider("github")

        assert not principal.is_authenticated
        assert principal.login == ""

    def test_to_dict(self, settings, provider_api):
        """Test principal serialization for the session layer."""
        provider_api.add("GET", GOOGLE_USERINFO_URL, json=GOOGLE_USER)
        principal = _principal(settings, provider_api)
        principal.update_from_provider("google")

        assert principal.to_dict() == {
            "id": "117000000000000000001",
            "login": "a@x.com",
            "name": "A. User",
            "email": "a@x.com",
            "groups": None,
            "auth_provider": "google",
        }
