# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Integration tests for the HTTP surface."""

from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from pglet_auth import __version__
from pglet_auth.api import create_app, login_failure_status
from pglet_auth.errors import (
    LoginError,
    MissingTokenError,
    ProviderUnavailableError,
    RedirectNotAllowedError,
    StateExpiredError,
    StateInvalidError,
    UnsupportedProviderError,
)
from pglet_auth.log import SilentLogger
from pglet_auth.service import LoginService
from tests.fakes import GOOGLE_TOKEN_URL, GOOGLE_USER, GOOGLE_USERINFO_URL

LOGIN_FAILED = {"message": "Login failed"}


@pytest.fixture
def logger():
    return SilentLogger()


@pytest.fixture
def client(settings, provider_api, logger):
    service = LoginService(settings, logger=logger, transport=provider_api.transport)
    return TestClient(create_app(settings, service=service, logger=logger))


@pytest.fixture
def google_api(provider_api):
    provider_api.add("POST", GOOGLE_TOKEN_URL, json={"access_token": "ya29.token", "expires_in": 3599})
    provider_api.add("GET", GOOGLE_USERINFO_URL, json=GOOGLE_USER)
    return provider_api


def _start_login(client, provider="google", **params):
    response = client.get(f"/api/oauth/{provider}", params=params, follow_redirects=False)
    assert response.status_code == 302
    return parse_qs(urlsplit(response.headers["location"]).query)["state"][0]


class TestGeneralRoutes:
    """Tests for ping, health and unknown routes."""

    def test_ping(self, client):
        """Test GET /api/ answers pong."""
        response = client.get("/api/")

        assert response.status_code == 200
        assert response.json() == {"message": "pong"}

    def test_health(self, client):
        """Test the health endpoint reports providers and counters."""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "pglet-auth"
        assert data["version"] == __version__
        assert data["providers"] == ["azure", "github", "google"]
        assert data["logins_initiated"] == 0

    def test_health_degraded_without_providers(self, make_settings):
        """Test health reports degraded without configured providers."""
        settings = make_settings(GOOGLE_CLIENT_ID=None, GITHUB_CLIENT_ID=None, AZURE_CLIENT_ID=None)
        client = TestClient(create_app(settings, logger=SilentLogger()))

        data = client.get("/api/health").json()

        assert data["status"] == "degraded"
        assert data["providers"] == []

    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/unknown"),
        ("GET", "/api/oauth"),
        ("POST", "/api/pages/x"),
        ("DELETE", "/api/sessions"),
    ])
    def test_unknown_api_route(self, client, method, path):
        """Test unknown /api routes answer a JSON 404."""
        response = client.request(method, path)

        assert response.status_code == 404
        assert response.json() == {"message": "API endpoint not found"}


class TestLoginInitiation:
    """Tests for GET /api/oauth/{provider} without a code."""

    def test_redirects_to_provider(self, client):
        """Test the browser is redirected to the provider."""
        response = client.get(
            "/api/oauth/github",
            params={"redirect_url": "/app", "groups": "true", "persist": "1"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith("https://github.com/login/oauth/authorize?")
        assert "read%3Aorg" in location

    def test_unknown_provider(self, client, logger):
        """Test an unknown provider is a 404 login failure."""
        response = client.get("/api/oauth/myspace", follow_redirects=False)

        assert response.status_code == 404
        assert response.json() == LOGIN_FAILED
        assert logger.has_log("Login failed", level="WARNING")

    def test_redirect_not_allowed(self, client):
        """Test an off-site redirect is a 400 login failure."""
        response = client.get(
            "/api/oauth/google",
            params={"redirect_url": "https://evil.com/"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json() == LOGIN_FAILED

    def test_malformed_redirect(self, client):
        """Test an unparseable redirect is a 400 login failure."""
        response = client.get(
            "/api/oauth/google",
            params={"redirect_url": "http://[::1"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json() == LOGIN_FAILED


class TestLoginCallback:
    """Tests for GET /api/oauth/{provider} on the provider callback."""

    def test_success_sets_cookie_and_redirects(self, client, google_api):
        """Test a successful callback hands the principal to the session."""
        state = _start_login(client, redirect_url="/app", persist="true")

        response = client.get(
            "/api/oauth/google",
            params={"code": "auth-code", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/app"
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("pglet=")
        assert "Max-Age=86400" in cookie

    def test_replay_rejected(self, client, google_api):
        """Test the same callback cannot be used twice."""
        state = _start_login(client)
        params = {"code": "auth-code", "state": state}
        client.get("/api/oauth/google", params=params, follow_redirects=False)

        response = client.get("/api/oauth/google", params=params, follow_redirects=False)

        assert response.status_code == 400
        assert response.json() == LOGIN_FAILED

    def test_tampered_state(self, client, google_api):
        """Test a tampered state is a 400 login failure."""
        state = _start_login(client)
        header, payload, signature = state.split(".")
        tampered = ".".join([header, payload, ("B" if signature[0] == "A" else "A") + signature[1:]])

        response = client.get(
            "/api/oauth/google",
            params={"code": "auth-code", "state": tampered},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json() == LOGIN_FAILED
        assert google_api.requests == []

    def test_provider_rejects_token(self, client, provider_api, logger):
        """Test a provider 401 is a generic 401 with details in the log only."""
        provider_api.add("POST", GOOGLE_TOKEN_URL, json={"access_token": "ya29.token"})
        provider_api.add("GET", GOOGLE_USERINFO_URL, status_code=401, json={"error": "invalid_token"})
        state = _start_login(client)

        response = client.get(
            "/api/oauth/google",
            params={"code": "auth-code", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == 401
        assert response.json() == LOGIN_FAILED
        assert "set-cookie" not in response.headers
        entry = logger.get_logs("WARNING")[-1]
        assert entry["extra"]["error"] == "ProviderUnavailableError"
        assert entry["extra"]["provider_status_code"] == 401
        assert "invalid_token" not in response.text

    def test_provider_error_parameter(self, client, google_api, logger):
        """Test an error reported by the provider fails the login."""
        response = client.get(
            "/api/oauth/google",
            params={"error": "access_denied", "error_description": "User cancelled"},
            follow_redirects=False,
        )

        assert response.status_code == 401
        assert response.json() == LOGIN_FAILED
        assert "access_denied" in logger.get_logs("WARNING")[-1]["extra"]["detail"]
        assert google_api.requests == []

    def test_code_without_state(self, client, google_api):
        """Test a callback without a state is rejected."""
        response = client.get("/api/oauth/google", params={"code": "auth-code"}, follow_redirects=False)

        assert response.status_code == 400
        assert response.json() == LOGIN_FAILED

    def test_unexpected_error(self, settings, logger):
        """Test unexpected errors answer 500 without details."""
        class BrokenService(LoginService):
            def initiate_login(self, *args, **kwargs):
                raise RuntimeError("database exploded")

        service = BrokenService(settings, logger=logger)
        client = TestClient(create_app(settings, service=service, logger=logger))

        response = client.get("/api/oauth/google", follow_redirects=False)

        assert response.status_code == 500
        assert "exploded" not in response.text
        assert logger.has_log("Unexpected error during login", level="ERROR")


class TestLoginFailureStatus:
    """Tests for the login error to status mapping."""

    @pytest.mark.parametrize("error,status_code", [
        (UnsupportedProviderError("myspace"), 404),
        (RedirectNotAllowedError("x"), 400),
        (StateInvalidError("x"), 400),
        (StateExpiredError("x"), 400),
        (MissingTokenError("x"), 401),
        (ProviderUnavailableError("x", status_code=401), 401),
        (LoginError("x"), 401),
    ])
    def test_status(self, error, status_code):
        """Test each error maps to its status code."""
        assert login_failure_status(error) == status_code


class TestForceSSL:
    """Tests for HTTPS redirection."""

    def test_http_redirected_to_https(self, make_settings):
        """Test plain HTTP requests are redirected when SSL is forced."""
        settings = make_settings(FORCE_SSL="true")
        client = TestClient(create_app(settings, logger=SilentLogger()))

        response = client.get("/api/", follow_redirects=False)

        assert response.status_code in (301, 307, 308)
        assert response.headers["location"].startswith("https://")
