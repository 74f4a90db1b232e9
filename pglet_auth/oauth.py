# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Provider-scoped OAuth2 client configuration.

This module builds the OAuth2 client for a provider from the configured
client secrets, builds authorization URLs, exchanges authorization codes
for tokens, and performs the "GET JSON" calls used by provider
normalizers, including paginated ones.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from .errors import ProviderResponseInvalidError, ProviderUnavailableError, UnsupportedProviderError
from .settings import DEFAULT_OAUTH_HTTP_TIMEOUT_SECONDS, Settings
from .token import OAuthToken

# Response bodies are truncated before being logged
_DETAIL_LIMIT = 500


@dataclass(frozen=True)
class ProviderEndpoints:
    """Static OAuth2 endpoints and scopes of a provider.

    Attributes:
        auth_url: Authorization endpoint
        token_url: Token endpoint
        scopes: Scopes always requested
        group_scopes: Extra scopes requested when group membership is wanted
    """
    auth_url: str
    token_url: str
    scopes: tuple[str, ...]
    group_scopes: tuple[str, ...] = ()


def _azure_endpoints(tenant: str) -> ProviderEndpoints:
    base = f"https://login.microsoftonline.com/{tenant}/oauth2/v2.0"
    return ProviderEndpoints(
        auth_url=f"{base}/authorize",
        token_url=f"{base}/token",
        scopes=("User.Read",),
        group_scopes=("GroupMember.Read.All",),
    )


PROVIDER_ENDPOINTS: dict[str, ProviderEndpoints] = {
    "google": ProviderEndpoints(
        auth_url="https://accounts.google.com/o/oauth2/auth",
        token_url="https://oauth2.googleapis.com/token",
        scopes=("openid", "profile", "email"),
    ),
    "github": ProviderEndpoints(
        auth_url="https://github.com/login/oauth/authorize",
        token_url="https://github.com/login/oauth/access_token",
        scopes=("read:user", "user:email"),
        group_scopes=("read:org",),
    ),
    "azure": _azure_endpoints("common"),
}


@dataclass
class OAuthClientConfig:
    """OAuth2 client bound to one provider.

    Attributes:
        provider: Provider name
        client_id: OAuth client ID
        client_secret: OAuth client secret
        redirect_url: Callback URL registered with the provider
        auth_url: Authorization endpoint
        token_url: Token endpoint
        scopes: Scopes to request
        timeout: Timeout in seconds for every outbound call
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """
    provider: str
    client_id: str
    client_secret: str
    redirect_url: str
    auth_url: str
    token_url: str
    scopes: list[str] = field(default_factory=list)
    timeout: float = DEFAULT_OAUTH_HTTP_TIMEOUT_SECONDS
    transport: Optional[httpx.BaseTransport] = None

    def authorization_url(self, state: str) -> str:
        """Build the URL the browser is redirected to for login."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_url,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
        }
        return f"{self.auth_url}?{urlencode(params)}"

    def client(self, token: Optional[OAuthToken] = None) -> httpx.Client:
        """Create an HTTP client, authenticated with ``token`` when given."""
        headers = {"Accept": "application/json"}
        if token is not None:
            headers["Authorization"] = f"{token.token_type or 'Bearer'} {token.access_token}"
        return httpx.Client(headers=headers, timeout=self.timeout, transport=self.transport)

    def exchange_code(self, code: str) -> OAuthToken:
        """Exchange an authorization code for a token.

        Raises:
            ProviderUnavailableError: If the token endpoint fails or rejects the code
            ProviderResponseInvalidError: If the response carries no access token
        """
        with self.client() as client:
            try:
                response = client.post(
                    self.token_url,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_url,
                        "grant_type": "authorization_code",
                        "code": code,
                    },
                )
            except httpx.HTTPError as e:
                raise ProviderUnavailableError(
                    f"{self.provider} token endpoint unavailable: {e}", detail=str(e)
                ) from e

        data = _decode_json(response, self.token_url)

        # GitHub answers 200 with an "error" field for bad codes
        if isinstance(data, dict) and data.get("error"):
            raise ProviderUnavailableError(
                f"{self.provider} token exchange failed: {data.get('error')}",
                status_code=response.status_code,
                detail=str(data.get("error_description") or data.get("error")),
            )
        if not isinstance(data, dict):
            raise ProviderResponseInvalidError(f"{self.provider} token response is not an object")

        token = OAuthToken.from_response(data)
        if not token.access_token:
            raise ProviderResponseInvalidError(f"{self.provider} token response has no access_token")
        return token


def get_oauth_config(
    settings: Settings,
    provider: str,
    groups_enabled: bool,
    redirect_url: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
    endpoints: Optional[ProviderEndpoints] = None,
) -> OAuthClientConfig:
    """Build the OAuth client configuration of a provider.

    Args:
        settings: Application settings holding the client secrets
        provider: Provider name
        groups_enabled: Request the extra scopes needed to read group membership
        redirect_url: Callback URL; defaults to ``{public_url}/api/oauth/{provider}``
        transport: Optional httpx transport
        endpoints: Endpoints of a provider without built-in ones

    Returns:
        OAuthClientConfig for the provider

    Raises:
        UnsupportedProviderError: If the provider has no known endpoints
    """
    if endpoints is None and provider == "azure":
        endpoints = _azure_endpoints(settings.azure_tenant)
    elif endpoints is None:
        endpoints = PROVIDER_ENDPOINTS.get(provider)
    if endpoints is None:
        raise UnsupportedProviderError(provider, list(PROVIDER_ENDPOINTS))

    scopes = list(endpoints.scopes)
    if groups_enabled:
        scopes.extend(endpoints.group_scopes)

    client_id, client_secret = settings.client_credentials(provider)

    return OAuthClientConfig(
        provider=provider,
        client_id=client_id,
        client_secret=client_secret,
        redirect_url=redirect_url or f"{settings.public_url}/api/oauth/{provider}",
        auth_url=endpoints.auth_url,
        token_url=endpoints.token_url,
        scopes=scopes,
        timeout=settings.oauth_http_timeout_seconds,
        transport=transport,
    )


def get_object(client: httpx.Client, url: str) -> Any:
    """GET a URL and decode its JSON body.

    Args:
        client: Provider-scoped client
        url: URL to fetch

    Returns:
        Decoded JSON value

    Raises:
        ProviderUnavailableError: On transport errors or non-2xx responses
        ProviderResponseInvalidError: If the body is not valid JSON
    """
    data, _ = get_page(client, url)
    return data


def get_page(client: httpx.Client, url: str) -> tuple[Any, Optional[str]]:
    """GET one page of a paginated list.

    Returns:
        Tuple of (decoded JSON value, URL of the ``rel="next"`` link or None)
    """
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise ProviderUnavailableError(f"Request to {url} failed: {e}", detail=str(e)) from e

    data = _decode_json(response, url)
    return data, response.links.get("next", {}).get("url")


def _decode_json(response: httpx.Response, url: str) -> Any:
    if not response.is_success:
        raise ProviderUnavailableError(
            f"Request to {url} returned HTTP {response.status_code}",
            status_code=response.status_code,
            detail=response.text[:_DETAIL_LIMIT],
        )
    try:
        return response.json()
    except ValueError as e:
        raise ProviderResponseInvalidError(f"Response from {url} is not valid JSON: {e}") from e
