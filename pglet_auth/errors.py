# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Login error taxonomy.

Every failure of the OAuth login flow is a ``LoginError``. The HTTP layer
turns any of them into one generic "login failed" response, so the
messages carried here are meant for logs only and may include provider
detail.
"""


class LoginError(Exception):
    """Base class for all login flow failures."""
    pass


class MissingTokenError(LoginError):
    """Raised when no OAuth token is available for the provider."""
    pass


class TokenUnavailableError(LoginError):
    """Raised when token retrieval itself fails."""
    pass


class UnsupportedProviderError(LoginError):
    """Raised when a provider name has no registered normalizer."""

    def __init__(self, provider: str, supported: list[str] | None = None, message: str | None = None):
        self.provider = provider
        self.supported = sorted(supported or [])
        message = message or f"Unsupported provider: {provider}"
        if self.supported:
            message += f". Supported providers: {', '.join(self.supported)}"
        super().__init__(message)


class ProviderUnavailableError(LoginError):
    """Raised on transport failure or a non-2xx response from a provider.

    Attributes:
        status_code: HTTP status returned by the provider, None on transport errors
        detail: Provider response body or transport error text
    """

    def __init__(self, message: str, status_code: int | None = None, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ProviderResponseInvalidError(LoginError):
    """Raised when a provider response cannot be decoded or mapped."""
    pass


class StateInvalidError(LoginError):
    """Raised when an OAuth state fails verification or was already used."""
    pass


class StateExpiredError(LoginError):
    """Raised when an OAuth state is older than its validity window."""
    pass


class RedirectNotAllowedError(LoginError):
    """Raised when a post-login redirect target is not on the allow-list."""
    pass
