# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""pglet auth: OAuth login and identity resolution for pglet servers.

Supported providers:
- GitHub (groups from team membership)
- Google
- Azure AD (groups from directory membership)

Example:
    >>> from pglet_auth import SecurityPrincipal, StaticTokenSource, load_settings
    >>> principal = SecurityPrincipal(StaticTokenSource(token), load_settings())
    >>> principal.update_from_provider("github")
"""

__version__ = "0.1.0"

from .errors import (  # noqa: E402
    LoginError,
    MissingTokenError,
    ProviderResponseInvalidError,
    ProviderUnavailableError,
    RedirectNotAllowedError,
    StateExpiredError,
    StateInvalidError,
    TokenUnavailableError,
    UnsupportedProviderError,
)
from .factory import ProviderRegistry, create_identity_provider, default_registry  # noqa: E402
from .models import Groups, PrincipalIdentity  # noqa: E402
from .principal import SecurityPrincipal  # noqa: E402
from .provider import IdentityProvider  # noqa: E402
from .settings import Settings, load_settings  # noqa: E402
from .state import State, StateCodec, StateReplayGuard  # noqa: E402
from .token import OAuthToken, StaticTokenSource, TokenSource  # noqa: E402

__all__ = [
    "__version__",
    "Groups",
    "IdentityProvider",
    "LoginError",
    "MissingTokenError",
    "OAuthToken",
    "PrincipalIdentity",
    "ProviderRegistry",
    "ProviderResponseInvalidError",
    "ProviderUnavailableError",
    "RedirectNotAllowedError",
    "SecurityPrincipal",
    "Settings",
    "State",
    "StateCodec",
    "StateExpiredError",
    "StateInvalidError",
    "StateReplayGuard",
    "StaticTokenSource",
    "TokenSource",
    "TokenUnavailableError",
    "UnsupportedProviderError",
    "create_identity_provider",
    "default_registry",
    "load_settings",
]
