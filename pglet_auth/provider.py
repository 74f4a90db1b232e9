# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Abstract identity provider interface.

This module defines the contract every provider normalizer implements:
given an OAuth token bound to the provider, fetch the user's profile from
the provider's user-info endpoint and map it into a ``PrincipalIdentity``.
Adding a provider means adding one subclass and registering it; existing
providers are never touched.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import MissingTokenError, ProviderResponseInvalidError
from .models import Groups, PrincipalIdentity
from .oauth import OAuthClientConfig, get_object
from .token import OAuthToken

ModelT = TypeVar("ModelT", bound=BaseModel)

# Upper bound on followed group membership pages
MAX_GROUP_PAGES = 50


class IdentityProvider(ABC):
    """Abstract base class for provider normalizers.

    Subclasses set ``name`` and ``userinfo_url``, implement
    ``_map_userinfo``, and, when the provider can resolve group
    membership, set ``supports_groups`` and implement ``_get_groups``.

    Attributes:
        oauth_config: Provider-scoped OAuth client configuration
    """

    name: str = ""
    userinfo_url: str = ""
    supports_groups: bool = False

    def __init__(self, oauth_config: OAuthClientConfig):
        self.oauth_config = oauth_config

    def normalize(self, token: OAuthToken | None, groups_requested: bool) -> PrincipalIdentity:
        """Fetch the user's profile and map it to a principal identity.

        Args:
            token: Access token bound to this provider
            groups_requested: Whether the caller wants group membership

        Returns:
            PrincipalIdentity with id, login, name and email set

        Raises:
            MissingTokenError: If the token is missing, empty or expired
            ProviderUnavailableError: On transport errors or non-2xx responses
            ProviderResponseInvalidError: If a response cannot be decoded or mapped
        """
        if token is None or not token.valid:
            raise MissingTokenError(f"{self.name} OAuth token is not set or has expired")

        with self.oauth_config.client(token) as client:
            userinfo = get_object(client, self.userinfo_url)
            identity = self._map_userinfo(userinfo, client)

            if self.supports_groups and groups_requested:
                groups = self._get_groups(client)
            else:
                groups = Groups.unsupported()

        identity = replace(identity, groups=groups)
        self._check_required(identity)
        return identity

    @abstractmethod
    def _map_userinfo(self, userinfo: Any, client: httpx.Client) -> PrincipalIdentity:
        """Map the provider's user-info response to identity fields.

        Args:
            userinfo: Decoded JSON body of the user-info endpoint
            client: Provider-scoped client, for providers that need a
                follow-up lookup (e.g. a private email address)

        Returns:
            PrincipalIdentity without groups
        """
        pass

    def _get_groups(self, client: httpx.Client) -> Groups:
        """Resolve group membership; only called when ``supports_groups``."""
        raise NotImplementedError(f"{self.name} provider does not resolve groups")

    def _parse(self, model: type[ModelT], data: Any) -> ModelT:
        """Validate a response body against the provider's native model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ProviderResponseInvalidError(
                f"{self.name} response does not match {model.__name__}: {e}"
            ) from e

    def _check_required(self, identity: PrincipalIdentity) -> None:
        missing = [f for f in ("id", "login", "name", "email") if not getattr(identity, f)]
        if missing:
            raise ProviderResponseInvalidError(
                f"{self.name} user info is missing required fields: {', '.join(missing)}"
            )
