# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""GitHub identity provider.

This module maps a GitHub user profile to a principal identity. Group
membership is the list of teams the user belongs to, as
``"<organization>/<team-slug>"``.
"""

from typing import Any, Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import ProviderResponseInvalidError
from .models import Groups, PrincipalIdentity
from .oauth import get_object, get_page
from .provider import MAX_GROUP_PAGES, IdentityProvider


class GitHubUser(BaseModel):
    """GitHub ``/user`` response."""
    id: int
    login: str
    name: Optional[str] = None
    email: Optional[str] = None


class GitHubEmail(BaseModel):
    """Entry of the GitHub ``/user/emails`` response."""
    email: str
    primary: bool = False
    verified: bool = False


class GitHubOrganization(BaseModel):
    login: str


class GitHubTeam(BaseModel):
    """Entry of the GitHub ``/user/teams`` response."""
    slug: str
    organization: GitHubOrganization


class GitHubIdentityProvider(IdentityProvider):
    """GitHub OAuth identity provider.

    Attributes:
        api_base_url: Base URL for the GitHub API
    """

    name = "github"
    supports_groups = True

    def __init__(self, oauth_config, api_base_url: str = "https://api.github.com"):
        super().__init__(oauth_config)
        self.api_base_url = api_base_url.rstrip("/")
        self.userinfo_url = f"{self.api_base_url}/user"

    def _map_userinfo(self, userinfo: Any, client: httpx.Client) -> PrincipalIdentity:
        github_user = self._parse(GitHubUser, userinfo)

        # Private profile emails are only available from /user/emails
        email = github_user.email or self._get_primary_email(client)

        return PrincipalIdentity(
            id=str(github_user.id),
            login=github_user.login,
            name=github_user.name or github_user.login,
            email=email,
        )

    def _get_primary_email(self, client: httpx.Client) -> str:
        data = get_object(client, f"{self.api_base_url}/user/emails")
        emails = self._parse_list(GitHubEmail, data)

        verified = [e for e in emails if e.verified]
        for entry in verified:
            if entry.primary:
                return entry.email
        return verified[0].email if verified else ""

    def _get_groups(self, client: httpx.Client) -> Groups:
        names: list[str] = []
        url: Optional[str] = f"{self.api_base_url}/user/teams?per_page=100"

        for _ in range(MAX_GROUP_PAGES):
            data, url = get_page(client, url)
            teams = self._parse_list(GitHubTeam, data)
            names.extend(f"{team.organization.login}/{team.slug}" for team in teams)
            if not url:
                return Groups.of(names)

        raise ProviderResponseInvalidError(
            f"{self.name} team membership exceeds {MAX_GROUP_PAGES} pages"
        )

    def _parse_list(self, model: type, data: Any) -> list:
        try:
            return TypeAdapter(list[model]).validate_python(data)
        except ValidationError as e:
            raise ProviderResponseInvalidError(
                f"{self.name} response does not match list of {model.__name__}: {e}"
            ) from e
