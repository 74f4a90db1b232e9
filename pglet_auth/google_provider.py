# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Google identity provider.

Maps the profile returned by Google's OpenID Connect user-info endpoint.
Google does not expose group membership, so groups are always reported
as unsupported.
"""

from typing import Any

import httpx
from pydantic import BaseModel

from .models import PrincipalIdentity
from .provider import IdentityProvider


class GoogleUser(BaseModel):
    """Google user-info response."""
    sub: str
    email: str = ""
    name: str = ""
    given_name: str = ""
    family_name: str = ""


class GoogleIdentityProvider(IdentityProvider):
    """Google OAuth identity provider."""

    name = "google"
    userinfo_url = "https://www.googleapis.com/oauth2/v3/userinfo"
    supports_groups = False

    def _map_userinfo(self, userinfo: Any, client: httpx.Client) -> PrincipalIdentity:
        google_user = self._parse(GoogleUser, userinfo)

        name = google_user.name
        if not name:
            name = f"{google_user.given_name} {google_user.family_name}".strip() or google_user.email

        return PrincipalIdentity(
            id=google_user.sub,
            login=google_user.email,
            name=name,
            email=google_user.email,
        )
