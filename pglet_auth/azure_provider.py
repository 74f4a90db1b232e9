# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Azure AD (Microsoft Entra ID) identity provider.

This module maps a Microsoft Graph ``/me`` profile to a principal
identity. Group membership is read from ``/me/memberOf`` and reported by
group display name.
"""

from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from .errors import ProviderResponseInvalidError
from .models import Groups, PrincipalIdentity
from .oauth import get_object
from .provider import MAX_GROUP_PAGES, IdentityProvider

GRAPH_GROUP_TYPE = "#microsoft.graph.group"


class AzureUser(BaseModel):
    """Microsoft Graph ``/me`` response."""
    id: str
    user_principal_name: str = Field(alias="userPrincipalName")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    mail: Optional[str] = None


class AzureDirectoryObject(BaseModel):
    odata_type: str = Field(default="", alias="@odata.type")
    display_name: Optional[str] = Field(default=None, alias="displayName")


class AzureGroupPage(BaseModel):
    """One page of the Microsoft Graph ``/me/memberOf`` response."""
    value: list[AzureDirectoryObject] = []
    next_link: Optional[str] = Field(default=None, alias="@odata.nextLink")


class AzureIdentityProvider(IdentityProvider):
    """Azure AD OAuth identity provider.

    Attributes:
        graph_base_url: Base URL for Microsoft Graph
    """

    name = "azure"
    supports_groups = True

    def __init__(self, oauth_config, graph_base_url: str = "https://graph.microsoft.com/v1.0"):
        super().__init__(oauth_config)
        self.graph_base_url = graph_base_url.rstrip("/")
        self.userinfo_url = f"{self.graph_base_url}/me"

    def _map_userinfo(self, userinfo: Any, client: httpx.Client) -> PrincipalIdentity:
        azure_user = self._parse(AzureUser, userinfo)

        email = azure_user.mail or azure_user.user_principal_name

        return PrincipalIdentity(
            id=azure_user.id,
            login=azure_user.user_principal_name,
            name=azure_user.display_name or email,
            email=email,
        )

    def _get_groups(self, client: httpx.Client) -> Groups:
        names: list[str] = []
        url: Optional[str] = f"{self.graph_base_url}/me/memberOf"

        for _ in range(MAX_GROUP_PAGES):
            page = self._parse(AzureGroupPage, get_object(client, url))
            names.extend(
                obj.display_name for obj in page.value
                if obj.odata_type == GRAPH_GROUP_TYPE and obj.display_name
            )
            url = page.next_link
            if not url:
                return Groups.of(names)

        raise ProviderResponseInvalidError(
            f"{self.name} group membership exceeds {MAX_GROUP_PAGES} pages"
        )
