# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Identity models shared by all providers.

This module defines the provider-agnostic identity record produced by a
provider normalizer, and the tri-state group membership value it carries.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass(frozen=True)
class Groups:
    """Group membership of a principal.

    A ``Groups`` value is in one of three states:

    - supported with members: ``Groups.of(["org/team"])``
    - supported but empty: ``Groups.of([])``
    - unsupported (or not requested for this login): ``Groups.unsupported()``

    An empty supported value is never used to mean "unsupported".

    Attributes:
        supported: Whether group membership was resolved
        names: Group identifiers (always empty when unsupported)
    """
    supported: bool
    names: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.supported and self.names:
            raise ValueError("Unsupported groups cannot carry group names")

    @classmethod
    def of(cls, names: Iterable[str]) -> "Groups":
        """Create a resolved group set, dropping empty names."""
        return cls(supported=True, names=frozenset(n for n in names if n))

    @classmethod
    def unsupported(cls) -> "Groups":
        """Create the explicit "unset/unsupported" marker."""
        return cls(supported=False)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def to_list(self) -> list[str] | None:
        """Serialize groups; None stands for unsupported."""
        if not self.supported:
            return None
        return sorted(self.names)


@dataclass(frozen=True)
class PrincipalIdentity:
    """Identity fields produced by a provider normalizer.

    Instances are immutable so that a principal can swap its whole
    identity in a single assignment.

    Attributes:
        id: Subject identifier, unique within the provider
        login: Human-facing handle (usually the email address)
        name: Display name
        email: Primary email address
        groups: Group membership
    """
    id: str = ""
    login: str = ""
    name: str = ""
    email: str = ""
    groups: Groups = field(default_factory=Groups.unsupported)

    @property
    def is_empty(self) -> bool:
        return not self.id

    def to_dict(self) -> dict[str, Any]:
        """Convert identity to dictionary for serialization."""
        return {
            "id": self.id,
            "login": self.login,
            "name": self.name,
            "email": self.email,
            "groups": self.groups.to_list(),
        }
