"""Pydantic models for TLS Protect Cloud teams."""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel

MatchingRuleOperator = Literal[
    "EQUALS",
    "NOT_EQUALS",
    "CONTAINS",
    "NOT_CONTAINS",
    "STARTS_WITH",
    "ENDS_WITH",
]


class UserMatchingRule(TLSPCModel):
    """SSO claim rule that places users into a team automatically."""

    claim_name: str = Field(..., description="Identity provider claim to inspect")
    operator: MatchingRuleOperator = Field(..., description="Comparison operator")
    value: str = Field(..., description="Value to compare the claim with")


class Team(TLSPCEntity):
    """TLS Protect Cloud team.

    Attributes:
        name: Team name.
        role: Team role (e.g. PLATFORM_ADMIN, RESOURCE_OWNER, GUEST).
        owners: User IDs owning the team.
        members: User IDs belonging to the team.
        user_matching_rules: SSO claim rules for automatic membership.
    """

    _entity_name: ClassVar[str] = "team"

    name: str = Field(default="", description="Team name")
    role: str = Field(default="", description="Team role")
    owners: list[str] = Field(default_factory=list, description="Owner user IDs")
    members: list[str] = Field(default_factory=list, description="Member user IDs")
    user_matching_rules: list[UserMatchingRule] = Field(
        default_factory=list, description="SSO claim matching rules"
    )

    def to_update_payload(self) -> dict[str, Any]:
        """Base attributes only; owners have their own endpoints."""
        return self.to_payload(include={"name", "role", "user_matching_rules"})


class TeamOwners(TLSPCModel):
    """Body of the add/remove owners endpoints."""

    owners: list[str] = Field(default_factory=list)
