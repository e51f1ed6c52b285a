"""Team reconciler.

Owners are a set. An update sends only the difference: one call adding
the owners that are new, one call removing the owners that went away,
and a base-attribute update only when name, role or matching rules
actually changed.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict, Field

from tlspc_provider.integrations.tlspc.models import Team, UserMatchingRule
from tlspc_provider.integrations.tlspc.models.team import MatchingRuleOperator
from tlspc_provider.services.base import EntityReconciler, EntityState, ResourceState


class MatchingRule(ResourceState):
    """SSO claim rule adding members to the team."""

    model_config = ConfigDict(frozen=True)

    claim_name: str = Field(..., description="The SSO property that this rule acts on")
    operator: MatchingRuleOperator = Field(..., description="Comparison operator")
    value: str = Field(..., description="The value to check for")


class TeamState(EntityState):
    """Declared attributes of ``tlspc_team``."""

    name: str = Field(..., description="Name")
    role: str = Field(
        ...,
        description="Role of team, e.g. PLATFORM_ADMIN, RESOURCE_OWNER or GUEST",
    )
    owners: set[str] = Field(..., description="Set of owner user ids")
    user_matching_rules: set[MatchingRule] = Field(
        default_factory=set, description="Rules adding members via SSO claims"
    )


def _api_rules(rules: set[MatchingRule]) -> list[UserMatchingRule]:
    ordered = sorted(rules, key=lambda r: (r.claim_name, r.operator, r.value))
    return [
        UserMatchingRule(claim_name=r.claim_name, operator=r.operator, value=r.value)
        for r in ordered
    ]


class TeamReconciler(EntityReconciler[TeamState, Team]):
    """Reconciler for ``tlspc_team``."""

    type_name: ClassVar[str] = "tlspc_team"
    state_model = TeamState

    def create(self, plan: TeamState) -> TeamState:
        team = Team(
            name=plan.name,
            role=plan.role,
            owners=sorted(plan.owners),
            members=[],
            user_matching_rules=_api_rules(plan.user_matching_rules),
        )
        created = self._client.create_team(team)
        self._log.info("created_resource", id=created.id)
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> Team:
        return self._client.get_team(resource_id)

    def _to_state(self, remote: Team, previous: TeamState | None) -> TeamState:
        return TeamState(
            id=remote.id,
            name=remote.name,
            role=remote.role,
            owners=set(remote.owners),
            user_matching_rules={
                MatchingRule(claim_name=r.claim_name, operator=r.operator, value=r.value)
                for r in remote.user_matching_rules
            },
        )

    def update(self, plan: TeamState, state: TeamState) -> TeamState:
        """Apply base-attribute and owner changes with the fewest calls.

        Owners are added before any are removed so the team is never left
        without an owner mid-update.
        """
        team_id = state.id or ""
        if not self._unchanged(plan, state, "name", "role", "user_matching_rules"):
            self._client.update_team(
                Team(
                    id=team_id,
                    name=plan.name,
                    role=plan.role,
                    user_matching_rules=_api_rules(plan.user_matching_rules),
                )
            )

        added = plan.owners - state.owners
        removed = state.owners - plan.owners
        if added:
            self._client.add_team_owners(team_id, sorted(added))
        if removed:
            self._client.remove_team_owners(team_id, sorted(removed))

        self._log.info(
            "updated_resource", id=team_id, owners_added=len(added), owners_removed=len(removed)
        )
        return self._with_id(plan, state.id)

    def delete(self, state: TeamState) -> None:
        self._client.delete_team(state.id or "")
