"""Unit tests for the team reconciler."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCDecodeError,
    TLSPCValidationError,
)
from tlspc_provider.integrations.tlspc.models import Team, UserMatchingRule
from tlspc_provider.services.team_reconciler import MatchingRule, TeamReconciler, TeamState

TEAM_ID = "6f0e9c1e-8d37-4f6b-a3b4-1f2e3d4c5b6a"


@pytest.fixture
def reconciler(mock_tlspc_client: MagicMock) -> TeamReconciler:
    return TeamReconciler(mock_tlspc_client)


def team_state(owners: set[str], **overrides: object) -> TeamState:
    values: dict[str, object] = {
        "id": TEAM_ID,
        "name": "ops",
        "role": "PLATFORM_ADMIN",
        "owners": owners,
    }
    values.update(overrides)
    return TeamState.model_validate(values)


@pytest.mark.unit
class TestTeamParse:
    """Tests for declared configuration parsing."""

    def test_parse(self, reconciler: TeamReconciler) -> None:
        """Lists become sets and rules are parsed."""
        plan = reconciler.parse(
            {
                "name": "ops",
                "role": "GUEST",
                "owners": ["a", "b", "a"],
                "user_matching_rules": [
                    {"claim_name": "groups", "operator": "CONTAINS", "value": "ops"}
                ],
            }
        )
        assert plan.owners == {"a", "b"}
        assert plan.id is None

    def test_unknown_attribute(self, reconciler: TeamReconciler) -> None:
        """Typos are rejected."""
        with pytest.raises(TLSPCValidationError, match="Invalid configuration for tlspc_team"):
            reconciler.parse({"name": "ops", "role": "GUEST", "owners": [], "ownerz": []})

    def test_bad_operator(self, reconciler: TeamReconciler) -> None:
        """Unknown matching operators are rejected."""
        with pytest.raises(TLSPCValidationError):
            reconciler.parse(
                {
                    "name": "ops",
                    "role": "GUEST",
                    "owners": [],
                    "user_matching_rules": [
                        {"claim_name": "g", "operator": "LIKE", "value": "x"}
                    ],
                }
            )


@pytest.mark.unit
class TestTeamCreate:
    """Tests for create."""

    def test_create(self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock) -> None:
        """Owners are sent sorted with empty members; the id is stored."""
        mock_tlspc_client.create_team.return_value = Team(id=TEAM_ID)
        plan = team_state({"b", "a"}, id=None)

        state = reconciler.create(plan)

        sent = mock_tlspc_client.create_team.call_args.args[0]
        assert sent.owners == ["a", "b"]
        assert sent.members == []
        assert state.id == TEAM_ID


@pytest.mark.unit
class TestTeamUpdate:
    """Tests for update."""

    def test_owner_diff(self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock) -> None:
        """{A,B,C} to {B,C,D}: one add of D, one remove of A, no base update."""
        state = team_state({"A", "B", "C"})
        plan = team_state({"B", "C", "D"})

        result = reconciler.update(plan, state)

        mock_tlspc_client.add_team_owners.assert_called_once_with(TEAM_ID, ["D"])
        mock_tlspc_client.remove_team_owners.assert_called_once_with(TEAM_ID, ["A"])
        mock_tlspc_client.update_team.assert_not_called()
        assert result.owners == {"B", "C", "D"}
        assert result.id == TEAM_ID

    def test_rename_only(self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock) -> None:
        """A rename updates base attributes and leaves owners alone."""
        state = team_state({"A"})
        plan = team_state({"A"}, name="platform")

        reconciler.update(plan, state)

        sent = mock_tlspc_client.update_team.call_args.args[0]
        assert sent.id == TEAM_ID
        assert sent.name == "platform"
        mock_tlspc_client.add_team_owners.assert_not_called()
        mock_tlspc_client.remove_team_owners.assert_not_called()

    def test_rule_change_triggers_update(
        self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        """Matching rule changes are base attribute changes."""
        rule = MatchingRule(claim_name="groups", operator="EQUALS", value="ops")
        reconciler.update(team_state({"A"}, user_matching_rules={rule}), team_state({"A"}))
        sent = mock_tlspc_client.update_team.call_args.args[0]
        assert sent.user_matching_rules == [
            UserMatchingRule(claim_name="groups", operator="EQUALS", value="ops")
        ]

    def test_no_changes_no_calls(
        self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        """An identical plan makes no API calls."""
        reconciler.update(team_state({"A"}), team_state({"A"}))
        assert mock_tlspc_client.method_calls == []


@pytest.mark.unit
class TestTeamReadImportDelete:
    """Tests for read, import and delete."""

    def test_read(self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock) -> None:
        """Remote values replace stored ones."""
        mock_tlspc_client.get_team.return_value = Team(
            id=TEAM_ID,
            name="renamed",
            role="GUEST",
            owners=["x", "y"],
            user_matching_rules=[
                UserMatchingRule(claim_name="c", operator="ENDS_WITH", value="v")
            ],
        )
        state = reconciler.read(team_state({"A"}))
        assert state.name == "renamed"
        assert state.owners == {"x", "y"}
        assert state.user_matching_rules == {
            MatchingRule(claim_name="c", operator="ENDS_WITH", value="v")
        }

    def test_read_without_id(self, reconciler: TeamReconciler) -> None:
        """State without an id cannot be read."""
        with pytest.raises(TLSPCValidationError, match="without an id"):
            reconciler.read(team_state({"A"}, id=None))

    def test_import_with_unexpected_rule(
        self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock
    ) -> None:
        """Remote data the state cannot hold is a decode error."""
        mock_tlspc_client.get_team.return_value = Team.model_construct(
            id=TEAM_ID,
            name="ops",
            role="GUEST",
            owners=[],
            user_matching_rules=[
                UserMatchingRule.model_construct(claim_name="c", operator="REGEX", value="v")
            ],
        )
        with pytest.raises(TLSPCDecodeError, match="Unexpected tlspc_team"):
            reconciler.import_state(TEAM_ID)

    def test_import(self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock) -> None:
        """Import reads the team by id."""
        mock_tlspc_client.get_team.return_value = Team(id=TEAM_ID, name="ops", role="GUEST")
        state = reconciler.import_state(TEAM_ID)
        mock_tlspc_client.get_team.assert_called_once_with(TEAM_ID)
        assert state.id == TEAM_ID

    def test_delete(self, reconciler: TeamReconciler, mock_tlspc_client: MagicMock) -> None:
        """Delete calls the API with the stored id."""
        reconciler.delete(team_state({"A"}))
        mock_tlspc_client.delete_team.assert_called_once_with(TEAM_ID)
