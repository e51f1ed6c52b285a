"""Unit tests for TLS Protect Cloud models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from tlspc_provider.integrations.tlspc.models import (
    CertificateTemplate,
    CloudProviderNode,
    FederatedIssuerAuth,
    FireflyConfig,
    GCPProviderConfiguration,
    KeyAgentAuth,
    Plugin,
    RegistryTokenAuth,
    ServiceAccount,
    Team,
    UnsupportedProviderConfiguration,
)
from tlspc_provider.integrations.tlspc.models.cloud_provider import decode_configuration


@pytest.mark.unit
class TestBaseModel:
    """Tests for shared serialization behavior."""

    def test_unknown_fields_ignored(self) -> None:
        """New vendor fields do not break decoding."""
        team = Team.from_api_response({"id": "t1", "name": "ops", "brandNewField": 1})
        assert team.id == "t1"

    def test_has_id(self) -> None:
        """An empty id means nothing was returned."""
        assert not Team(id="").has_id
        assert Team(id="t1").has_id

    def test_create_payload_drops_id_and_none(self) -> None:
        """Create bodies never carry id and omit unset optionals."""
        account = ServiceAccount(id="sa1", name="x", owner="o")
        payload = account.to_create_payload()
        assert "id" not in payload
        assert "publicKey" not in payload
        assert payload["name"] == "x"

    def test_irregular_aliases(self) -> None:
        """Fields with non-camelCase wire names keep them."""
        template = CertificateTemplate(subject_cn_regexes=[".*"], subject_ou_regexes=[".*"])
        payload = template.to_payload()
        assert "subjectCNRegexes" in payload
        assert "subjectOURegexes" in payload


@pytest.mark.unit
class TestServiceAccountVariants:
    """Tests for service account authentication variants."""

    def test_for_auth_key_agent(self) -> None:
        """A key agent carries only key fields and the rsaKey tag."""
        account = ServiceAccount.for_auth(
            KeyAgentAuth(public_key="PEM", credential_lifetime=30), name="a"
        )
        assert account.authentication_type == "rsaKey"
        assert account.public_key == "PEM"
        assert account.jwks_uri is None

    def test_for_auth_federated(self) -> None:
        """A federated account carries issuer fields and the rsaKeyFederated tag."""
        account = ServiceAccount.for_auth(
            FederatedIssuerAuth(jwks_uri="https://j", audience="aud", applications=["app"]),
            name="f",
        )
        assert account.authentication_type == "rsaKeyFederated"
        assert account.applications == ["app"]
        assert account.public_key is None

    @pytest.mark.parametrize(
        ("tag", "variant"),
        [
            ("rsaKey", KeyAgentAuth),
            ("rsaKeyFederated", FederatedIssuerAuth),
            ("ociToken", RegistryTokenAuth),
            ("somethingElse", None),
        ],
    )
    def test_auth_variant(self, tag: str, variant: type | None) -> None:
        """The variant follows the authentication type."""
        assert ServiceAccount(authentication_type=tag).auth_variant is variant

    def test_generated_fields_never_sent(self) -> None:
        """OCI credentials and expiry are server generated."""
        account = ServiceAccount(
            name="r",
            oci_account_name="acct",
            oci_registry_token="tok",
            credential_expiry=datetime(2030, 1, 1, tzinfo=UTC),
        )
        payload = account.to_create_payload()
        assert "ociAccountName" not in payload
        assert "ociRegistryToken" not in payload
        assert "credentialExpiry" not in payload


@pytest.mark.unit
class TestPlugin:
    """Tests for the plugin model."""

    def test_null_manifest_sent(self) -> None:
        """The manifest key is always present."""
        assert Plugin(plugin_type="CA").to_create_payload() == {
            "pluginType": "CA",
            "manifest": None,
        }


@pytest.mark.unit
class TestCloudProviderDecoding:
    """Tests for typename dispatch."""

    def test_gcp(self) -> None:
        """The GCP typename selects the GCP model."""
        config = decode_configuration(
            {"__typename": "CloudProviderGCPConfiguration", "projectNumber": "42"}
        )
        assert isinstance(config, GCPProviderConfiguration)
        assert config.project_number == 42

    @pytest.mark.parametrize(
        "typename", ["CloudProviderAWSConfiguration", "CloudProviderAzureConfiguration", ""]
    )
    def test_other_kinds(self, typename: str) -> None:
        """Every other kind is unsupported and keeps its typename."""
        config = decode_configuration({"__typename": typename})
        assert isinstance(config, UnsupportedProviderConfiguration)
        assert config.typename == typename

    def test_node_without_configuration(self) -> None:
        """A node may come back without configuration."""
        node = CloudProviderNode.model_validate({"id": "x", "configuration": None})
        assert node.configuration is None


@pytest.mark.unit
class TestFireflyConfig:
    """Tests for Firefly config policy ids."""

    def test_policy_ids_without_embedded_policies(self) -> None:
        """Request-style configs fall back to policy_ids."""
        assert FireflyConfig(policy_ids=["p1"]).resolved_policy_ids == ["p1"]
