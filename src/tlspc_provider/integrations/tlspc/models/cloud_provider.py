"""Models for cloud provider integrations served by the GraphQL API.

Cloud providers come back as a union keyed by ``__typename`` on their
``configuration``. Decoding picks the model from CONFIGURATION_TYPES, so
callers match on the model class instead of probing fields.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator

from tlspc_provider.integrations.tlspc.models.base import TLSPCModel

GCP_CONFIGURATION_TYPENAME = "CloudProviderGCPConfiguration"
STATUS_VALIDATED = "VALIDATED"


class GCPProviderConfiguration(TLSPCModel):
    """GCP workload identity federation settings."""

    typename: Literal["CloudProviderGCPConfiguration"] = Field(
        default=GCP_CONFIGURATION_TYPENAME, alias="__typename"
    )
    issuer_url: str = ""
    service_account_email: str = ""
    # a decimal string on the wire
    project_number: int = 0
    workload_identity_pool_id: str = ""
    workload_identity_pool_provider_id: str = ""


class UnsupportedProviderConfiguration(TLSPCModel):
    """Any provider kind this package does not manage (AWS, Azure ...)."""

    typename: str = Field(default="", alias="__typename")


ProviderConfiguration = GCPProviderConfiguration | UnsupportedProviderConfiguration

CONFIGURATION_TYPES: dict[str, type[GCPProviderConfiguration]] = {
    GCP_CONFIGURATION_TYPENAME: GCPProviderConfiguration,
}


def decode_configuration(data: dict[str, Any]) -> ProviderConfiguration:
    """Decode a configuration object by its ``__typename``.

    Args:
        data: Raw ``configuration`` object from a GraphQL response.

    Returns:
        The matching configuration model, or UnsupportedProviderConfiguration.
    """
    model = CONFIGURATION_TYPES.get(data.get("__typename", ""))
    if model is None:
        return UnsupportedProviderConfiguration.model_validate(data)
    return model.model_validate(data)


class TeamRef(TLSPCModel):
    id: str = ""


class CloudProviderNode(TLSPCModel):
    """A cloud provider as returned by the GraphQL API."""

    id: str = ""
    name: str = ""
    type: str | None = None
    status: str | None = None
    team: TeamRef = Field(default_factory=TeamRef)
    configuration: ProviderConfiguration | None = None

    @field_validator("configuration", mode="before")
    @classmethod
    def dispatch_configuration(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return decode_configuration(v)
        return v


class CloudProviderGCP(TLSPCModel):
    """Flattened GCP cloud provider used by callers of the client.

    Attributes:
        id: Provider ID (UUID), empty before creation.
        issuer_url: OIDC issuer URL generated by the vendor.
        name: Provider name.
        team: Owning team ID (UUID).
        service_account_email: GCP service account to impersonate.
        project_number: GCP project number.
        workload_identity_pool_id: Workload identity pool ID.
        workload_identity_pool_provider_id: Workload identity pool provider ID.
    """

    id: str = ""
    issuer_url: str = ""
    name: str
    team: str
    service_account_email: str
    project_number: int
    workload_identity_pool_id: str
    workload_identity_pool_provider_id: str

    @classmethod
    def from_node(
        cls, node: CloudProviderNode, config: GCPProviderConfiguration
    ) -> CloudProviderGCP:
        return cls(
            id=node.id,
            issuer_url=config.issuer_url,
            name=node.name,
            team=node.team.id,
            service_account_email=config.service_account_email,
            project_number=config.project_number,
            workload_identity_pool_id=config.workload_identity_pool_id,
            workload_identity_pool_provider_id=config.workload_identity_pool_provider_id,
        )
