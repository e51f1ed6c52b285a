"""Typed cloud provider operations over the GraphQL API.

Only GCP providers are managed. The API has no query for a single provider
by ID, so lookups fetch every GCP provider and scan for the one wanted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCAPIError,
    TLSPCDecodeError,
    TLSPCNotFoundError,
    TLSPCValidationError,
)
from tlspc_provider.integrations.tlspc.models.cloud_provider import (
    STATUS_VALIDATED,
    CloudProviderGCP,
    CloudProviderNode,
    GCPProviderConfiguration,
)
from tlspc_provider.utils.validators import is_uuid

if TYPE_CHECKING:
    from tlspc_provider.integrations.tlspc.graphql import GraphQLClient

logger = structlog.get_logger()

CLOUD_PROVIDER_FIELDS = """
fragment CloudProviderFields on CloudProvider {
  id
  name
  type
  status
  team {
    id
  }
  configuration {
    __typename
    ... on CloudProviderGCPConfiguration {
      issuerUrl
      serviceAccountEmail
      projectNumber
      workloadIdentityPoolId
      workloadIdentityPoolProviderId
    }
  }
}
"""

GCP_PROVIDERS = (
    """
query GCPProviders {
  cloudProviders(filter: {type: GCP}) {
    nodes {
      ...CloudProviderFields
    }
  }
}
"""
    + CLOUD_PROVIDER_FIELDS
)

NEW_GCP_PROVIDER = (
    """
mutation NewGCPProvider(
  $name: String!
  $team: UUID!
  $serviceAccountEmail: String!
  $projectNumber: String!
  $workloadIdentityPoolId: String!
  $workloadIdentityPoolProviderId: String!
) {
  createCloudProvider(
    input: {
      name: $name
      team: $team
      type: GCP
      authorizationMethods: [WORKLOAD_IDENTITY_FEDERATION]
      configuration: {
        gcp: {
          serviceAccountEmail: $serviceAccountEmail
          projectNumber: $projectNumber
          workloadIdentityPoolId: $workloadIdentityPoolId
          workloadIdentityPoolProviderId: $workloadIdentityPoolProviderId
        }
      }
    }
  ) {
    ...CloudProviderFields
  }
}
"""
    + CLOUD_PROVIDER_FIELDS
)

UPDATE_GCP_PROVIDER = (
    """
mutation UpdateGCPProvider(
  $id: UUID!
  $name: String!
  $team: UUID!
  $projectNumber: String!
  $workloadIdentityPoolId: String!
  $workloadIdentityPoolProviderId: String!
) {
  updateCloudProvider(
    id: $id
    input: {
      name: $name
      team: $team
      configuration: {
        gcp: {
          projectNumber: $projectNumber
          workloadIdentityPoolId: $workloadIdentityPoolId
          workloadIdentityPoolProviderId: $workloadIdentityPoolProviderId
        }
      }
    }
  ) {
    ...CloudProviderFields
  }
}
"""
    + CLOUD_PROVIDER_FIELDS
)

DELETE_GCP_PROVIDER = """
mutation DeleteGCPProvider($id: UUID!) {
  deleteCloudProvider(id: $id)
}
"""

GET_GCP_PROVIDER_DETAILS = """
query GetGCPProviderDetails($id: UUID!) {
  cloudProviderDetails(cloudProviderId: $id) {
    __typename
    ... on GCPProviderDetails {
      cloudProvider {
        id
        status
      }
    }
  }
}
"""

VALIDATE_GCP_PROVIDER = """
mutation ValidateGCPProvider($id: UUID!) {
  validateCloudProvider(cloudProviderId: $id) {
    result
    details
  }
}
"""


def require_uuid(value: str, field: str) -> str:
    """Return the canonical (lowercase) form of a UUID or fail before calling the API.

    Raises:
        TLSPCValidationError: If the value is not a UUID.
    """
    if not is_uuid(value):
        raise TLSPCValidationError(f"Invalid uuid for {field}", details=f"got {value!r}")
    return value.lower()


class CloudProviderClient:
    """GCP cloud provider CRUD and connection validation."""

    def __init__(self, graphql: GraphQLClient) -> None:
        self._graphql = graphql

    def _node(self, data: Any) -> CloudProviderNode:
        if not isinstance(data, dict):
            raise TLSPCDecodeError(
                "Unexpected cloud provider payload",
                response_body=repr(data),
                endpoint=self._graphql.url,
            )
        try:
            return CloudProviderNode.model_validate(data)
        except ValidationError as e:
            raise TLSPCDecodeError(
                "Error decoding cloud provider",
                response_body=str(e),
                endpoint=self._graphql.url,
            ) from e

    def _gcp(self, node: CloudProviderNode, message: str) -> CloudProviderGCP:
        if not isinstance(node.configuration, GCPProviderConfiguration):
            raise TLSPCAPIError(message, response_body=node.model_dump_json(by_alias=True))
        return CloudProviderGCP.from_node(node, node.configuration)

    @staticmethod
    def _variables(provider: CloudProviderGCP) -> dict[str, Any]:
        return {
            "name": provider.name,
            "team": require_uuid(provider.team, "team"),
            "projectNumber": str(provider.project_number),
            "workloadIdentityPoolId": provider.workload_identity_pool_id,
            "workloadIdentityPoolProviderId": provider.workload_identity_pool_provider_id,
        }

    def list_gcp(self) -> list[CloudProviderNode]:
        """Fetch every GCP cloud provider.

        Returns:
            All provider nodes, whatever their decoded configuration.
        """
        data = self._graphql.execute(GCP_PROVIDERS, operation_name="GCPProviders")
        nodes = (data.get("cloudProviders") or {}).get("nodes") or []
        return [self._node(n) for n in nodes]

    def create_gcp(self, provider: CloudProviderGCP) -> CloudProviderGCP:
        """Create a GCP cloud provider.

        Args:
            provider: Desired provider; ``id`` and ``issuer_url`` are ignored.

        Returns:
            The created provider with server-assigned fields.

        Raises:
            TLSPCValidationError: If ``team`` is not a UUID.
            TLSPCAPIError: If no GCP configuration comes back.
        """
        variables = self._variables(provider)
        variables["serviceAccountEmail"] = provider.service_account_email
        logger.info("creating_cloud_provider", kind="GCP", name=provider.name)
        data = self._graphql.execute(NEW_GCP_PROVIDER, variables, operation_name="NewGCPProvider")
        node = self._node(data.get("createCloudProvider"))
        created = self._gcp(node, "No GCP CloudProvider Configuration returned")
        logger.info("created_cloud_provider", kind="GCP", id=created.id)
        return created

    def get_gcp(self, provider_id: str) -> CloudProviderGCP:
        """Find a GCP cloud provider by ID.

        Args:
            provider_id: Provider ID.

        Returns:
            The matching provider.

        Raises:
            TLSPCNotFoundError: If no provider has this ID.
            TLSPCAPIError: If the provider is not a GCP provider.
        """
        logger.debug("getting_cloud_provider", kind="GCP", id=provider_id)
        for node in self.list_gcp():
            if node.id == provider_id:
                return self._gcp(node, "Expected GCP Configuration not found")
        raise TLSPCNotFoundError("GCP CloudProvider not found", endpoint=self._graphql.url)

    def update_gcp(self, provider: CloudProviderGCP) -> CloudProviderGCP:
        """Update a GCP cloud provider.

        The service account email is fixed at creation and not sent.

        Raises:
            TLSPCValidationError: If ``id`` or ``team`` is not a UUID.
        """
        variables = self._variables(provider)
        variables["id"] = require_uuid(provider.id, "id")
        logger.info("updating_cloud_provider", kind="GCP", id=provider.id)
        data = self._graphql.execute(
            UPDATE_GCP_PROVIDER, variables, operation_name="UpdateGCPProvider"
        )
        node = self._node(data.get("updateCloudProvider"))
        return self._gcp(node, "Error updating GCP Cloud Provider")

    def delete_gcp(self, provider_id: str) -> None:
        """Delete a GCP cloud provider."""
        variables = {"id": require_uuid(provider_id, "id")}
        logger.info("deleting_cloud_provider", kind="GCP", id=provider_id)
        self._graphql.execute(DELETE_GCP_PROVIDER, variables, operation_name="DeleteGCPProvider")

    def get_gcp_validation(self, provider_id: str) -> bool:
        """Report whether a GCP provider's connection is validated."""
        variables = {"id": require_uuid(provider_id, "id")}
        data = self._graphql.execute(
            GET_GCP_PROVIDER_DETAILS, variables, operation_name="GetGCPProviderDetails"
        )
        details = data.get("cloudProviderDetails")
        if not isinstance(details, dict) or details.get("__typename") != "GCPProviderDetails":
            raise TLSPCAPIError(
                "Error retrieving GCP CloudProvider status",
                response_body=repr(details),
                endpoint=self._graphql.url,
            )
        status = (details.get("cloudProvider") or {}).get("status")
        return bool(status == STATUS_VALIDATED)

    def validate_gcp(self, provider_id: str) -> bool:
        """Run connection validation; True when the vendor reports VALIDATED."""
        variables = {"id": require_uuid(provider_id, "id")}
        logger.info("validating_cloud_provider", kind="GCP", id=provider_id)
        data = self._graphql.execute(
            VALIDATE_GCP_PROVIDER, variables, operation_name="ValidateGCPProvider"
        )
        result = (data.get("validateCloudProvider") or {}).get("result")
        return bool(result == STATUS_VALIDATED)
