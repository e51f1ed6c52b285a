"""GCP cloud provider reconcilers.

``tlspc_cloudprovider_gcp`` manages the provider itself over GraphQL.
``tlspc_cloudprovider_gcp_validate`` runs the vendor's connection
validation for a provider. Validation cannot be undone through the API, so
the validate resource only ever moves to ``true`` and deleting it changes
nothing remotely.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict, Field

from tlspc_provider.integrations.tlspc.exceptions import TLSPCAPIError, TLSPCValidationError
from tlspc_provider.integrations.tlspc.models import CloudProviderGCP
from tlspc_provider.services.base import (
    BaseReconciler,
    EntityReconciler,
    EntityState,
    ResourceState,
)
from tlspc_provider.utils.validators import UUIDStr

_GCP_FIELDS = (
    "name",
    "team",
    "service_account_email",
    "project_number",
    "workload_identity_pool_id",
    "workload_identity_pool_provider_id",
)


class CloudProviderGCPState(EntityState):
    """Declared attributes of ``tlspc_cloudprovider_gcp``."""

    issuer_url: str | None = Field(default=None, description="OIDC issuer URL (computed)")
    name: str = Field(..., description="Name of the cloud provider")
    team: UUIDStr = Field(..., description="ID of the owning team")
    service_account_email: str = Field(..., description="GCP service account email")
    project_number: int = Field(..., description="GCP project number")
    workload_identity_pool_id: str = Field(..., description="Workload identity pool ID")
    workload_identity_pool_provider_id: str = Field(
        ..., description="Workload identity pool provider ID"
    )


class CloudProviderGCPReconciler(EntityReconciler[CloudProviderGCPState, CloudProviderGCP]):
    """Reconciler for ``tlspc_cloudprovider_gcp``."""

    type_name: ClassVar[str] = "tlspc_cloudprovider_gcp"
    state_model = CloudProviderGCPState

    def create(self, plan: CloudProviderGCPState) -> CloudProviderGCPState:
        provider = CloudProviderGCP(**plan.model_dump(include=set(_GCP_FIELDS)))
        created = self._client.cloud_providers.create_gcp(provider)
        self._log.info("created_resource", id=created.id)
        return plan.model_copy(update={"id": created.id, "issuer_url": created.issuer_url})

    def _fetch(self, resource_id: str) -> CloudProviderGCP:
        return self._client.cloud_providers.get_gcp(resource_id)

    def _to_state(
        self, remote: CloudProviderGCP, previous: CloudProviderGCPState | None
    ) -> CloudProviderGCPState:
        return CloudProviderGCPState(
            id=remote.id,
            issuer_url=remote.issuer_url,
            **remote.model_dump(include=set(_GCP_FIELDS)),
        )

    def update(
        self, plan: CloudProviderGCPState, state: CloudProviderGCPState
    ) -> CloudProviderGCPState:
        if self._unchanged(plan, state, *_GCP_FIELDS):
            self._log.debug("update_skipped", id=state.id)
            return plan.model_copy(update={"id": state.id, "issuer_url": state.issuer_url})
        provider = CloudProviderGCP(id=state.id or "", **plan.model_dump(include=set(_GCP_FIELDS)))
        updated = self._client.cloud_providers.update_gcp(provider)
        self._log.info("updated_resource", id=state.id)
        return plan.model_copy(update={"id": state.id, "issuer_url": updated.issuer_url})

    def delete(self, state: CloudProviderGCPState) -> None:
        self._client.cloud_providers.delete_gcp(state.id or "")


class CloudProviderGCPValidateState(ResourceState):
    """Declared attributes of ``tlspc_cloudprovider_gcp_validate``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    cloudprovider_id: UUIDStr = Field(..., description="ID of the GCP cloud provider")
    # declared as ``validate``, which BaseModel already defines
    validated: bool = Field(
        ..., alias="validate", description="Validate the connection; can only be true"
    )


class CloudProviderGCPValidateReconciler(BaseReconciler[CloudProviderGCPValidateState]):
    """Reconciler for ``tlspc_cloudprovider_gcp_validate``."""

    type_name: ClassVar[str] = "tlspc_cloudprovider_gcp_validate"
    state_model = CloudProviderGCPValidateState

    def _validate(self, plan: CloudProviderGCPValidateState) -> CloudProviderGCPValidateState:
        if not self._client.cloud_providers.validate_gcp(plan.cloudprovider_id):
            raise TLSPCAPIError(
                f"GCP Cloud Provider {plan.cloudprovider_id} failed validation",
                endpoint=self._client.graphql.url,
            )
        self._log.info("validated_cloud_provider", id=plan.cloudprovider_id)
        return plan

    def create(self, plan: CloudProviderGCPValidateState) -> CloudProviderGCPValidateState:
        if not plan.validated:
            raise TLSPCValidationError("Validate can only be set to true")
        return self._validate(plan)

    def read(self, state: CloudProviderGCPValidateState) -> CloudProviderGCPValidateState:
        """Refresh the validation status.

        Status retrieval failures reported by the API record ``false``
        instead of failing, so the next apply validates again.
        """
        try:
            validated = self._client.cloud_providers.get_gcp_validation(state.cloudprovider_id)
        except TLSPCAPIError as e:
            self._log.warning(
                "validation_status_unavailable", id=state.cloudprovider_id, error=e.message
            )
            validated = False
        return state.model_copy(update={"validated": validated})

    def update(
        self, plan: CloudProviderGCPValidateState, state: CloudProviderGCPValidateState
    ) -> CloudProviderGCPValidateState:
        if not plan.validated:
            if state.validated:
                raise TLSPCValidationError("Can not unvalidate connection status")
            raise TLSPCValidationError("Validate can only be set to true")
        return self._validate(plan)

    def delete(self, state: CloudProviderGCPValidateState) -> None:
        self._log.debug("delete_noop", id=state.cloudprovider_id)

    def import_state(self, resource_id: str) -> CloudProviderGCPValidateState:
        raise TLSPCValidationError(f"{self.type_name} does not support import")
