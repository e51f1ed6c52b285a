"""Registry account reconciler.

A ``tlspc_registry_account`` is a service account with ``ociToken``
authentication. The API generates the OCI account name and pull token at
creation; neither is returned again, so both are kept from state.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import ClassVar

from pydantic import Field, SecretStr

from tlspc_provider.integrations.tlspc.exceptions import TLSPCValidationError
from tlspc_provider.integrations.tlspc.models import RegistryTokenAuth, ServiceAccount
from tlspc_provider.services.base import EntityReconciler, EntityState
from tlspc_provider.utils.validators import OCIScope, UUIDStr


class RegistryAccountState(EntityState):
    """Declared attributes of ``tlspc_registry_account``."""

    name: str = Field(..., description="The name of the service account")
    owner: UUIDStr = Field(..., description="ID of the team that owns this service account")
    scopes: set[OCIScope] = Field(
        ...,
        description=(
            "Images this account may pull, e.g. oci-registry-cm, oci-registry-cm-ape, "
            "oci-registry-cm-vei, oci-registry-cm-os"
        ),
    )
    credential_lifetime: int = Field(..., description="Credential Lifetime in days")
    oci_account_name: str | None = Field(
        default=None, description="Generated OCI account name (computed)"
    )
    oci_registry_token: SecretStr | None = Field(
        default=None, description="Generated OCI registry token (computed, sensitive)"
    )
    credential_expiry: str | None = Field(
        default=None, description="Credential expiry datetime, RFC 3339 (computed)"
    )


def format_rfc3339(value: datetime | None) -> str | None:
    """Render a timestamp as RFC 3339 with a ``Z`` suffix for UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class RegistryAccountReconciler(EntityReconciler[RegistryAccountState, ServiceAccount]):
    """Reconciler for ``tlspc_registry_account``."""

    type_name: ClassVar[str] = "tlspc_registry_account"
    state_model = RegistryAccountState

    @staticmethod
    def _account(plan: RegistryAccountState, account_id: str | None = None) -> ServiceAccount:
        return ServiceAccount.for_auth(
            RegistryTokenAuth(credential_lifetime=plan.credential_lifetime),
            id=account_id,
            name=plan.name,
            owner=plan.owner,
            scopes=sorted(plan.scopes),
        )

    def create(self, plan: RegistryAccountState) -> RegistryAccountState:
        created = self._client.create_service_account(self._account(plan))
        self._log.info(
            "created_resource", id=created.id, oci_account_name=created.oci_account_name
        )
        token = created.oci_registry_token
        return plan.model_copy(
            update={
                "id": created.id,
                "oci_account_name": created.oci_account_name,
                "oci_registry_token": SecretStr(token) if token else None,
                "credential_expiry": format_rfc3339(created.credential_expiry),
            }
        )

    def _fetch(self, resource_id: str) -> ServiceAccount:
        return self._client.get_service_account(resource_id)

    def _to_state(
        self, remote: ServiceAccount, previous: RegistryAccountState | None
    ) -> RegistryAccountState:
        if remote.auth_variant is not RegistryTokenAuth:
            raise TLSPCValidationError(
                f"Service account {remote.id} is not a registry account",
                details=f"authentication type {remote.authentication_type!r}",
            )
        lifetime = remote.credential_lifetime
        if lifetime is None:
            lifetime = previous.credential_lifetime if previous else 0
        return RegistryAccountState(
            id=remote.id,
            name=remote.name,
            owner=remote.owner,
            scopes=set(remote.scopes),
            credential_lifetime=lifetime,
            oci_account_name=previous.oci_account_name if previous else remote.oci_account_name,
            oci_registry_token=previous.oci_registry_token if previous else None,
            credential_expiry=format_rfc3339(remote.credential_expiry),
        )

    def update(
        self, plan: RegistryAccountState, state: RegistryAccountState
    ) -> RegistryAccountState:
        if self._unchanged(plan, state, "name", "owner", "scopes", "credential_lifetime"):
            self._log.debug("update_skipped", id=state.id)
        else:
            self._client.update_service_account(self._account(plan, state.id))
            self._log.info("updated_resource", id=state.id)
        return plan.model_copy(
            update={
                "id": state.id,
                "oci_account_name": state.oci_account_name,
                "oci_registry_token": state.oci_registry_token,
                "credential_expiry": state.credential_expiry,
            }
        )

    def delete(self, state: RegistryAccountState) -> None:
        self._client.delete_service_account(state.id or "")
