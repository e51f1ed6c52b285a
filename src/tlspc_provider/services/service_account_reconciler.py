"""Service account reconciler.

A ``tlspc_service_account`` is either a key-based agent or a federated
workload identity. There is no explicit tag: the kind follows from which
optional attributes are set. ``parse_auth`` turns the flat attributes into
exactly one ``KeyAgentAuth`` or ``FederatedIssuerAuth`` and rejects
configurations that set both groups or neither, before any API call.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.exceptions import TLSPCValidationError
from tlspc_provider.integrations.tlspc.models import (
    FederatedIssuerAuth,
    KeyAgentAuth,
    ServiceAccount,
)
from tlspc_provider.services.base import EntityReconciler, EntityState
from tlspc_provider.utils.validators import UUIDStr

KEY_AGENT_FIELDS = ("public_key", "credential_lifetime")
FEDERATED_FIELDS = ("jwks_uri", "issuer_url", "audience", "subject", "applications")

# refreshed from the server only when the server value differs
_OPTIONAL_FIELDS = (
    "public_key",
    "credential_lifetime",
    "jwks_uri",
    "issuer_url",
    "audience",
    "subject",
)


class ServiceAccountState(EntityState):
    """Declared attributes of ``tlspc_service_account``."""

    name: str = Field(..., description="Name")
    owner: UUIDStr = Field(..., description="ID of the team that owns this service account")
    scopes: set[str] = Field(
        ..., description="A list of scopes that this service account is authorised for"
    )
    public_key: str | None = Field(default=None, description="Public key (agent accounts)")
    credential_lifetime: int | None = Field(
        default=None, description="Credential lifetime in days (agent accounts)"
    )
    jwks_uri: str | None = Field(default=None, description="JWKS URI (federated accounts)")
    issuer_url: str | None = Field(default=None, description="Token issuer URL")
    audience: str | None = Field(default=None, description="Expected token audience")
    subject: str | None = Field(default=None, description="Expected token subject")
    applications: set[UUIDStr] | None = Field(
        default=None, description="IDs of applications this service account may issue for"
    )


def _is_set(value: Any) -> bool:
    if isinstance(value, int) and not isinstance(value, bool):
        return value > 0
    return bool(value)


def _groups(state: ServiceAccountState) -> tuple[bool, bool]:
    return (
        any(_is_set(getattr(state, f)) for f in KEY_AGENT_FIELDS),
        any(_is_set(getattr(state, f)) for f in FEDERATED_FIELDS),
    )


def stored_variant(
    state: ServiceAccountState,
) -> type[KeyAgentAuth] | type[FederatedIssuerAuth] | None:
    """Variant a stored state shows, or None when its fields do not tell.

    A refresh clears fields the server does not echo, so stored state may
    hold neither group.
    """
    key_agent, federated = _groups(state)
    if key_agent == federated:
        return None
    return KeyAgentAuth if key_agent else FederatedIssuerAuth


def parse_auth(state: ServiceAccountState) -> KeyAgentAuth | FederatedIssuerAuth:
    """Classify a service account configuration into its authentication variant.

    Args:
        state: Declared attributes.

    Returns:
        KeyAgentAuth when a public key or credential lifetime is set,
        FederatedIssuerAuth when any issuer attribute is set.

    Raises:
        TLSPCValidationError: If both groups or neither group is set.
    """
    key_agent, federated = _groups(state)

    if key_agent and federated:
        raise TLSPCValidationError(
            "Could not create serviceAccount, invalid configuration "
            "(both public_key and jwks fields present)"
        )
    if key_agent:
        return KeyAgentAuth(
            public_key=state.public_key, credential_lifetime=state.credential_lifetime
        )
    if federated:
        return FederatedIssuerAuth(
            jwks_uri=state.jwks_uri,
            issuer_url=state.issuer_url,
            audience=state.audience,
            subject=state.subject,
            applications=sorted(state.applications or ()),
        )
    raise TLSPCValidationError(
        "Could not create serviceAccount, invalid configuration "
        "(neither public_key or jwks fields present)"
    )


class ServiceAccountReconciler(EntityReconciler[ServiceAccountState, ServiceAccount]):
    """Reconciler for ``tlspc_service_account``."""

    type_name: ClassVar[str] = "tlspc_service_account"
    state_model = ServiceAccountState

    @staticmethod
    def _common(plan: ServiceAccountState) -> dict[str, Any]:
        return {"name": plan.name, "owner": plan.owner, "scopes": sorted(plan.scopes)}

    def create(self, plan: ServiceAccountState) -> ServiceAccountState:
        auth = parse_auth(plan)
        account = ServiceAccount.for_auth(auth, **self._common(plan))
        created = self._client.create_service_account(account)
        self._log.info(
            "created_resource", id=created.id, authentication_type=auth.authentication_type
        )
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> ServiceAccount:
        return self._client.get_service_account(resource_id)

    def _to_state(
        self, remote: ServiceAccount, previous: ServiceAccountState | None
    ) -> ServiceAccountState:
        if previous is None:
            if remote.auth_variant not in (KeyAgentAuth, FederatedIssuerAuth):
                raise TLSPCValidationError(
                    f"Service account {remote.id} is not an agent or federated account",
                    details=f"authentication type {remote.authentication_type!r}",
                )
            return ServiceAccountState(
                id=remote.id,
                name=remote.name,
                owner=remote.owner,
                scopes=set(remote.scopes),
                public_key=remote.public_key or None,
                credential_lifetime=remote.credential_lifetime or None,
                jwks_uri=remote.jwks_uri or None,
                issuer_url=remote.issuer_url or None,
                audience=remote.audience or None,
                subject=remote.subject or None,
                applications=set(remote.applications) if remote.applications else None,
            )

        changes: dict[str, Any] = {
            "id": remote.id,
            "name": remote.name,
            "owner": remote.owner,
            "scopes": set(remote.scopes),
        }
        for field in _OPTIONAL_FIELDS:
            server_value = getattr(remote, field)
            if (server_value or None) != (getattr(previous, field) or None):
                changes[field] = server_value
        return previous.model_copy(update=changes)

    def update(self, plan: ServiceAccountState, state: ServiceAccountState) -> ServiceAccountState:
        """Update in place; the authentication variant cannot change.

        Raises:
            TLSPCValidationError: If the plan is invalid or would switch the
                account between agent and federated authentication.
        """
        auth = parse_auth(plan)
        previous = stored_variant(state)
        if previous is not None and previous is not type(auth):
            raise TLSPCValidationError(
                "Could not update serviceAccount, authentication type cannot change",
                details=f"{previous.authentication_type} -> {auth.authentication_type}",
            )

        if plan.model_dump(exclude={"id"}) == state.model_dump(exclude={"id"}):
            self._log.debug("update_skipped", id=state.id)
            return self._with_id(plan, state.id)

        if isinstance(auth, FederatedIssuerAuth):
            # issuer_url and subject are sent only when they change
            unchanged = {
                f: None for f in ("issuer_url", "subject") if getattr(plan, f) == getattr(state, f)
            }
            auth = auth.model_copy(update=unchanged)

        account = ServiceAccount.for_auth(auth, id=state.id, **self._common(plan))
        self._client.update_service_account(account)
        self._log.info("updated_resource", id=state.id)
        return self._with_id(plan, state.id)

    def delete(self, state: ServiceAccountState) -> None:
        self._client.delete_service_account(state.id or "")
