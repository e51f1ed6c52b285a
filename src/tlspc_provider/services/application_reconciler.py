"""Application reconciler."""

from __future__ import annotations

from typing import ClassVar, get_args

from pydantic import ConfigDict, Field

from tlspc_provider.integrations.tlspc.exceptions import TLSPCAPIError, TLSPCValidationError
from tlspc_provider.integrations.tlspc.models import Application, OwnerAndType, OwnerType
from tlspc_provider.services.base import EntityReconciler, EntityState, ResourceState

OWNER_TYPES = frozenset(get_args(OwnerType))


class ApplicationOwner(ResourceState):
    """One owner entry, ``{"type": "USER" | "TEAM", "owner": <id>}``."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="USER or TEAM")
    owner: str = Field(..., description="User or team ID")


class ApplicationState(EntityState):
    """Declared attributes of ``tlspc_application``."""

    name: str = Field(..., description="The name of the application")
    owners: set[ApplicationOwner] = Field(..., description="Owning users and teams")
    ca_template_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="CA template alias-to-id mapping for templates available to this application",
    )


def encode_owners(owners: set[ApplicationOwner]) -> list[OwnerAndType]:
    """Convert declared owners to API owner references.

    Raises:
        TLSPCValidationError: On an unknown owner type or an empty owner ID.
    """
    encoded = []
    for entry in sorted(owners, key=lambda o: (o.type, o.owner)):
        if entry.type not in OWNER_TYPES:
            raise TLSPCValidationError(
                f"Could not create application, unsupported owner type: {entry.type}"
            )
        if not entry.owner:
            raise TLSPCValidationError("Could not create application, undefined owner")
        encoded.append(OwnerAndType(owner_id=entry.owner, owner_type=entry.type))
    return encoded


class ApplicationReconciler(EntityReconciler[ApplicationState, Application]):
    """Reconciler for ``tlspc_application``."""

    type_name: ClassVar[str] = "tlspc_application"
    state_model = ApplicationState

    def create(self, plan: ApplicationState) -> ApplicationState:
        application = Application(
            name=plan.name,
            owners=encode_owners(plan.owners),
            certificate_templates=dict(plan.ca_template_aliases),
        )
        created = self._client.create_application(application)
        self._log.info("created_resource", id=created.id)
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> Application:
        return self._client.get_application(resource_id)

    def _to_state(
        self, remote: Application, previous: ApplicationState | None
    ) -> ApplicationState:
        return ApplicationState(
            id=remote.id,
            name=remote.name,
            owners={ApplicationOwner(type=o.owner_type, owner=o.owner_id) for o in remote.owners},
            ca_template_aliases=dict(remote.certificate_templates),
        )

    def update(self, plan: ApplicationState, state: ApplicationState) -> ApplicationState:
        owners = encode_owners(plan.owners)
        if self._unchanged(plan, state, "name", "owners", "ca_template_aliases"):
            self._log.debug("update_skipped", id=state.id)
            return self._with_id(plan, state.id)
        updated = self._client.update_application(
            Application(
                id=state.id,
                name=plan.name,
                owners=owners,
                certificate_templates=dict(plan.ca_template_aliases),
            )
        )
        self._log.info("updated_resource", id=state.id)
        return self._with_id(plan, updated.id or state.id)

    def delete(self, state: ApplicationState) -> None:
        """Delete the application.

        An application still holding certificate template aliases can refuse
        deletion. When the API rejects the delete, the aliases are cleared
        with an update and the delete is sent once more; errors from that
        second attempt propagate. Transport failures are not retried this way.
        """
        app_id = state.id or ""
        try:
            self._client.delete_application(app_id)
            return
        except TLSPCAPIError as e:
            self._log.warning("delete_rejected_clearing_aliases", id=app_id, error=e.message)

        self._client.update_application(
            Application(
                id=app_id,
                name=state.name,
                owners=encode_owners(state.owners),
                certificate_templates={},
            )
        )
        self._client.delete_application(app_id)
