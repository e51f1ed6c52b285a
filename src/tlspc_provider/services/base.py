"""Base classes for resource reconcilers.

A reconciler maps one declared resource type onto API calls. The host
(a plan/apply engine, the CLI, or a test) owns state storage and ordering;
it hands the reconciler a planned state and/or the previously stored state
and stores whatever comes back.

Lifecycle:
    create(plan) -> state
    read(state) -> state
    update(plan, state) -> state
    delete(state) -> None
    import_state(id) -> state
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCDecodeError,
    TLSPCValidationError,
)

if TYPE_CHECKING:
    from tlspc_provider.integrations.tlspc.client import TLSPCClient

logger = structlog.get_logger()


class ResourceState(BaseModel):
    """Base class for declared/persisted resource state.

    Attribute names are the declared schema's names. Unknown attributes are
    rejected so typos in declared configuration fail early.
    """

    model_config = ConfigDict(extra="forbid")


class EntityState(ResourceState):
    """State of a resource backed by an API entity with an ID."""

    id: str | None = Field(default=None, description="The ID of this resource (computed)")


S = TypeVar("S", bound=ResourceState)
ES = TypeVar("ES", bound=EntityState)
R = TypeVar("R")


class DeclaredType(Generic[S]):
    """A declared type (resource or data source) bound to the API client.

    Class Attributes:
        type_name: Declared type name (e.g. ``tlspc_team``).
        state_model: Pydantic model describing the type's attributes.
    """

    type_name: ClassVar[str] = ""
    state_model: type[S]

    def __init__(self, client: TLSPCClient) -> None:
        """Initialize with the shared API client."""
        self._client = client
        self._log = logger.bind(type_name=self.type_name)

    @classmethod
    def schema(cls) -> dict[str, Any]:
        """Return the JSON schema of the declared attributes."""
        return cls.state_model.model_json_schema()

    def parse(self, config: dict[str, Any]) -> S:
        """Validate declared configuration into a planned state.

        Args:
            config: Declared attributes.

        Returns:
            The planned state.

        Raises:
            TLSPCValidationError: If the configuration does not match the schema.
        """
        try:
            return self.state_model.model_validate(config)
        except ValidationError as e:
            raise TLSPCValidationError(
                f"Invalid configuration for {self.type_name}", details=str(e)
            ) from e


class BaseReconciler(DeclaredType[S], ABC):
    """Abstract base class for reconcilers."""

    @abstractmethod
    def create(self, plan: S) -> S:
        """Create the remote object and return the state to store."""

    @abstractmethod
    def read(self, state: S) -> S:
        """Refresh stored state from the API."""

    @abstractmethod
    def update(self, plan: S, state: S) -> S:
        """Move the remote object from ``state`` to ``plan``."""

    @abstractmethod
    def delete(self, state: S) -> None:
        """Delete the remote object."""

    @abstractmethod
    def import_state(self, resource_id: str) -> S:
        """Build state for an existing remote object."""

    @staticmethod
    def _unchanged(plan: BaseModel, state: BaseModel, *fields: str) -> bool:
        """True when every named attribute is equal in plan and state."""
        return all(getattr(plan, f) == getattr(state, f) for f in fields)


class EntityReconciler(BaseReconciler[ES], Generic[ES, R]):
    """Reconciler for an API entity addressed by ID.

    Subclasses provide ``_fetch`` (get the remote entity) and ``_to_state``
    (map it to state, given the previous state when there is one); read and
    import are built on those two.

    Type Parameters:
        S: State model.
        R: Remote object type returned by the client.
    """

    @abstractmethod
    def _fetch(self, resource_id: str) -> R:
        """Get the remote object by ID."""

    @abstractmethod
    def _to_state(self, remote: R, previous: ES | None) -> ES:
        """Map a remote object to state."""

    def read(self, state: ES) -> ES:
        if not state.id:
            raise TLSPCValidationError(f"Cannot read {self.type_name} without an id")
        self._log.debug("reading_resource", id=state.id)
        return self._mapped(self._fetch(state.id), state)

    def import_state(self, resource_id: str) -> ES:
        """Import an existing object by ID (passthrough, then read)."""
        self._log.info("importing_resource", id=resource_id)
        return self._mapped(self._fetch(resource_id), None)

    def _mapped(self, remote: R, previous: ES | None) -> ES:
        try:
            return self._to_state(remote, previous)
        except ValidationError as e:
            raise TLSPCDecodeError(
                f"Unexpected {self.type_name} returned by the API", response_body=str(e)
            ) from e

    def _with_id(self, plan: ES, resource_id: str | None) -> ES:
        return plan.model_copy(update={"id": resource_id})
