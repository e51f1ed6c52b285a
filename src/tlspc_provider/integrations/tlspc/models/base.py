"""Base models for TLS Protect Cloud entities.

The REST API speaks camelCase JSON. Models use snake_case attributes with a
camelCase alias generator; fields whose wire names do not follow the
convention (``jwksURI``, ``subjectCNRegexes`` ...) declare explicit aliases.
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TLSPCModel(BaseModel):
    """Base class for all request/response DTOs.

    Unknown response fields are ignored so new vendor attributes do not
    break decoding.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Self:
        """Create from an API response body.

        Args:
            data: Decoded JSON object.

        Returns:
            Model instance.
        """
        return cls.model_validate(data)

    def to_payload(
        self,
        *,
        include: set[str] | None = None,
        exclude: set[str] | None = None,
    ) -> dict[str, Any]:
        """Serialize to a JSON request body using wire names.

        None values are dropped, matching the API's optional-field handling.

        Args:
            include: Attribute names to keep (all when None).
            exclude: Attribute names to leave out.

        Returns:
            Dictionary suitable for a request body.
        """
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            include=include,
            exclude=exclude,
        )


class TLSPCEntity(TLSPCModel):
    """An API entity addressed by a server-assigned ID.

    An empty or missing ``id`` in a response is how the API signals that
    nothing was created or found.
    """

    _entity_name: ClassVar[str] = "entity"

    id: str | None = Field(default=None, description="Server-assigned identifier")

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    def to_create_payload(self) -> dict[str, Any]:
        """Convert to a create request body (never sends ``id``)."""
        return self.to_payload(exclude={"id"})

    def to_update_payload(self) -> dict[str, Any]:
        """Convert to an update request body; the ID travels in the path."""
        return self.to_create_payload()
