"""Pydantic models for TLS Protect Cloud applications."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel

OwnerType = Literal["USER", "TEAM"]


class OwnerAndType(TLSPCModel):
    """Application owner reference."""

    owner_id: str = Field(..., description="User or team ID")
    owner_type: OwnerType = Field(..., description="USER or TEAM")


class Application(TLSPCEntity):
    """Application grouping certificates and their issuing templates.

    Attributes:
        name: Application name.
        owners: Owning users and teams.
        certificate_templates: Template alias to template ID.
    """

    _entity_name: ClassVar[str] = "application"

    name: str = Field(default="", description="Application name")
    owners: list[OwnerAndType] = Field(default_factory=list, alias="ownerIdsAndTypes")
    certificate_templates: dict[str, str] = Field(
        default_factory=dict, alias="certificateIssuingTemplateAliasIdMap"
    )
    fqdns: list[str] = Field(default_factory=list)
    internal_ports: list[str] = Field(default_factory=list)
    ip_ranges: list[str] = Field(default_factory=list)
    ports: list[str] = Field(default_factory=list)


class ApplicationListResponse(TLSPCModel):
    """Envelope returned by application creation."""

    applications: list[Application] = Field(default_factory=list)
