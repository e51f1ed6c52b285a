"""Pydantic models for TLS Protect Cloud plugins."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel


class Plugin(TLSPCEntity):
    """A CA connector or machine plugin registered with the tenant.

    Attributes:
        plugin_type: Plugin type (e.g. CA, MACHINE).
        manifest: Plugin manifest as a decoded JSON document.
    """

    _entity_name: ClassVar[str] = "plugin"

    plugin_type: str = Field(default="", description="Plugin type")
    manifest: Any = Field(default=None, description="Plugin manifest document")

    def to_create_payload(self) -> dict[str, Any]:
        # manifest is sent even when null
        payload = self.to_payload(exclude={"id", "manifest"})
        payload["manifest"] = self.manifest
        return payload


class PluginListResponse(TLSPCModel):
    """Envelope returned by plugin creation."""

    plugins: list[Plugin] = Field(default_factory=list)
