"""Plugin reconciler.

The manifest is declared as JSON text and sent as a decoded document.
Reads keep the declared text when the server's manifest is the same
document, so formatting and key order never show up as drift.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.exceptions import TLSPCValidationError
from tlspc_provider.integrations.tlspc.models import Plugin
from tlspc_provider.services.base import EntityReconciler, EntityState


class PluginState(EntityState):
    """Declared attributes of ``tlspc_plugin``."""

    type: str = Field(..., description="Type of plugin, e.g. CA or MACHINE")
    manifest: str = Field(..., description="Plugin manifest as a JSON document")


def decode_manifest(text: str) -> Any:
    """Decode a manifest document.

    Raises:
        TLSPCValidationError: If the text is not valid JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise TLSPCValidationError(f"Could not create plugin, invalid manifest: {e}") from e


class PluginReconciler(EntityReconciler[PluginState, Plugin]):
    """Reconciler for ``tlspc_plugin``."""

    type_name: ClassVar[str] = "tlspc_plugin"
    state_model = PluginState

    def create(self, plan: PluginState) -> PluginState:
        plugin = Plugin(plugin_type=plan.type, manifest=decode_manifest(plan.manifest))
        created = self._client.create_plugin(plugin)
        self._log.info("created_resource", id=created.id, plugin_type=plan.type)
        return self._with_id(plan, created.id)

    def _fetch(self, resource_id: str) -> Plugin:
        return self._client.get_plugin(resource_id)

    def _to_state(self, remote: Plugin, previous: PluginState | None) -> PluginState:
        manifest = json.dumps(remote.manifest)
        if previous is not None and decode_manifest(previous.manifest) == remote.manifest:
            manifest = previous.manifest
        return PluginState(id=remote.id, type=remote.plugin_type, manifest=manifest)

    def update(self, plan: PluginState, state: PluginState) -> PluginState:
        manifest = decode_manifest(plan.manifest)
        if plan.type == state.type and manifest == decode_manifest(state.manifest):
            self._log.debug("update_skipped", id=state.id)
        else:
            self._client.update_plugin(
                Plugin(id=state.id, plugin_type=plan.type, manifest=manifest)
            )
            self._log.info("updated_resource", id=state.id)
        return self._with_id(plan, state.id)

    def delete(self, state: PluginState) -> None:
        self._client.delete_plugin(state.id or "")
