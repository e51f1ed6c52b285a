"""Commands for inspecting resource and data source types."""

from __future__ import annotations

from typing import Annotated, Any

import typer

from tlspc_provider.cli.commands.base import (
    JsonOption,
    console,
    get_provider,
    handle_tlspc_error,
)
from tlspc_provider.cli.output import Table
from tlspc_provider.integrations.tlspc.exceptions import TLSPCError
from tlspc_provider.provider import DATA_SOURCES, RESOURCES, Provider

TypeArgument = Annotated[str, typer.Argument(help="Resource or data source type, e.g. tlspc_team")]


def resources() -> None:
    """List the resource and data source types this provider manages."""
    table = Table(title="TLS Protect Cloud types")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Description")
    for name, reconciler in sorted(RESOURCES.items()):
        table.add_row(name, "resource", _summary(reconciler.__doc__))
    for name, lookup in sorted(DATA_SOURCES.items()):
        table.add_row(name, "data source", _summary(lookup.__doc__))
    console.print(table)


def schema(type_name: TypeArgument, as_json: JsonOption = False) -> None:
    """Show the attributes a resource or data source accepts."""
    try:
        doc = Provider().schema(type_name)
    except TLSPCError as e:
        handle_tlspc_error(e)

    if as_json:
        console.print_json(data=doc)
        return

    required = set(doc.get("required", []))
    table = Table(title=type_name)
    table.add_column("Attribute", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Description")
    for name, prop in doc.get("properties", {}).items():
        table.add_row(
            name,
            describe_type(prop),
            "yes" if name in required else "",
            prop.get("description", ""),
        )
    console.print(table)


def read(
    ctx: typer.Context,
    type_name: TypeArgument,
    resource_id: Annotated[str, typer.Argument(help="ID of the remote object")],
) -> None:
    """Import a remote object by ID and print its state as JSON."""
    with get_provider(ctx) as provider:
        try:
            state = provider.resource(type_name).import_state(resource_id)
        except TLSPCError as e:
            handle_tlspc_error(e)
    console.print_json(state.model_dump_json(by_alias=True))


def describe_type(prop: dict[str, Any]) -> str:
    """Render a JSON schema property type for humans."""
    if "$ref" in prop:
        return prop["$ref"].rsplit("/", 1)[-1]
    if "anyOf" in prop:
        kinds = [describe_type(p) for p in prop["anyOf"] if p.get("type") != "null"]
        return " | ".join(kinds)
    kind = prop.get("type", "any")
    if kind == "array":
        return f"list[{describe_type(prop.get('items', {}))}]"
    if kind == "object" and isinstance(prop.get("additionalProperties"), dict):
        return f"map[{describe_type(prop['additionalProperties'])}]"
    return str(kind)


def _summary(doc: str | None) -> str:
    return (doc or "").strip().splitlines()[0] if doc else ""
