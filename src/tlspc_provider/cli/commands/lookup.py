"""Lookup commands backed by the provider's data sources."""

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

app = typer.Typer(
    name="lookup",
    help="Resolve IDs of existing TLS Protect Cloud objects",
    no_args_is_help=True,
)


def run_lookup(
    ctx: typer.Context, type_name: str, query: dict[str, Any], as_json: bool
) -> None:
    """Run a data source and print the resolved attributes."""
    with get_provider(ctx) as provider:
        try:
            lookup = provider.data_source(type_name)
            result = lookup.read(lookup.parse(query))
        except TLSPCError as e:
            handle_tlspc_error(e)

    if as_json:
        console.print_json(result.model_dump_json())
        return

    table = Table(title=type_name, show_header=False)
    table.add_column("Attribute", style="cyan", no_wrap=True)
    table.add_column("Value")
    for name, value in result.model_dump().items():
        table.add_row(name, "" if value is None else str(value))
    console.print(table)


@app.command("user")
def user(
    ctx: typer.Context,
    email: Annotated[str, typer.Argument(help="Email address of the user")],
    as_json: JsonOption = False,
) -> None:
    """Find a user's ID by email address."""
    run_lookup(ctx, "tlspc_user", {"email": email}, as_json)


@app.command("ca-product")
def ca_product(
    ctx: typer.Context,
    ca_type: Annotated[str, typer.Argument(help="CA type, e.g. BUILTIN or DIGICERT")],
    ca_name: Annotated[str, typer.Argument(help="Name of the CA account")],
    product_option: Annotated[str, typer.Argument(help="Name of the product option")],
    as_json: JsonOption = False,
) -> None:
    """Find a CA product option's ID."""
    run_lookup(
        ctx,
        "tlspc_ca_product",
        {"type": ca_type, "ca_name": ca_name, "product_option": product_option},
        as_json,
    )


@app.command("certificate-template")
def certificate_template(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Name of the certificate issuing template")],
    ca_type: Annotated[str, typer.Argument(help="CA type, e.g. BUILTIN")],
    as_json: JsonOption = False,
) -> None:
    """Find a certificate issuing template by name and CA type."""
    run_lookup(ctx, "tlspc_certificate_template", {"name": name, "ca_type": ca_type}, as_json)
