"""Login command: store TLS Protect Cloud credentials."""

from __future__ import annotations

import typer
from pydantic import SecretStr, ValidationError
from rich.prompt import Confirm, Prompt

from tlspc_provider.cli.commands.base import (
    ApiKeyOption,
    EndpointOption,
    console,
    handle_tlspc_error,
)
from tlspc_provider.integrations.tlspc.client import TLSPCClient
from tlspc_provider.integrations.tlspc.config import DEFAULT_ENDPOINT, TLSPCConfig
from tlspc_provider.integrations.tlspc.exceptions import TLSPCError


def login(
    api_key: ApiKeyOption = None,
    endpoint: EndpointOption = None,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Validate an API key and save it to ~/.config/tlspc/config.yaml.

    The file is readable by its owner only. Saved credentials are used
    whenever no API key is passed and TLSPC_APIKEY is unset.
    """
    if (
        TLSPCConfig.exists()
        and not force
        and not Confirm.ask(
            "[yellow]TLS Protect Cloud is already configured. Overwrite?[/yellow]",
            default=False,
        )
    ):
        console.print("[dim]Cancelled[/dim]")
        raise typer.Exit(0)

    if not api_key:
        api_key = Prompt.ask("Enter your TLS Protect Cloud API key", password=True)

    if not api_key:
        console.print("[red]Error: API key is required[/red]")
        raise typer.Exit(1) from None

    try:
        config = TLSPCConfig(api_key=SecretStr(api_key), endpoint=endpoint or DEFAULT_ENDPOINT)
    except ValidationError as e:
        console.print(f"[red]Error: Invalid configuration: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(1) from None

    console.print(f"[dim]Validating API key against {config.endpoint}...[/dim]")
    try:
        with TLSPCClient(config) as client:
            templates = client.list_certificate_templates()
    except TLSPCError as e:
        handle_tlspc_error(e)

    config.save()
    console.print(f"[green]✓ Credentials saved to {TLSPCConfig.get_config_path()}[/green]")
    console.print(f"[dim]{len(templates)} certificate template(s) visible[/dim]")
