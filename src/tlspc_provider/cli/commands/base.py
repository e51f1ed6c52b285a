"""Shared state, options and error handling for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, NoReturn

import typer
from rich.console import Console

from tlspc_provider.integrations.tlspc.exceptions import (
    TLSPCAPIError,
    TLSPCAuthError,
    TLSPCConfigError,
    TLSPCConnectionError,
    TLSPCError,
    TLSPCNotFoundError,
)
from tlspc_provider.provider import Provider

console = Console()


@dataclass
class CLIState:
    """Global options captured by the root callback."""

    api_key: str | None = None
    endpoint: str | None = None


ApiKeyOption = Annotated[
    str | None,
    typer.Option(
        "--api-key",
        "-k",
        help="TLS Protect Cloud API key (defaults to TLSPC_APIKEY or the config file)",
    ),
]

EndpointOption = Annotated[
    str | None,
    typer.Option(
        "--endpoint",
        "-e",
        help="API endpoint (defaults to TLSPC_ENDPOINT or https://api.venafi.cloud)",
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print raw JSON instead of a table"),
]


def get_provider(ctx: typer.Context) -> Provider:
    """Build a configured provider from the global options.

    Exits with status 1 when configuration cannot be resolved.
    """
    state = ctx.find_root().obj
    if not isinstance(state, CLIState):
        state = CLIState()
    provider = Provider()
    try:
        provider.configure(api_key=state.api_key, endpoint=state.endpoint)
    except TLSPCError as e:
        handle_tlspc_error(e)
    return provider


def handle_tlspc_error(error: TLSPCError) -> NoReturn:
    """Print a TLS Protect Cloud error and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, TLSPCConfigError):
        console.print(f"[red]Error:[/red] {error.message}")
        if error.details:
            console.print(f"  {error.details}")
        console.print("\n[dim]Hint: Run 'tlspc login' or set TLSPC_APIKEY.[/dim]")

    elif isinstance(error, TLSPCConnectionError):
        console.print("[red]Error:[/red] Cannot connect to TLS Protect Cloud")
        console.print(f"  {error.message}")
        if error.details:
            console.print(f"  Cause: {error.details}")

    elif isinstance(error, TLSPCAuthError):
        console.print("[red]Error:[/red] Authentication failed")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Check that your API key is valid.[/dim]")

    elif isinstance(error, TLSPCNotFoundError):
        console.print(f"[red]Error:[/red] {error.message}")

    elif isinstance(error, TLSPCAPIError):
        console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            console.print(f"  Status: {error.status_code}")
        if error.response_body:
            console.print(f"  Response: {error.response_body}")

    else:
        console.print(f"[red]Error:[/red] {error.message}")
        if error.details:
            console.print(f"  {error.details}")

    raise typer.Exit(1)
