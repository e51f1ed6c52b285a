"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer

from tlspc_provider import __version__
from tlspc_provider.cli.commands import login, lookup, resources
from tlspc_provider.cli.commands.base import (
    ApiKeyOption,
    CLIState,
    EndpointOption,
    console,
)
from tlspc_provider.logging.config import configure_logging

app = typer.Typer(
    name="tlspc",
    help="Manage Venafi TLS Protect Cloud resources.",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"tlspc version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Render log output as JSON.",
    ),
    api_key: ApiKeyOption = None,
    endpoint: EndpointOption = None,
) -> None:
    """TLS Protect Cloud provider CLI."""
    configure_logging(verbose=verbose, debug=debug, json_output=json_logs)
    ctx.obj = CLIState(api_key=api_key, endpoint=endpoint)


# Register subcommands
app.command()(login.login)
app.command()(resources.resources)
app.command()(resources.schema)
app.command()(resources.read)
app.add_typer(lookup.app, name="lookup")


if __name__ == "__main__":
    app()
