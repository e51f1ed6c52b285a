"""CLI output utilities.

Usage:
    from tlspc_provider.cli.output import Table

    table = Table(title="Resources")
    table.add_column("Type", style="cyan")
    table.add_row("tlspc_team")
    console.print(table)
"""

from tlspc_provider.cli.output.table import Table

__all__ = ["Table"]
