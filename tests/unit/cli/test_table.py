"""Tests for the CLI table wrapper."""

from __future__ import annotations

import pytest
from rich.console import Console

from tlspc_provider.cli.output import Table


@pytest.mark.unit
class TestTableDefaults:
    """Tests that Table folds long values by default."""

    def test_add_column_uses_fold_overflow_by_default(self) -> None:
        table = Table()
        table.add_column("Name")
        assert table.columns[0].overflow == "fold"

    def test_add_column_respects_explicit_overflow(self) -> None:
        table = Table()
        table.add_column("ID", overflow="ellipsis", no_wrap=True)
        assert table.columns[0].overflow == "ellipsis"
        assert table.columns[0].no_wrap is True

    def test_long_values_are_not_truncated(self) -> None:
        """A value wider than the terminal is wrapped, not cut off."""
        value = "6f0e9c1e-8d37-4f6b-a3b4-1f2e3d4c5b6a" * 3
        table = Table()
        table.add_column("ID")
        table.add_row(value)
        console = Console(width=40, record=True)
        console.print(table)
        text = "".join(console.export_text().split())
        assert value.replace("-", "") in text.replace("│", "").replace("-", "")
