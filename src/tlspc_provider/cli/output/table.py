"""Table output for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from rich.table import Table as RichTable

if TYPE_CHECKING:
    from rich.console import ConsoleRenderable, RichCast
    from rich.style import Style

OverflowMethod = Literal["fold", "crop", "ellipsis", "ignore"]
JustifyMethod = Literal["default", "left", "center", "right", "full"]


class Table(RichTable):
    """Rich Table whose columns wrap long values instead of truncating them.

    IDs and schema descriptions are often wider than the terminal, so
    ``add_column`` defaults to ``overflow="fold"``.
    """

    def add_column(
        self,
        header: ConsoleRenderable | RichCast | str = "",
        footer: ConsoleRenderable | RichCast | str = "",
        *,
        header_style: Style | str | None = None,
        style: Style | str | None = None,
        justify: JustifyMethod = "default",
        overflow: OverflowMethod = "fold",
        min_width: int | None = None,
        max_width: int | None = None,
        no_wrap: bool = False,
    ) -> None:
        super().add_column(
            header,
            footer,
            header_style=header_style,
            style=style,
            justify=justify,
            overflow=overflow,
            min_width=min_width,
            max_width=max_width,
            no_wrap=no_wrap,
        )
