"""Render the status table."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich import box
from rich.table import Table
from rich.text import Text

from .utils import console as default_console

if TYPE_CHECKING:
    from rich.console import Console

    from .status import StatusRow

PLACEHOLDER = "-"
HEADERS = ("Binary", "Status", "Version", "Latest")


def build_status_table(rows: Sequence[StatusRow]) -> Table:
    """Build a four-column table from status rows."""
    table = Table(box=box.SQUARE, show_lines=False)
    for header in HEADERS:
        table.add_column(header)

    for row in rows:
        if row.local.found:
            status = Text("Found", style="green")
        else:
            status = Text("Not Found", style="red")
        version = row.local.version or PLACEHOLDER
        latest = Text(row.remote.latest_version or PLACEHOLDER)
        if (
            row.local.version
            and row.remote.latest_version
            and row.local.version != row.remote.latest_version
        ):
            latest.stylize("yellow")
        table.add_row(row.entry.name, status, version, latest)

    return table


def print_status_table(rows: Sequence[StatusRow], console: Console | None = None) -> None:
    """Print the status table."""
    (console or default_console).print(build_status_table(rows))
