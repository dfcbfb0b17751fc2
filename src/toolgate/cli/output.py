"""
Console output helpers shared by the toolgate commands.
"""

import json
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()


def print_error(message: str) -> None:
    """Print an error line."""
    console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{message}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]i[/blue] {message}")


def print_json(data: Any) -> None:
    """Pretty-print a JSON-serializable value (a result envelope, a schema)."""
    console.print_json(json.dumps(data))


def print_table(title: str, headers: list[str], rows: list[list[str]]) -> None:
    """
    Print a table whose first column is the row key.

    The key column is highlighted and never wrapped so tool names stay whole.
    """
    table = Table(title=title)
    for i, header in enumerate(headers):
        if i == 0:
            table.add_column(header, style="cyan", no_wrap=True)
        else:
            table.add_column(header)

    for row in rows:
        table.add_row(*row)

    console.print(table)
