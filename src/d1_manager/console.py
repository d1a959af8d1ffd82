from typing import Any, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

console = Console(theme=custom_theme)


def print_success(message: str) -> None:
    console.print(f"[success]✔ {escape(message)}[/success]")


def print_error(message: str) -> None:
    console.print(f"[error]✘ {escape(message)}[/error]")


def render_rows(columns: List[str], rows: List[List[Any]], title: str = None) -> Table:
    table = Table(title=title)
    for name in columns:
        table.add_column(name, style="cyan")
    for row in rows:
        table.add_row(*["NULL" if value is None else escape(str(value)) for value in row])
    return table
