from typing import List

from rich.console import Console
from rich.table import Table

_console = Console()


def print_step(title: str) -> None:
    """Print a step header."""
    _console.rule(f"[bold blue]{title}[/]")


def print_success(message: str) -> None:
    """Print a success message."""
    _console.print(f"[bold green]SUCCESS:[/] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    _console.print(f"[bold yellow]WARNING:[/] {message}")


def print_table(title: str, columns: List[str], rows: List[List[str]]) -> None:
    """Print a table with a title, or a placeholder when there are no rows."""
    if not rows:
        _console.print(f"{title}\n(No data)")
        return

    table = Table(title=title)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[str(v) for v in row])
    _console.print(table)


def styled_direction(text: str, direction: str) -> str:
    """Wrap text in rich markup for a favorable/unfavorable/neutral change."""
    if direction == "favorable":
        return f"[green]{text}[/]"
    if direction == "unfavorable":
        return f"[red]{text}[/]"
    return text
