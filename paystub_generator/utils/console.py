import sys
from typing import List, Optional

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

_console = Console()
_error_console = Console(stderr=True)


def is_interactive() -> bool:
    """Check if we are in an interactive TTY session."""
    return sys.stdin.isatty() and sys.stdout.isatty()


def print_step(title: str) -> None:
    """Print a step header."""
    _console.rule(f"[bold blue]{title}[/]")


def print_success(message: str) -> None:
    """Print a success message."""
    _console.print(f"[bold green]SUCCESS:[/] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    _console.print(f"[bold yellow]WARNING:[/] {message}")


def print_error(message: str, exit_code: Optional[int] = None) -> None:
    """Print an error message to stderr and optionally exit."""
    _error_console.print(f"[bold red]ERROR:[/] {message}")

    if exit_code is not None:
        sys.exit(exit_code)


def print_table(title: str, columns: List[str], rows: List[List[str]], right_align: int = 0) -> None:
    """Print a table; the last `right_align` columns are right-justified."""
    table = Table(title=title)
    for index, col in enumerate(columns):
        justify = "right" if index >= len(columns) - right_align else "left"
        table.add_column(col, justify=justify)
    for row in rows:
        table.add_row(*row)
    if not rows:
        _console.print(f"{title}: (No data)")
        return
    _console.print(table)


def ask_confirm(prompt_text: str, default: bool = False) -> bool:
    """Ask for yes/no confirmation; non-interactive sessions get the default."""
    if not is_interactive():
        return default
    return bool(Confirm.ask(prompt_text, default=default))
