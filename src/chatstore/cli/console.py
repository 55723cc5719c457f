"""Rich output helpers shared by the chatstore commands."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from chatstore.errors import StoreError

console = Console()


def error(msg: str) -> None:
    console.print(f"[red]{msg}[/red]")


def success(msg: str) -> None:
    console.print(f"[green]{msg}[/green]")


def dim(msg: str) -> None:
    console.print(f"[dim]{msg}[/dim]")


def store_failure(exc: StoreError) -> typer.Exit:
    """Report a failed store operation and build the exit to raise.

    Usage:
        except StoreError as e:
            raise store_failure(e) from None
    """
    error(f"{exc.cause or exc.message} ({exc.code})")
    return typer.Exit(1)


def create_table(title: str, columns: list[tuple[str, str | dict]]) -> Table:
    """Build a table from ``(name, style)`` or ``(name, column_kwargs)`` pairs."""
    table = Table(title=title)
    for name, column in columns:
        if isinstance(column, dict):
            table.add_column(name, **column)
        else:
            table.add_column(name, style=column)
    return table


def confirm_or_cancel(prompt: str, force: bool) -> bool:
    """Ask before a destructive command unless ``force`` is set."""
    if force:
        return True
    if typer.confirm(prompt):
        return True
    dim("Cancelled")
    return False
