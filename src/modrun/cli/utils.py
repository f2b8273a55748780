"""
CLI utility helpers — output formatting and source resolution.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from modrun.core.errors import ModrunError
from modrun.core.settings import get_settings
from modrun.framework.discovery import find_src_directory

console = Console()
err_console = Console(stderr=True)


def resolve_src(src: Path | None) -> Path:
    """Use ``--src`` when given, otherwise search upwards for the source directory."""
    if src is not None:
        return src
    return find_src_directory(dirname=get_settings().source_dirname)


def fail(error: Exception) -> None:
    """Print an error and exit with status 1."""
    label = error.category.value if isinstance(error, ModrunError) else type(error).__name__
    err_console.print(f"[bold red]Error[/bold red] ({label}): {escape(str(error))}")
    raise typer.Exit(code=1)


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*("" if v is None else str(v) for v in row.values()))
    console.print(table)
