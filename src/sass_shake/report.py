from __future__ import annotations

import os
from collections.abc import Iterable

from rich.console import Console
from rich.table import Table


def file_sizes(files: Iterable[str]) -> list[tuple[str, float]]:
    """Pair each file with its size in kilobytes."""
    return [(path, os.stat(path).st_size / 1000) for path in files]


def build_table(files: Iterable[str]) -> Table | None:
    rows = file_sizes(files)
    if not rows:
        return None
    table = Table(show_lines=False)
    table.add_column("File", justify="left", min_width=10, overflow="fold")
    table.add_column("Size (kb)", justify="right", min_width=10)
    for path, size in rows:
        table.add_row(path, f"{size:g}")
    total = sum(size for _, size in rows)
    table.add_section()
    table.add_row("Total file size", f"{total:.2f}")
    return table


def render_table(files: Iterable[str], console: Console | None = None) -> None:
    table = build_table(files)
    if table is None:
        return
    (console or Console(highlight=False)).print(table)
