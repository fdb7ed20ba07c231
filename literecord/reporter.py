from __future__ import annotations

from typing import Any, Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from literecord.metadata import TableMetadata
from literecord.paginator import Paginator


def metadata_table(source: str, metadata: TableMetadata) -> Table:
    """
    Render a table's metadata, one row per field in declared order.
    """
    table = Table(title=f"Table {source}", box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Primary key", justify="center", style="bold green")
    table.add_column("Default", justify="center", style="yellow")
    table.add_column("Generated", justify="center", style="magenta")

    for position, name in enumerate(metadata.fields, start=1):
        table.add_row(
            str(position),
            name,
            "✓" if name == metadata.pk else "",
            "✓" if metadata.has_default(name) else "",
            "✓" if metadata.is_auto(name) else "",
        )
    return table


def rows_table(
    rows: Iterable[Any],
    title: Optional[str] = None,
    caption: Optional[str] = None,
) -> Table:
    """
    Render records (or plain dicts) as a table. Columns follow the first row.
    """
    table = Table(title=title, caption=caption, box=box.ROUNDED)
    columns: list[str] = []
    for row in rows:
        data = row.to_dict() if hasattr(row, "to_dict") else dict(row)
        if not columns:
            columns = list(data)
            for name in columns:
                table.add_column(name, overflow="fold")
        table.add_row(*("" if data.get(name) is None else str(data.get(name)) for name in columns))
    return table


def print_page(paginator: Paginator, console: Optional[Console] = None) -> None:
    """Print one page of records with its page bookkeeping as caption."""
    console = console or Console()
    if not paginator.items:
        console.print("[yellow]No rows to display.[/yellow]")
        return
    caption = (
        f"Page {paginator.page} of {paginator.total_pages} │ "
        f"{paginator.count:,} rows │ {paginator.per_page} per page"
    )
    console.print(rows_table(paginator.items, caption=caption))


__all__ = ["metadata_table", "rows_table", "print_page"]
