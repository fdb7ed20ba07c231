from __future__ import annotations

import json
import sys
import types
from typing import Optional, Type

import typer
from rich.console import Console

from literecord.config import get_settings
from literecord.context import DatabaseContext
from literecord.errors import PageNotFoundError
from literecord.record import LiteRecord
from literecord.reporter import metadata_table, print_page
from literecord.utils.logging import configure_logging
from literecord.utils.naming import camelcase

app = typer.Typer(help="LiteRecord CLI.")


def _record_type(table: str, schema: Optional[str], database: Optional[str]) -> Type[LiteRecord]:
    """Build a throwaway record type bound to `table`."""
    kwds = {"table": table, "schema": schema, "database": database}
    return types.new_class(camelcase(table) or "Record", (LiteRecord,), kwds)


def _coerce_key(key: str) -> object:
    return int(key) if key.lstrip("-").isdigit() else key


def _context() -> DatabaseContext:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return DatabaseContext(settings)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    db = settings.database_settings()
    target = db.path if db.type == "sqlite" else f"{db.user}@{db.host}:{db.port}/{db.name}"
    typer.echo(
        f"database={settings.database} type={db.type} target={target} | "
        f"env={settings.app_env} log_level={settings.log_level}"
    )


@app.command()
def describe(
    table: str = typer.Argument(..., help="Table to describe."),
    schema: Optional[str] = typer.Option(None, "--schema", help="Schema qualifying the table."),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Logical database."),
) -> None:
    """
    Print the metadata LiteRecord uses for a table.
    """
    record_type = _record_type(table, schema, database)
    with _context() as ctx:
        metadata = record_type.metadata(ctx)
    Console().print(metadata_table(record_type.get_source(), metadata))


@app.command()
def get(
    table: str = typer.Argument(..., help="Table to read from."),
    key: str = typer.Argument(..., help="Primary-key value."),
    fields: str = typer.Option("*", "--fields", "-f", help="Comma-separated fields."),
    schema: Optional[str] = typer.Option(None, "--schema", help="Schema qualifying the table."),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Logical database."),
) -> None:
    """
    Fetch one row by primary key and print it as JSON.
    """
    record_type = _record_type(table, schema, database)
    with _context() as ctx:
        record = record_type.get(_coerce_key(key), fields, context=ctx)
    if record is None:
        typer.echo(f"No row in {record_type.get_source()} with key {key}.", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(record.to_dict(), indent=2, default=str))


@app.command()
def page(
    table: str = typer.Argument(..., help="Table to page through."),
    page_number: int = typer.Option(1, "--page", "-p", min=1, help="Page number."),
    per_page: int = typer.Option(20, "--per-page", "-n", min=1, help="Rows per page."),
    schema: Optional[str] = typer.Option(None, "--schema", help="Schema qualifying the table."),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Logical database."),
) -> None:
    """
    Print a page of rows ordered by primary key.
    """
    record_type = _record_type(table, schema, database)
    with _context() as ctx:
        pk = record_type.metadata(ctx).pk
        sql = f"SELECT * FROM {record_type.get_source()} ORDER BY {pk}"
        try:
            paginator = record_type.paginate_query(sql, page_number, per_page, context=ctx)
        except PageNotFoundError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
    print_page(paginator)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
