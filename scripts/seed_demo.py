"""
Demo data seeding script for LiteRecord.

Creates a `users` table on the configured database and fills it with
deterministic pseudo-random rows through `LiteRecord.create`, so the CLI's
`describe`, `get` and `page` commands have something to show.
"""

from __future__ import annotations

import random
import sys
import time
from datetime import datetime, timezone
from typing import Optional

import typer

from literecord import DatabaseContext, LiteRecord, get_settings

app = typer.Typer(help="Create and seed the demo `users` table.")

_DDL = {
    "pgsql": """
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT,
            status TEXT NOT NULL DEFAULT 'active',
            created_at TEXT
        )
    """,
    "sqlite": """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT,
            status TEXT NOT NULL DEFAULT 'active',
            created_at TEXT
        )
    """,
}

_FIRST_NAMES = ["Ana", "Bruno", "Carla", "Diego", "Elena", "Fabio", "Gina", "Hugo"]
_DOMAINS = ["example.com", "example.org", "mail.test"]


class User(LiteRecord, table="users"):
    def before_create(self) -> None:
        if not self.is_set("created_at"):
            self.created_at = datetime.now(timezone.utc).isoformat()


def _create_schema(ctx: DatabaseContext) -> None:
    User.query(_DDL[User.dialect(ctx).name], context=ctx).close()


def _seed(ctx: DatabaseContext, rows: int, seed: int) -> int:
    """Insert `rows` users and return how many were created."""
    rng = random.Random(seed)
    created = 0
    for i in range(rows):
        name = rng.choice(_FIRST_NAMES)
        user = User(name=f"{name} {i}")
        # Roughly one user in five has no email; it is written as NULL.
        if rng.random() > 0.2:
            user.email = f"{name.lower()}{i}@{rng.choice(_DOMAINS)}"
        if user.create(context=ctx):
            created += 1
    return created


@app.command()
def main(
    rows: int = typer.Option(
        50,
        "--rows",
        "-r",
        help="Number of users to create.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    database: Optional[str] = typer.Option(
        None,
        "--database",
        "-d",
        help="Logical database (defaults to LITERECORD_DATABASE).",
    ),
) -> None:
    """
    Create the demo table and insert synthetic users.
    """
    start = time.perf_counter()
    with DatabaseContext(get_settings(), database=database) as ctx:
        _create_schema(ctx)
        created = _seed(ctx, rows=rows, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"Created {created:,} users in {duration:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
