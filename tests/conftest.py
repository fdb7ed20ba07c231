"""
Pytest configuration for LiteRecord.

Provides fixtures for:
- A fake DB-API connection that records every statement it receives
- A DatabaseContext wired to that fake connection with registered metadata
- A real SQLite database under tmp_path for round-trip tests
- PostgreSQL settings for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from literecord import DatabaseContext, Settings
from tests.fakes import (
    SQLITE_SCHEMA,
    USERS_METADATA,
    FakeConnection,
    FakeConnectionManager,
    FakeDialect,
    User,
)


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings isolated from the environment and any .env file.
    """
    return Settings(_env_file=None, database="default", db_type="sqlite", db_path=":memory:")


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def fake_dialect(fake_conn: FakeConnection) -> FakeDialect:
    return FakeDialect(fake_conn)


@pytest.fixture
def fake_ctx(
    test_settings: Settings, fake_conn: FakeConnection, fake_dialect: FakeDialect
) -> Generator[DatabaseContext, None, None]:
    """
    Context on the fake connection, with `users` metadata registered and
    bound to the `User` record type.
    """
    ctx = DatabaseContext(
        test_settings,
        connections=FakeConnectionManager(fake_conn, fake_dialect),  # type: ignore[arg-type]
    )
    ctx.register_metadata("users", USERS_METADATA)
    ctx.bind(User)
    try:
        yield ctx
    finally:
        ctx.close()


@pytest.fixture
def sqlite_settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        database="default",
        db_type="sqlite",
        db_path=str(tmp_path / "literecord.db"),
    )


@pytest.fixture
def sqlite_ctx(sqlite_settings: Settings) -> Generator[DatabaseContext, None, None]:
    """
    Context on a fresh SQLite file with the `users` and `tags` tables.
    """
    ctx = DatabaseContext(sqlite_settings)
    ctx.connection().executescript(SQLITE_SCHEMA)
    try:
        yield ctx
    finally:
        ctx.close()


@pytest.fixture(scope="session")
def pg_settings() -> Settings:
    """
    PostgreSQL settings for integration tests, overridable via environment.
    """
    return Settings(
        _env_file=None,
        database="default",
        db_type="pgsql",
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "literecord"),
    )
