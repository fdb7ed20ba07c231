from __future__ import annotations

import threading

import psycopg
import pytest

from literecord import (
    ContextClosedError,
    DatabaseContext,
    LiteRecord,
    MetadataError,
    UnknownDatabaseError,
)
from literecord.config import DatabaseSettings
from literecord.dialects import SQLiteDialect
from literecord.infrastructure import ConnectionManager, open_connection
from literecord.metadata import MetadataProvider
from tests.fakes import USERS_METADATA, User


def test_connection_is_cached_per_database(sqlite_settings):
    manager = ConnectionManager(sqlite_settings)
    try:
        first = manager.get("default")

        assert manager.get("default") is first
        assert "default" in manager
    finally:
        manager.close_all()

    assert "default" not in manager


def test_force_new_replaces_cached_connection(sqlite_settings):
    manager = ConnectionManager(sqlite_settings)
    try:
        first = manager.get("default")
        second = manager.get("default", force_new=True)

        assert second is not first
        assert manager.get("default") is second
    finally:
        manager.close_all()


def test_unknown_database_is_rejected(sqlite_settings):
    manager = ConnectionManager(sqlite_settings)

    with pytest.raises(UnknownDatabaseError):
        manager.get("archive")


def test_opening_one_database_does_not_block_another(sqlite_settings):
    entered = threading.Event()
    release = threading.Event()

    class BlockingDialect(SQLiteDialect):
        def connect(self, settings):
            entered.set()
            release.wait(timeout=5)
            return super().connect(settings)

    settings = sqlite_settings.model_copy(
        update={"databases": {"reports": DatabaseSettings(type="sqlite", path=":memory:")}}
    )
    manager = ConnectionManager(
        settings,
        dialect_for=lambda name: BlockingDialect() if name == "reports" else SQLiteDialect(),
    )
    opener = threading.Thread(target=manager.get, args=("reports",))
    opener.start()
    try:
        assert entered.wait(timeout=5)

        conn = manager.get("default")

        assert "reports" not in manager
        assert manager.get("default") is conn
    finally:
        release.set()
        opener.join(timeout=5)
        manager.close_all()


def test_open_connection_retries_transient_errors(monkeypatch, sqlite_settings):
    attempts = []

    class FlakyDialect(SQLiteDialect):
        def connect(self, settings):
            attempts.append(settings.path)
            if len(attempts) < 3:
                raise psycopg.OperationalError("server starting up")
            return super().connect(settings)

    monkeypatch.setattr(open_connection.retry, "sleep", lambda _seconds: None)

    conn = open_connection(FlakyDialect(), sqlite_settings, "default")
    conn.close()

    assert len(attempts) == 3


def test_context_defaults_to_application_database(sqlite_settings):
    with DatabaseContext(sqlite_settings) as ctx:
        assert ctx.database == "default"
    with DatabaseContext(sqlite_settings, database="reports") as ctx:
        assert ctx.database == "reports"


def test_closed_context_refuses_work(sqlite_settings):
    ctx = DatabaseContext(sqlite_settings)
    ctx.close()
    ctx.close()

    assert ctx.closed
    with pytest.raises(ContextClosedError):
        ctx.connection()
    with pytest.raises(ContextClosedError):
        ctx.metadata("users")
    with pytest.raises(ContextClosedError):
        ctx.bind(User)


def test_bind_without_arguments_binds_every_record_type(sqlite_settings):
    class Note(LiteRecord):
        pass

    with DatabaseContext(sqlite_settings) as ctx:
        ctx.bind()
        assert Note.resolve_context() is ctx

    assert LiteRecord._bound_context is None


def test_close_leaves_types_rebound_elsewhere(sqlite_settings):
    first = DatabaseContext(sqlite_settings)
    second = DatabaseContext(sqlite_settings)
    try:
        first.bind(User)
        second.bind(User)
        first.close()

        assert User.resolve_context() is second
    finally:
        second.close()


def test_registered_metadata_bypasses_introspection(sqlite_settings):
    with DatabaseContext(sqlite_settings) as ctx:
        ctx.register_metadata("users", USERS_METADATA)

        assert ctx.metadata("users") is USERS_METADATA


def test_metadata_provider_without_loader():
    provider = MetadataProvider()

    with pytest.raises(MetadataError, match="app.users"):
        provider.get("default", "users", "app")


def test_metadata_is_keyed_by_database_and_schema():
    loaded = []

    def loader(database, table, schema):
        loaded.append((database, table, schema))
        return USERS_METADATA

    provider = MetadataProvider(loader)
    provider.get("default", "users")
    provider.get("default", "users")
    provider.get("default", "users", "app")
    provider.get("reports", "users")

    assert loaded == [("default", "users", None), ("default", "users", "app"), ("reports", "users", None)]
