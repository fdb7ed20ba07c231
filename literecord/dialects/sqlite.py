"""
SQLite dialect (standard library ``sqlite3``).
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from literecord.config import DatabaseSettings
from literecord.dialects.abstract import Dialect
from literecord.errors import MetadataError
from literecord.metadata import TableMetadata
from literecord.sql import ParamStyle


class SQLiteDialect(Dialect):
    """
    sqlite3 connections in autocommit mode with foreign keys enforced.

    A single ``INTEGER PRIMARY KEY`` column aliases the rowid, so it is the
    only column SQLite generates by itself.
    """

    name: str = "sqlite"
    paramstyle: ParamStyle = ParamStyle.NAMED

    def connect(self, settings: DatabaseSettings) -> sqlite3.Connection:
        conn = sqlite3.connect(
            settings.path or ":memory:",
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
            check_same_thread=False,
            isolation_level=None,
        )
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def last_insert_id(
        self, connection: Any, pk: str, table: str, schema: Optional[str] = None
    ) -> Any:
        row = connection.execute("SELECT last_insert_rowid()").fetchone()
        return row[0] if row else None

    def describe(
        self, connection: Any, table: str, schema: Optional[str] = None
    ) -> TableMetadata:
        pragma = f"PRAGMA {schema}.table_info('{table}')" if schema else f"PRAGMA table_info('{table}')"
        # cid, name, type, notnull, dflt_value, pk
        columns = connection.execute(pragma).fetchall()

        source = self.source(table, schema)
        if not columns:
            raise MetadataError(f"Table '{source}' does not exist")

        pks = sorted((col for col in columns if col[5]), key=lambda col: col[5])
        if len(pks) != 1:
            raise MetadataError(
                f"Table '{source}' must have exactly one primary-key column, found {len(pks)}"
            )
        pk = pks[0]

        auto_fields = [pk[1]] if str(pk[2]).upper() == "INTEGER" else []
        return TableMetadata(
            fields=[col[1] for col in columns],
            pk=pk[1],
            with_default=[col[1] for col in columns if col[4] is not None],
            auto_fields=auto_fields,
        )


__all__ = ["SQLiteDialect"]
