"""
PostgreSQL dialect (psycopg 3).
"""

from __future__ import annotations

from typing import Any, List, Optional

import psycopg

from literecord.config import DatabaseSettings
from literecord.dialects.abstract import Dialect
from literecord.errors import MetadataError
from literecord.metadata import TableMetadata
from literecord.sql import ParamStyle

_COLUMNS_SQL = """
    SELECT column_name, column_default, is_identity, is_generated
    FROM information_schema.columns
    WHERE table_schema = COALESCE(%s, current_schema()) AND table_name = %s
    ORDER BY ordinal_position
"""

_PK_SQL = """
    SELECT kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
     AND tc.table_name = kcu.table_name
    WHERE tc.constraint_type = 'PRIMARY KEY'
      AND tc.table_schema = COALESCE(%s, current_schema())
      AND tc.table_name = %s
    ORDER BY kcu.ordinal_position
"""


class PostgresDialect(Dialect):
    """
    psycopg connections with autocommit, so each statement stands alone.
    """

    name: str = "pgsql"
    paramstyle: ParamStyle = ParamStyle.PYFORMAT

    def connect(self, settings: DatabaseSettings) -> psycopg.Connection:
        return psycopg.connect(settings.dsn(), autocommit=True)

    def last_insert_id(
        self, connection: Any, pk: str, table: str, schema: Optional[str] = None
    ) -> Any:
        with connection.cursor() as cur:
            cur.execute(
                "SELECT currval(pg_get_serial_sequence(%s, %s))",
                (self.source(table, schema), pk),
            )
            row = cur.fetchone()
        return row[0] if row else None

    def describe(
        self, connection: Any, table: str, schema: Optional[str] = None
    ) -> TableMetadata:
        with connection.cursor() as cur:
            cur.execute(_COLUMNS_SQL, (schema, table))
            columns = cur.fetchall()
            cur.execute(_PK_SQL, (schema, table))
            pks: List[str] = [row[0] for row in cur.fetchall()]

        source = self.source(table, schema)
        if not columns:
            raise MetadataError(f"Table '{source}' does not exist")
        if len(pks) != 1:
            raise MetadataError(
                f"Table '{source}' must have exactly one primary-key column, found {len(pks)}"
            )

        fields: List[str] = []
        with_default: List[str] = []
        auto_fields: List[str] = []
        for name, default, is_identity, is_generated in columns:
            fields.append(name)
            if default is not None:
                with_default.append(name)
                if str(default).startswith("nextval("):
                    auto_fields.append(name)
            if is_identity == "YES" or is_generated == "ALWAYS":
                auto_fields.append(name)

        return TableMetadata(
            fields=fields, pk=pks[0], with_default=with_default, auto_fields=auto_fields
        )


__all__ = ["PostgresDialect"]
