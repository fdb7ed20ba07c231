"""
Test doubles shared by the unit tests.

`FakeConnection` is a minimal DB-API connection that records every statement
and answers from rules matched by SQL prefix, so tests can assert on the exact
SQL and parameters LiteRecord produces.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from literecord import LiteRecord, TableMetadata
from literecord.config import DatabaseSettings
from literecord.dialects import Dialect
from literecord.errors import MetadataError
from literecord.sql import ParamStyle

USERS_METADATA = TableMetadata(
    fields=["id", "name", "email"],
    pk="id",
    with_default=[],
    auto_fields=["id"],
)

SQLITE_SCHEMA = """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT,
        status TEXT NOT NULL DEFAULT 'active'
    );
    CREATE TABLE tags (
        code TEXT PRIMARY KEY,
        label TEXT
    );
"""


class User(LiteRecord, table="users"):
    pass


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn
        self._rows: List[Tuple[Any, ...]] = []
        self.description: Optional[List[Tuple[str, ...]]] = None
        self.rowcount = -1
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> Optional["FakeCursor"]:
        self._conn.executed.append((sql, params))
        columns, rows, rowcount = self._conn.response_for(sql)
        self.description = [(name,) for name in columns] if columns else None
        self._rows = list(rows)
        self.rowcount = rowcount
        if self._conn.fail_execute:
            return None
        return self

    def fetchone(self) -> Optional[Tuple[Any, ...]]:
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> List[Tuple[Any, ...]]:
        rows, self._rows = self._rows, []
        return rows

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """
    Records statements; answers them from rules matched by SQL prefix.
    """

    def __init__(self) -> None:
        self.executed: List[Tuple[str, Any]] = []
        self.fail_execute = False
        self.closed = False
        self._rules: List[Tuple[str, Sequence[str], List[Tuple[Any, ...]], int]] = []

    def on(
        self,
        prefix: str,
        rows: Sequence[Tuple[Any, ...]] = (),
        columns: Sequence[str] = (),
        rowcount: int = 1,
    ) -> None:
        self._rules.insert(0, (prefix, columns, list(rows), rowcount))

    def response_for(self, sql: str) -> Tuple[Sequence[str], List[Tuple[Any, ...]], int]:
        for prefix, columns, rows, rowcount in self._rules:
            if sql.startswith(prefix):
                return columns, rows, rowcount
        return (), [], 1

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True


class FakeDialect(Dialect):
    name = "fake"
    paramstyle = ParamStyle.NAMED

    def __init__(self, connection: FakeConnection, last_id: Any = 42) -> None:
        self._connection = connection
        self.last_id = last_id
        self.last_id_calls: List[Tuple[str, str, Optional[str]]] = []

    def connect(self, settings: DatabaseSettings) -> FakeConnection:
        return self._connection

    def last_insert_id(self, connection: Any, pk: str, table: str, schema: Optional[str] = None) -> Any:
        self.last_id_calls.append((pk, table, schema))
        return self.last_id

    def describe(self, connection: Any, table: str, schema: Optional[str] = None) -> TableMetadata:
        raise MetadataError(f"Fake dialect cannot describe '{table}'")


class FakeConnectionManager:
    def __init__(self, connection: FakeConnection, dialect: FakeDialect) -> None:
        self.connection = connection
        self.fake_dialect = dialect
        self.requests: List[Tuple[str, bool]] = []
        self.closed = False

    def get(self, database: str, force_new: bool = False) -> FakeConnection:
        self.requests.append((database, force_new))
        return self.connection

    def dialect(self, database: str) -> FakeDialect:
        return self.fake_dialect

    def close_all(self) -> None:
        self.closed = True


def sql_statements(conn: FakeConnection) -> List[str]:
    return [sql for sql, _ in conn.executed]

