"""
Dialect interface for LiteRecord.

A dialect hides everything that differs between database engines: how to
open a connection, the driver's placeholder syntax, how to cap a SELECT to a
number of rows, how to read back a generated key, and how to describe a
table.
"""

from __future__ import annotations

import abc
from typing import Any, Optional

from literecord.config import DatabaseSettings
from literecord.metadata import TableMetadata
from literecord.sql import ParamStyle


class Dialect(abc.ABC):
    """
    Base class of the engine-specific helpers.

    Subclasses set `name` and `paramstyle` and implement the abstract methods.
    """

    name: str
    paramstyle: ParamStyle

    @abc.abstractmethod
    def connect(self, settings: DatabaseSettings) -> Any:  # pragma: no cover - interface only
        """Open a DB-API connection in autocommit mode."""
        raise NotImplementedError

    @abc.abstractmethod
    def last_insert_id(
        self, connection: Any, pk: str, table: str, schema: Optional[str] = None
    ) -> Any:  # pragma: no cover - interface only
        """Most recent key generated for `table` on `connection`."""
        raise NotImplementedError

    @abc.abstractmethod
    def describe(
        self, connection: Any, table: str, schema: Optional[str] = None
    ) -> TableMetadata:  # pragma: no cover - interface only
        """Read the table's metadata from the database catalog."""
        raise NotImplementedError

    def apply_row_limit(self, sql: str, limit: int, offset: int = 0) -> str:
        """
        Restrict a SELECT to at most `limit` rows, skipping `offset` rows.
        """
        sql = f"{sql.rstrip().rstrip(';').rstrip()} LIMIT {int(limit)}"
        if offset:
            sql = f"{sql} OFFSET {int(offset)}"
        return sql

    @staticmethod
    def source(table: str, schema: Optional[str] = None) -> str:
        return f"{schema}.{table}" if schema else table


__all__ = ["Dialect"]
