"""
Table metadata for LiteRecord.

`TableMetadata` describes one table: the ordered field list that fixes INSERT
column order, the single primary-key field, the fields the database fills
with a default when omitted, and the fields it generates itself. Metadata is
read from the database through the dialect and cached per
``(database, table, schema)`` by `MetadataProvider`.
"""
from __future__ import annotations

import threading
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from literecord.errors import MetadataError
from literecord.utils.logging import get_logger

log = get_logger(__name__)

MetadataKey = Tuple[str, str, Optional[str]]
MetadataLoader = Callable[[str, str, Optional[str]], "TableMetadata"]


class TableMetadata(BaseModel):
    """
    Read-only description of a table.
    """

    fields: Tuple[str, ...] = Field(..., description="Columns in declared order.")
    pk: str = Field(..., description="Primary-key column.")
    with_default: FrozenSet[str] = Field(
        default_factory=frozenset, description="Columns with a database default."
    )
    auto_fields: FrozenSet[str] = Field(
        default_factory=frozenset, description="Columns generated by the database."
    )

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def _check_columns(self) -> "TableMetadata":
        if not self.fields:
            raise ValueError("a table needs at least one field")
        if self.pk not in self.fields:
            raise ValueError(f"primary key '{self.pk}' is not one of the fields")
        unknown = (self.with_default | self.auto_fields) - set(self.fields)
        if unknown:
            raise ValueError(f"unknown fields: {', '.join(sorted(unknown))}")
        return self

    def is_auto(self, field: str) -> bool:
        return field in self.auto_fields

    def has_default(self, field: str) -> bool:
        return field in self.with_default


class MetadataProvider:
    """
    Thread-safe cache of `TableMetadata` keyed by (database, table, schema).

    Misses are resolved through `loader`, normally the dialect's `describe`
    running on the database's connection.
    """

    def __init__(self, loader: Optional[MetadataLoader] = None) -> None:
        self._loader = loader
        self._cache: Dict[MetadataKey, TableMetadata] = {}
        self._lock = threading.Lock()

    def get(self, database: str, table: str, schema: Optional[str] = None) -> TableMetadata:
        key = (database, table, schema)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        if self._loader is None:
            raise MetadataError(f"No metadata registered for '{_qualified(table, schema)}'")
        metadata = self._loader(database, table, schema)
        log.debug(
            "Loaded table metadata",
            extra={"database": database, "table": table, "schema": schema, "pk": metadata.pk},
        )
        with self._lock:
            return self._cache.setdefault(key, metadata)

    def register(
        self,
        database: str,
        table: str,
        metadata: TableMetadata,
        schema: Optional[str] = None,
    ) -> None:
        """Seed the cache, bypassing introspection for that table."""
        with self._lock:
            self._cache[(database, table, schema)] = metadata

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


def _qualified(table: str, schema: Optional[str]) -> str:
    return f"{schema}.{table}" if schema else table


__all__ = ["TableMetadata", "MetadataProvider", "MetadataLoader"]
