"""
Database context for LiteRecord.

A `DatabaseContext` holds everything that used to be process-wide state: the
resolved settings, the logical database the application is bound to, the
cached connections and the cached table metadata. Create one at application
start, bind it to record types (or pass it per call with ``context=``), and
`close()` it at shutdown. A closed context is never reopened implicitly.
"""

from __future__ import annotations

from typing import Any, List, Optional, Type

from literecord.config import Settings, get_settings, read
from literecord.dialects import Dialect
from literecord.errors import ContextClosedError
from literecord.infrastructure.db_factory import ConnectionManager
from literecord.metadata import MetadataProvider, TableMetadata
from literecord.utils.logging import get_logger

log = get_logger(__name__)


class DatabaseContext:
    """
    Explicit owner of connections and metadata for a set of record types.

    Example
    -------
        with DatabaseContext() as ctx:
            ctx.bind(User, Order)
            User({"name": "Ana"}).create()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        database: Optional[str] = None,
        connections: Optional[ConnectionManager] = None,
        metadata: Optional[MetadataProvider] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.database: str = database or read("config", self.settings)["application"]["database"]
        self._connections = connections or ConnectionManager(self.settings)
        self._metadata = metadata or MetadataProvider(self._load_metadata)
        self._bound: List[type] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise ContextClosedError("DatabaseContext has been closed")

    def dialect(self, database: Optional[str] = None) -> Dialect:
        return self._connections.dialect(database or self.database)

    def connection(self, database: Optional[str] = None, force_new: bool = False) -> Any:
        """Connection of `database` (defaults to the application database)."""
        self._ensure_open()
        return self._connections.get(database or self.database, force_new=force_new)

    def metadata(
        self, table: str, schema: Optional[str] = None, database: Optional[str] = None
    ) -> TableMetadata:
        self._ensure_open()
        return self._metadata.get(database or self.database, table, schema)

    def register_metadata(
        self,
        table: str,
        metadata: TableMetadata,
        schema: Optional[str] = None,
        database: Optional[str] = None,
    ) -> None:
        """Declare a table's metadata instead of reading it from the catalog."""
        self._metadata.register(database or self.database, table, metadata, schema=schema)

    def _load_metadata(self, database: str, table: str, schema: Optional[str]) -> TableMetadata:
        return self.dialect(database).describe(self.connection(database), table, schema)

    def bind(self, *record_types: Type[Any]) -> "DatabaseContext":
        """
        Make this context the default of `record_types`.

        With no arguments, binds the `LiteRecord` base class so every record
        type without a binding of its own uses this context.
        """
        self._ensure_open()
        if not record_types:
            from literecord.record import LiteRecord

            record_types = (LiteRecord,)
        for record_type in record_types:
            record_type.bind(self)
            self._bound.append(record_type)
        return self

    def close(self) -> None:
        """Close every connection and unbind the record types bound here."""
        if self._closed:
            return
        for record_type in self._bound:
            if record_type.__dict__.get("_bound_context") is self:
                record_type.unbind()
        self._bound.clear()
        self._connections.close_all()
        self._metadata.clear()
        self._closed = True
        log.info("Database context closed", extra={"database": self.database})

    def __enter__(self) -> "DatabaseContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["DatabaseContext"]
