"""
LiteRecord - Active Record without a query builder.

Records bound to a single table derive INSERT, UPDATE, DELETE, point lookup,
existence and paginated SQL from the table's metadata and the fields the
record currently holds:

- Field state tracking with an explicit set/unset distinction
- Metadata introspection for PostgreSQL (psycopg) and SQLite
- Optional before/after lifecycle hooks with veto
- An explicit DatabaseContext owning connections and metadata caches
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "BSD-3-Clause"

# Public API exports
from literecord.config import DatabaseSettings, Settings, get_settings, read
from literecord.context import DatabaseContext
from literecord.errors import (
    ContextClosedError,
    ContextNotBoundError,
    LiteRecordError,
    MetadataError,
    MissingPrimaryKeyError,
    PageNotFoundError,
    UnknownDatabaseError,
)
from literecord.executor import PreparedStatement
from literecord.metadata import MetadataProvider, TableMetadata
from literecord.paginator import Paginator
from literecord.record import LiteRecord, RecordDescriptor
from literecord.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "DatabaseSettings",
    "Settings",
    "get_settings",
    "read",
    # Records
    "DatabaseContext",
    "LiteRecord",
    "RecordDescriptor",
    "PreparedStatement",
    "Paginator",
    "MetadataProvider",
    "TableMetadata",
    # Errors
    "LiteRecordError",
    "MissingPrimaryKeyError",
    "ContextNotBoundError",
    "ContextClosedError",
    "UnknownDatabaseError",
    "MetadataError",
    "PageNotFoundError",
    # Logging
    "configure_logging",
    "get_logger",
]
