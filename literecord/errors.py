"""
Exception hierarchy for LiteRecord.

Only business-level preconditions are raised from here. Errors raised by the
database driver (psycopg, sqlite3) are never wrapped and reach the caller
unmodified.
"""

from __future__ import annotations


class LiteRecordError(Exception):
    """Base class for every error raised by LiteRecord itself."""


class MissingPrimaryKeyError(LiteRecordError, ValueError):
    """An operation that needs the primary key ran without one set."""

    def __init__(self, source: str, pk: str) -> None:
        super().__init__(f"No value set for primary key '{pk}' of '{source}'")
        self.source = source
        self.pk = pk


class ContextNotBoundError(LiteRecordError, RuntimeError):
    """A record type was used without a DatabaseContext."""


class ContextClosedError(LiteRecordError, RuntimeError):
    """A DatabaseContext was used after close()."""


class UnknownDatabaseError(LiteRecordError, LookupError):
    """A logical database name has no configured connection."""


class MetadataError(LiteRecordError):
    """A table could not be described."""


class PageNotFoundError(LiteRecordError, LookupError):
    """A paginator was asked for a page past the last one."""

    def __init__(self, page: int) -> None:
        super().__init__(f"Page {page} does not exist")
        self.page = page


__all__ = [
    "LiteRecordError",
    "MissingPrimaryKeyError",
    "ContextNotBoundError",
    "ContextClosedError",
    "UnknownDatabaseError",
    "MetadataError",
    "PageNotFoundError",
]
