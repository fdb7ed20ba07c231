"""
Database connection factory for LiteRecord.

`ConnectionManager` keeps one open connection per logical database name and
hands it out to every operation. It does not pool or fence the handle:
sharing a connection across threads is the driver's contract.

Opening a connection retries transient failures using tenacity.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

import psycopg
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from literecord.config import Settings, get_settings
from literecord.dialects import Dialect, get_dialect
from literecord.utils.logging import get_logger

log = get_logger(__name__)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def open_connection(dialect: Dialect, settings: Settings, database: str) -> Any:
    """
    Open a new connection to a logical database with automatic retry.

    Retries up to 3 times with exponential backoff for transient PostgreSQL
    connection errors.

    Raises
    ------
    UnknownDatabaseError
        If `database` is not configured.
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return dialect.connect(settings.database_settings(database))


class ConnectionManager:
    """
    Thread-safe cache of open connections keyed by logical database name.

    A connection being opened blocks other callers of the same database only;
    the cache itself is guarded by a short-lived manager-wide lock.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dialect_for: Optional[Callable[[str], Dialect]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._dialect_for = dialect_for or self.dialect
        self._connections: Dict[str, Any] = {}
        self._opening: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def dialect(self, database: str) -> Dialect:
        """Dialect matching the configured ``type`` of `database`."""
        return get_dialect(self._settings.database_settings(database).type)

    def get(self, database: str, force_new: bool = False) -> Any:
        """
        Return the connection of `database`, opening it on first use.

        Parameters
        ----------
        database : str
            Logical database name.
        force_new : bool
            Close the cached connection (if any) and open a fresh one.
        """
        # Opening (and its retries) holds only this database's lock.
        with self._database_lock(database):
            with self._lock:
                conn = self._connections.get(database)
            if conn is not None and not force_new:
                return conn
            if conn is not None:
                with self._lock:
                    self._connections.pop(database, None)
                _close_quietly(conn)
            conn = open_connection(self._dialect_for(database), self._settings, database)
            with self._lock:
                self._connections[database] = conn
            log.info("Connection opened", extra={"database": database, "forced": force_new})
            return conn

    def _database_lock(self, database: str) -> threading.Lock:
        with self._lock:
            return self._opening.setdefault(database, threading.Lock())

    def close(self, database: str) -> None:
        with self._lock:
            conn = self._connections.pop(database, None)
        if conn is not None:
            _close_quietly(conn)

    def close_all(self) -> None:
        """Close every cached connection."""
        with self._lock:
            connections = list(self._connections.items())
            self._connections.clear()
        for database, conn in connections:
            _close_quietly(conn)
            log.info("Connection closed", extra={"database": database})

    def __contains__(self, database: object) -> bool:
        return database in self._connections


def _close_quietly(conn: Any) -> None:
    try:
        conn.close()
    except Exception:  # noqa: BLE001
        log.warning("Failed to close connection", exc_info=True)


__all__ = ["ConnectionManager", "open_connection"]
