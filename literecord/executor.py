"""
Statement execution over a DB-API connection.

`PreparedStatement` couples SQL text with the connection it runs on and the
record type its rows populate. Driver exceptions are not caught here: a failed
statement raises whatever psycopg or sqlite3 raised.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional

from literecord.sql import Params
from literecord.utils.logging import get_logger

log = get_logger(__name__)

RowFactory = Callable[[dict], Any]


class PreparedStatement:
    """
    A statement readied on a connection.

    Example
    -------
        with User.prepare("SELECT * FROM users WHERE active = ?") as sth:
            sth.execute([True])
            for user in sth:
                ...
    """

    def __init__(self, connection: Any, sql: str, row_factory: Optional[RowFactory] = None) -> None:
        self.sql = sql
        self._connection = connection
        self._row_factory = row_factory
        self._cursor: Any = None

    def execute(self, params: Optional[Params] = None) -> bool:
        """
        Run the statement with `params` bound.

        Returns
        -------
        bool
            Whether the driver reported success. Drivers raise on failure;
            one whose ``execute`` returns ``None`` is taken as having failed.
        """
        self.close()
        self._cursor = self._connection.cursor()
        log.debug(
            "Executing statement",
            extra={"sql": self.sql, "param_count": len(params) if params else 0},
        )
        if params is None:
            result = self._cursor.execute(self.sql)
        else:
            result = self._cursor.execute(self.sql, params)
        return result is not None

    @property
    def cursor(self) -> Any:
        if self._cursor is None:
            raise RuntimeError("Statement has not been executed")
        return self._cursor

    @property
    def rowcount(self) -> int:
        """Rows affected by the last execution (-1 when unknown)."""
        return self.cursor.rowcount

    def fetch(self) -> Any:
        """Next row as a record, or None when exhausted."""
        row = self.cursor.fetchone()
        return None if row is None else self._populate(row)

    def fetchall(self) -> List[Any]:
        return [self._populate(row) for row in self.cursor.fetchall()]

    def scalar(self) -> Any:
        """First column of the next row."""
        row = self.cursor.fetchone()
        return None if row is None else row[0]

    def close(self) -> None:
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None

    def _populate(self, row: Any) -> Any:
        names = [column[0] for column in self.cursor.description]
        data = dict(zip(names, row))
        return self._row_factory(data) if self._row_factory else data

    def __iter__(self) -> Iterator[Any]:
        while True:
            item = self.fetch()
            if item is None:
                return
            yield item

    def __enter__(self) -> "PreparedStatement":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["PreparedStatement"]
