"""
SQL statement construction for LiteRecord.

Every builder is pure: it takes a source identifier, table metadata and a
snapshot of the record's present fields, and returns the statement text plus
its parameters. Identifiers are interpolated as-is since they come from
trusted metadata; only values are bound.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Union

from literecord.errors import MissingPrimaryKeyError
from literecord.fields import is_empty
from literecord.metadata import TableMetadata

Params = Union[Dict[str, Any], List[Any]]


class ParamStyle(str, Enum):
    """
    Placeholder syntax of the driver (PEP 249 ``paramstyle``).

    ``NAMED`` is the sqlite3 flavour, which also accepts ``?`` for positional
    values. ``PYFORMAT`` is psycopg's.
    """

    NAMED = "named"
    PYFORMAT = "pyformat"

    def named(self, name: str) -> str:
        if self is ParamStyle.PYFORMAT:
            return f"%({name})s"
        return f":{name}"

    def positional(self) -> str:
        if self is ParamStyle.PYFORMAT:
            return "%s"
        return "?"


@dataclass(frozen=True)
class Statement:
    """SQL text and the parameters to bind with it."""

    sql: str
    params: Params = field(default_factory=dict)


def build_insert(
    source: str,
    metadata: TableMetadata,
    snapshot: Mapping[str, Any],
    style: ParamStyle = ParamStyle.NAMED,
) -> Statement:
    """
    INSERT for the present fields.

    Absent fields are written as ``NULL`` unless the database has a default
    for them or generates them, in which case they are left out.
    """
    columns: List[str] = []
    values: List[str] = []
    params: Dict[str, Any] = {}

    for name in metadata.fields:
        if name in snapshot:
            columns.append(name)
            values.append(style.named(name))
            params[name] = snapshot[name]
        elif not metadata.has_default(name) and not metadata.is_auto(name):
            columns.append(name)
            values.append("NULL")

    if not columns:
        return Statement(f"INSERT INTO {source} DEFAULT VALUES", {})
    return Statement(
        f"INSERT INTO {source} ({','.join(columns)}) VALUES ({','.join(values)})",
        params,
    )


def build_update(
    source: str,
    metadata: TableMetadata,
    snapshot: Mapping[str, Any],
    style: ParamStyle = ParamStyle.NAMED,
) -> Statement:
    """
    UPDATE by primary key.

    Every absent field is set to ``NULL``; unlike INSERT there is no
    exemption for defaults or generated fields.

    Raises
    ------
    MissingPrimaryKeyError
        If the primary key is not in the snapshot.
    """
    pk = metadata.pk
    if pk not in snapshot or is_empty(snapshot[pk]):
        raise MissingPrimaryKeyError(source, pk)

    assignments: List[str] = []
    params: Dict[str, Any] = {}

    for name in metadata.fields:
        if name in snapshot:
            params[name] = snapshot[name]
            if name != pk:
                assignments.append(f"{name} = {style.named(name)}")
        else:
            assignments.append(f"{name} = NULL")

    return Statement(
        f"UPDATE {source} SET {', '.join(assignments)} WHERE {pk} = {style.named(pk)}",
        params,
    )


def build_delete(
    source: str, metadata: TableMetadata, key: Any, style: ParamStyle = ParamStyle.NAMED
) -> Statement:
    return Statement(f"DELETE FROM {source} WHERE {metadata.pk} = {style.positional()}", [key])


def build_select_by_key(
    source: str,
    metadata: TableMetadata,
    key: Any,
    fields: Union[str, Sequence[str]] = "*",
    style: ParamStyle = ParamStyle.NAMED,
) -> Statement:
    """SELECT one row by primary key. The caller applies the row limit."""
    columns = fields if isinstance(fields, str) else ", ".join(fields)
    return Statement(
        f"SELECT {columns} FROM {source} WHERE {metadata.pk} = {style.positional()}", [key]
    )


def build_exists(
    source: str, metadata: TableMetadata, key: Any, style: ParamStyle = ParamStyle.NAMED
) -> Statement:
    return Statement(
        f"SELECT COUNT(*) AS count FROM {source} WHERE {metadata.pk} = {style.positional()}",
        [key],
    )


def build_count(sql: str) -> str:
    """Wrap an arbitrary SELECT to count its rows."""
    return f"SELECT COUNT(*) AS count FROM ({sql}) AS paginated_query"


__all__ = [
    "ParamStyle",
    "Params",
    "Statement",
    "build_insert",
    "build_update",
    "build_delete",
    "build_select_by_key",
    "build_exists",
    "build_count",
]
