"""
Active Record without a query builder.

A `LiteRecord` subclass is bound to one table. Its instances are open-ended
field bags; `create`, `update` and `save` turn the fields currently present
into INSERT/UPDATE statements using the table's metadata, with optional
lifecycle hooks around them. Class-level helpers cover point lookup,
existence checks, deletes, raw queries and pagination.

Example
-------
    class User(LiteRecord, table="users"):
        def before_create(self):
            return bool(self.email)

    with DatabaseContext() as ctx:
        ctx.bind(User)
        user = User(name="Ana", email="a@x.com")
        user.create()          # user.id now holds the generated key
        User.get(user.id)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from literecord.context import DatabaseContext
from literecord.dialects import Dialect
from literecord.errors import ContextNotBoundError
from literecord.executor import PreparedStatement
from literecord.fields import FieldData, FieldState, is_empty
from literecord.hooks import run_after, run_before
from literecord.metadata import TableMetadata
from literecord.paginator import Paginator
from literecord.sql import (
    Params,
    Statement,
    build_delete,
    build_exists,
    build_insert,
    build_select_by_key,
    build_update,
)
from literecord.utils.naming import smallcase

R = TypeVar("R", bound="LiteRecord")


@dataclass(frozen=True)
class RecordDescriptor:
    """
    Static binding of a record type to its table.

    Attributes
    ----------
    table : str
        Table name; defaults to the snake_case class name.
    schema : str | None
        Schema qualifying the table, if any.
    database : str | None
        Logical database; None means the context's application database.
    empty_as_unset : bool
        Treat fields set to None or "" as unset when building SQL.
    """

    table: str
    schema: Optional[str] = None
    database: Optional[str] = None
    empty_as_unset: bool = True

    @property
    def source(self) -> str:
        return f"{self.schema}.{self.table}" if self.schema else self.table


def _normalize_values(values: Tuple[Any, ...]) -> Optional[Params]:
    """
    A single list/tuple/mapping is the parameter set; otherwise the values are.
    No values, or a lone None, means no parameters.
    """
    if not values:
        return None
    if len(values) == 1:
        first = values[0]
        if first is None:
            return None
        if isinstance(first, Mapping):
            return dict(first)
        if isinstance(first, (list, tuple)):
            return list(first)
    return list(values)


class LiteRecord(FieldState):
    """
    Base class of table-bound records.

    Subclasses configure their table with class keyword arguments::

        class Invoice(LiteRecord, table="invoices", schema="billing"): ...

    ``schema``, ``database`` and ``empty_as_unset`` are inherited by
    subclasses; ``table`` is not.
    """

    _descriptor: ClassVar[RecordDescriptor] = RecordDescriptor(table="lite_record")
    _bound_context: ClassVar[Optional[DatabaseContext]] = None

    def __init_subclass__(
        cls,
        *,
        table: Optional[str] = None,
        schema: Optional[str] = None,
        database: Optional[str] = None,
        empty_as_unset: Optional[bool] = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        parent = cls._descriptor
        cls._descriptor = RecordDescriptor(
            table=table or smallcase(cls.__name__),
            schema=schema if schema is not None else parent.schema,
            database=database if database is not None else parent.database,
            empty_as_unset=parent.empty_as_unset if empty_as_unset is None else empty_as_unset,
        )

    # -- binding -----------------------------------------------------------

    @classmethod
    def bind(cls, context: DatabaseContext) -> None:
        cls._bound_context = context

    @classmethod
    def unbind(cls) -> None:
        if cls is LiteRecord:
            cls._bound_context = None
        elif "_bound_context" in cls.__dict__:
            delattr(cls, "_bound_context")

    @classmethod
    def resolve_context(cls, context: Optional[DatabaseContext] = None) -> DatabaseContext:
        ctx = context or cls._bound_context
        if ctx is None:
            raise ContextNotBoundError(
                f"No DatabaseContext bound to {cls.__name__}; call DatabaseContext.bind() "
                "or pass context="
            )
        return ctx

    # -- source and metadata -----------------------------------------------

    @classmethod
    def get_table(cls) -> str:
        return cls._descriptor.table

    @classmethod
    def get_schema(cls) -> Optional[str]:
        return cls._descriptor.schema

    @classmethod
    def get_source(cls) -> str:
        """``schema.table`` when a schema is set, else ``table``."""
        return cls._descriptor.source

    @classmethod
    def get_database(cls, context: Optional[DatabaseContext] = None) -> str:
        return cls._descriptor.database or cls.resolve_context(context).database

    @classmethod
    def metadata(cls, context: Optional[DatabaseContext] = None) -> TableMetadata:
        ctx = cls.resolve_context(context)
        return ctx.metadata(cls.get_table(), cls.get_schema(), cls.get_database(ctx))

    @classmethod
    def dialect(cls, context: Optional[DatabaseContext] = None) -> Dialect:
        ctx = cls.resolve_context(context)
        return ctx.dialect(cls.get_database(ctx))

    @classmethod
    def connection(cls, context: Optional[DatabaseContext] = None, force_new: bool = False) -> Any:
        ctx = cls.resolve_context(context)
        return ctx.connection(cls.get_database(ctx), force_new=force_new)

    # -- raw statements ----------------------------------------------------

    @classmethod
    def prepare(cls, sql: str, context: Optional[DatabaseContext] = None) -> PreparedStatement:
        """Ready `sql` on the record's connection; fetched rows become instances of `cls`."""
        return PreparedStatement(cls.connection(context), sql, cls)

    @classmethod
    def query(cls, sql: str, *values: Any, context: Optional[DatabaseContext] = None) -> PreparedStatement:
        """
        Execute `sql` immediately and return the live statement.

        Values are either one list, tuple or mapping, or given variadically:
        ``User.query(sql, [1, 2])`` and ``User.query(sql, 1, 2)`` are the same.
        """
        sth = cls.prepare(sql, context)
        sth.execute(_normalize_values(values))
        return sth

    @classmethod
    def paginate_query(
        cls: Type[R],
        sql: str,
        page: int,
        per_page: int,
        *values: Any,
        context: Optional[DatabaseContext] = None,
    ) -> Paginator[R]:
        return Paginator(cls, sql, page, per_page, _normalize_values(values), context=context)

    # -- lookups -------------------------------------------------------------

    @classmethod
    def get(
        cls: Type[R],
        key: Any,
        fields: Union[str, Sequence[str]] = "*",
        context: Optional[DatabaseContext] = None,
    ) -> Optional[R]:
        """Record whose primary key is `key`, or None."""
        ctx = cls.resolve_context(context)
        statement = build_select_by_key(
            cls.get_source(), cls.metadata(ctx), key, fields, cls.dialect(ctx).paramstyle
        )
        sql = cls.dialect(ctx).apply_row_limit(statement.sql, 1)
        with cls.query(sql, statement.params, context=ctx) as sth:
            return sth.fetch()

    @classmethod
    def exists(cls, key: Any, context: Optional[DatabaseContext] = None) -> bool:
        ctx = cls.resolve_context(context)
        statement = build_exists(
            cls.get_source(), cls.metadata(ctx), key, cls.dialect(ctx).paramstyle
        )
        with cls.query(statement.sql, statement.params, context=ctx) as sth:
            return (sth.scalar() or 0) > 0

    @classmethod
    def delete(cls, key: Any, context: Optional[DatabaseContext] = None) -> bool:
        """Delete by primary key; True when at least one row went away."""
        ctx = cls.resolve_context(context)
        statement = build_delete(
            cls.get_source(), cls.metadata(ctx), key, cls.dialect(ctx).paramstyle
        )
        with cls.query(statement.sql, statement.params, context=ctx) as sth:
            return sth.rowcount > 0

    # -- persistence ---------------------------------------------------------

    def _execute(self, statement: Statement, context: DatabaseContext) -> bool:
        with self.prepare(statement.sql, context) as sth:
            return sth.execute(statement.params)

    def _snapshot(self, metadata: TableMetadata) -> dict:
        return self.snapshot(metadata.fields, self._descriptor.empty_as_unset)

    def create(self, data: Optional[FieldData] = None, *, context: Optional[DatabaseContext] = None) -> bool:
        """
        INSERT the record.

        When the primary key is not set and the database generates it, the
        new key is read back and assigned to the record.
        """
        if data:
            self.dump(data)
        if not run_before(self, "create"):
            return False

        ctx = self.resolve_context(context)
        metadata = self.metadata(ctx)
        dialect = self.dialect(ctx)
        snapshot = self._snapshot(metadata)

        statement = build_insert(self.get_source(), metadata, snapshot, dialect.paramstyle)
        if not self._execute(statement, ctx):
            return False

        pk = metadata.pk
        if is_empty(snapshot.get(pk)) and metadata.is_auto(pk):
            self[pk] = dialect.last_insert_id(
                self.connection(ctx), pk, self.get_table(), self.get_schema()
            )

        run_after(self, "create")
        return True

    def update(self, data: Optional[FieldData] = None, *, context: Optional[DatabaseContext] = None) -> bool:
        """
        UPDATE the record by primary key. Fields not present are set to NULL.

        Raises
        ------
        MissingPrimaryKeyError
            If the primary key is unset or empty.
        """
        if data:
            self.dump(data)
        if not run_before(self, "update"):
            return False

        ctx = self.resolve_context(context)
        metadata = self.metadata(ctx)
        statement = build_update(
            self.get_source(), metadata, self._snapshot(metadata), self.dialect(ctx).paramstyle
        )
        if not self._execute(statement, ctx):
            return False

        run_after(self, "update")
        return True

    def save(self, data: Optional[FieldData] = None, *, context: Optional[DatabaseContext] = None) -> bool:
        """
        INSERT or UPDATE depending on whether a row with the record's primary
        key exists. The create/update hooks run as well as the save hooks.
        """
        if data:
            self.dump(data)
        if not run_before(self, "save"):
            return False

        ctx = self.resolve_context(context)
        pk = self.metadata(ctx).pk
        present = self.is_present(pk, self._descriptor.empty_as_unset)
        if not present or not self.exists(self[pk], context=ctx):
            result = self.create(context=ctx)
        else:
            result = self.update(context=ctx)
        if not result:
            return False

        run_after(self, "save")
        return True


__all__ = ["LiteRecord", "RecordDescriptor"]
