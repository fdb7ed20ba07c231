"""
Page/per-page bookkeeping over an arbitrary SELECT.

The total is counted by wrapping the query; the page itself is cut with the
dialect's limit/offset rewrite, so the query must not carry its own LIMIT.
"""

from __future__ import annotations

import math
from typing import Any, Generic, Iterator, List, Optional, TypeVar

from literecord.errors import PageNotFoundError
from literecord.sql import Params, build_count

R = TypeVar("R")


class Paginator(Generic[R]):
    """
    One page of `record_type` instances selected by `sql`.

    Attributes
    ----------
    items : list
        Records of the requested page.
    count : int
        Rows matched by `sql` over all pages.
    """

    def __init__(
        self,
        record_type: Any,
        sql: str,
        page: int,
        per_page: int,
        values: Optional[Params] = None,
        *,
        context: Any = None,
    ) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if per_page < 1:
            raise ValueError(f"per_page must be >= 1, got {per_page}")

        self.record_type = record_type
        self.sql = sql
        self.page = page
        self.per_page = per_page
        self.values = values

        ctx = record_type.resolve_context(context)
        args = () if values is None else (values,)

        with record_type.query(build_count(sql), *args, context=ctx) as sth:
            self.count = int(sth.scalar() or 0)

        limited = record_type.dialect(ctx).apply_row_limit(sql, per_page, (page - 1) * per_page)
        with record_type.query(limited, *args, context=ctx) as sth:
            self.items: List[R] = sth.fetchall()

        if page > 1 and not self.items:
            raise PageNotFoundError(page)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.count / self.per_page)

    @property
    def next_page(self) -> Optional[int]:
        return self.page + 1 if self.page < self.total_pages else None

    @property
    def prev_page(self) -> Optional[int]:
        return self.page - 1 if self.page > 1 else None

    def __iter__(self) -> Iterator[R]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return (
            f"Paginator({self.record_type.__name__}, page={self.page}/{self.total_pages}, "
            f"per_page={self.per_page}, count={self.count})"
        )


__all__ = ["Paginator"]
