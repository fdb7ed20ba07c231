"""
Dialects package for LiteRecord.

Re-exports the abstract interface and the concrete dialects, and maps the
``type`` of a configured database to its dialect.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from literecord.dialects.abstract import Dialect
from literecord.dialects.pgsql import PostgresDialect
from literecord.dialects.sqlite import SQLiteDialect


def _dialect_factories() -> Dict[str, Callable[[], Dialect]]:
    """Registry of available dialects."""
    return {
        "pgsql": lambda: PostgresDialect(),
        "sqlite": lambda: SQLiteDialect(),
    }


def available_dialects() -> List[str]:
    """List available dialect names."""
    return sorted(_dialect_factories().keys())


def get_dialect(name: str) -> Dialect:
    factories = _dialect_factories()
    if name not in factories:
        raise ValueError(f"Unknown dialect '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


__all__ = [
    "Dialect",
    "PostgresDialect",
    "SQLiteDialect",
    "available_dialects",
    "get_dialect",
]
