"""
Utilities package for LiteRecord.

Exports shared helpers for logging and name casing. Keep this package
lightweight and free of database logic.
"""

from literecord.utils.logging import configure_logging, get_logger
from literecord.utils.naming import camelcase, smallcase

__all__ = [
    "configure_logging",
    "get_logger",
    "camelcase",
    "smallcase",
]
