"""
Infrastructure package for LiteRecord.

Centralizes database connectivity concerns. Keep this layer focused on I/O
and resource management, decoupled from record and statement logic.
"""

from literecord.infrastructure.db_factory import ConnectionManager, open_connection

__all__ = [
    "ConnectionManager",
    "open_connection",
]
