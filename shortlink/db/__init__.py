"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface with SQLite and PostgreSQL implementations
- Database: the engine and session factory owned by one application
- get_session: FastAPI dependency yielding a request-scoped session
"""

from shortlink.db.interface import DatabaseAdapter
from shortlink.db.session import Database, get_database, get_database_adapter, get_session

__all__ = [
    "DatabaseAdapter",
    "Database",
    "get_database",
    "get_database_adapter",
    "get_session",
]
