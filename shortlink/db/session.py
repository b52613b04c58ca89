"""
Database Session Management

This module owns the async engine and session factory. They are wrapped in a
Database object that the application builds once, opens on startup and
disposes on shutdown. Request handlers get sessions through get_session,
which reads the Database from the application state.

Key Features:
- Database abstraction: SQLite or PostgreSQL picked from the URL dialect
- Connection check and schema creation on startup
- Async session management: commit on success, rollback on exception
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortlink.core.exceptions import PersistenceError
from shortlink.db import models  # noqa: F401  registers tables on SQLModel.metadata
from shortlink.db.interface import DatabaseAdapter
from shortlink.db.postgres_adapter import PostgreSQLAdapter
from shortlink.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Raises:
        ValueError: If the URL names a backend without an adapter
    """
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        return SQLiteAdapter()
    if backend == "postgresql":
        return PostgreSQLAdapter()
    raise ValueError(f"Unsupported database backend: {backend}")


class Database:
    """
    Storage handle shared by all requests of one application instance.

    Building it does not touch the database; connect() does.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.adapter = get_database_adapter(database_url)
        self.engine = self.adapter.create_engine(database_url, echo=echo)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=SQLModelAsyncSession,
            expire_on_commit=False,  # Returned records stay readable after commit
            autoflush=False,
        )

    async def connect(self, create_schema: bool = True) -> None:
        """
        Verify the database answers and optionally create missing tables.

        Raises:
            PersistenceError: If the database cannot be reached
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if create_schema:
                    await conn.run_sync(SQLModel.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database unreachable at startup: {e}")
            raise PersistenceError(
                "database unreachable at startup",
                original_error=e
            ) from e

        logger.info(
            f"Database connection verified "
            f"(dialect={self.adapter.get_dialect_name()}, schema_created={create_schema})"
        )

    async def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session that commits on success and rolls back on any exception.
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


def get_database(request: Request) -> Database:
    """Dependency returning the Database opened by the application lifespan."""
    return request.app.state.database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get a database session.

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with get_database(request).session() as session:
        yield session
