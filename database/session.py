"""
Async SQLAlchemy engine and session factory for PostgreSQL.

A ``Database`` is built once at startup (see ``main.create_app``), kept on
``app.state.db`` and disposed at shutdown.  Request handlers never touch
the engine directly; they borrow a session through ``get_db_session``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import Settings

logger = logging.getLogger(__name__)


class Database:
    """Owns the connection pool for one application instance."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **engine_kwargs: Any) -> "Database":
        options = {
            "echo": False,
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_recycle": settings.db_pool_recycle,
        }
        options.update(engine_kwargs)
        return cls(create_async_engine(settings.database_url, **options))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Borrow one pooled connection for the duration of a unit of work."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> bool:
        """Run a trivial query; log and report whether the store is reachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Error acquiring database connection")
            return False
        logger.info("Connected to the database")
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database pool closed")


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
