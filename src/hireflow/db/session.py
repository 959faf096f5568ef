"""
Database engine and session lifecycle.

One Database object owns the async engine for the lifetime of the
application; it is created at startup and disposed at shutdown.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hireflow.db.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Async SQLAlchemy engine plus a session factory."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        """
        Initialize the database.

        Args:
            url: SQLAlchemy async URL (postgresql+asyncpg://, sqlite+aiosqlite://).
            echo: Log emitted SQL.
            **engine_kwargs: Passed through to ``create_async_engine``.
        """
        self._engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_all(self) -> None:
        """Create any missing tables."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self._engine.dispose()
