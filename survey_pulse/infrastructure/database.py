"""Database — one async engine per process, one session per request.

Invariants:
    - A session that raises is rolled back before it closes
    - SQLAlchemy failures escaping a request session surface as UpstreamUnavailableError (503)
    - The engine is created in the app lifespan, never at import time
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from survey_pulse.core.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the engine that backs the survey, response and user stores."""

    def __init__(self, database_url: str, pool_size: int, max_overflow: int):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
        )
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Request session failed", extra={"error": str(e)})
                raise UpstreamUnavailableError(str(e), "session") from e

    async def ping(self) -> bool:
        """True when a trivial query round-trips."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except (UpstreamUnavailableError, OSError) as e:
            logger.warning("Database ping failed", extra={"error": str(e)})
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, pool_size: int, max_overflow: int) -> None:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, pool_size, max_overflow)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: a session scoped to the request."""
    if db_manager is None:
        raise RuntimeError("init_db() has not run")
    async with db_manager.session() as session:
        yield session
