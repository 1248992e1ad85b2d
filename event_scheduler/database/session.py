"""
Database session management.

A ``Database`` owns the async engine and session factory for one
``SchedulerConfig``. The API creates one per application in its lifespan;
scripts and tests create their own.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from event_scheduler.config import SchedulerConfig

from .models import Base


ASYNC_POSTGRES_PREFIX = "postgresql+asyncpg://"


def normalize_database_url(url: str) -> str:
    """
    Point PostgreSQL URLs at the asyncpg driver.

    Hosting platforms hand out ``postgres://`` or ``postgresql://`` URLs;
    SQLite URLs already name their async driver and pass through.
    """
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return ASYNC_POSTGRES_PREFIX + url[len(prefix):]
    return url


def create_engine_for(url: str) -> AsyncEngine:
    """Async engine for a (normalized) database URL."""
    if url.startswith("sqlite"):
        if ":memory:" in url:
            # Every session must see the same in-memory database
            return create_async_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_async_engine(url, connect_args={"check_same_thread": False})
    return create_async_engine(url, pool_pre_ping=True)


class Database:
    """
    Engine and session factory for the scheduler tables.

    Usage:
        database = Database(SchedulerConfig.from_env())
        await database.create_tables()
        async with database.session() as session:
            await EventAssignmentService(session).create_event(draft)
        await database.dispose()
    """

    def __init__(self, config: SchedulerConfig):
        self.url = normalize_database_url(config.database_url)
        self.engine = create_engine_for(self.url)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One unit of work: commits on success, rolls back on any error."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
