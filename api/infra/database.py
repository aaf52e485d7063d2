from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, Request
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from api.config.settings import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# Dialects whose insert construct supports ON CONFLICT ... DO NOTHING
_CONFLICT_AWARE_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def conflict_aware_insert(dialect_name: str, table):
    """Return the dialect-specific INSERT construct for ``table``."""
    try:
        insert = _CONFLICT_AWARE_INSERTS[dialect_name]
    except KeyError:
        raise ValueError(
            f"Unsupported database dialect for conditional inserts: {dialect_name}"
        ) from None
    return insert(table)


class Database:
    """Owns the engine (and its connection pool) and hands out sessions."""

    def __init__(self, settings: Settings, engine: AsyncEngine | None = None):
        self.settings = settings
        self.engine = engine or create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            echo=settings.db_echo,
        )
        self.SessionLocal = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Read-only unit of work; the connection is returned on exit."""
        async with self.SessionLocal() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Acquire a connection and run one transaction on it.

        Commits when the block exits normally and rolls back on any
        exception, cancellation included. The connection goes back to the
        pool exactly once on every path.
        """
        async with self.SessionLocal() as session:
            async with session.begin():
                yield session

    async def create_schema(self) -> None:
        """Create tables from metadata and seed lookup rows (dev/test only)."""
        # Imported here so model modules can depend on this one
        from api.jobs.models import seed_job_statuses

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            await seed_job_statuses(conn)

    async def close(self):
        """Close database connections."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependency injection for the application-owned database handle."""
    return request.app.state.database


# Convenience type alias for dependency injection
DatabaseDep = Depends(get_database)
