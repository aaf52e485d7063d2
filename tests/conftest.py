import os
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import create_async_engine

from api.config.settings import Settings
from api.infra.database import Database
from api.jobs.models import Job
from api.main import create_app


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: JSON logs, docs enabled."""
    return Settings(debug=False, log_level="WARNING", enable_docs=True)


@pytest.fixture
async def database(tmp_path, test_settings) -> AsyncGenerator[Database, None]:
    """
    A fresh job store per test.

    Uses PostgreSQL when DATABASE_URL points at one, otherwise a temporary
    SQLite file (file-backed so concurrent connections share it).
    """
    database_url = os.getenv("DATABASE_URL")
    use_postgres = bool(database_url) and "postgres" in database_url

    if use_postgres:
        engine = create_async_engine(Settings(database_url=database_url).database_url)
    else:
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'jobs.db'}")

    db = Database(test_settings, engine=engine)
    await db.create_schema()

    if use_postgres:
        async with db.transaction() as session:
            await session.execute(delete(Job))

    yield db

    if use_postgres:
        async with db.transaction() as session:
            await session.execute(delete(Job))
    await db.close()


@pytest.fixture
def app(test_settings, database):
    """Create a test FastAPI application bound to the test database."""
    app = create_app(settings=test_settings, database=database)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
