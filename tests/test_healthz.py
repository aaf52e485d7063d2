from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from api.infra.database import Database
from api.main import create_app


async def test_health_check_success(async_client: AsyncClient):
    """Test health check endpoint returns correct format."""
    response = await async_client.get("/healthz")

    assert response.status_code == 200

    data = response.json()
    assert data["ok"] is True
    assert data["version"] == "1.0.0"
    assert data["database"]["connected"] is True
    assert data["database"]["response_time_ms"] is not None
    assert "X-Request-ID" in response.headers


async def test_health_check_reports_unreachable_database(tmp_path, test_settings):
    """A dead database is reported in the body, not raised."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'jobs.db'}"
    )
    database = Database(test_settings, engine=engine)
    app = create_app(settings=test_settings, database=database)

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.get("/healthz")
    finally:
        await database.close()

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is False
    assert data["database"]["connected"] is False
    assert data["database"]["error"]
