from datetime import UTC, datetime

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from api.config.settings import Settings, SettingsDep
from api.infra.database import Database, DatabaseDep

router = APIRouter()


class DatabaseHealth(BaseModel):
    """Database health status."""

    connected: bool
    response_time_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health response with database status."""

    ok: bool
    version: str
    environment: str
    timestamp: str
    database: DatabaseHealth


@router.get("/healthz", response_model=HealthResponse)
async def health_check(
    settings: Settings = SettingsDep, database: Database = DatabaseDep
) -> HealthResponse:
    """Health check endpoint with database status."""
    db_health = await _check_database_health(database)

    return HealthResponse(
        ok=db_health.connected,
        version=settings.version,
        environment=settings.environment,
        timestamp=datetime.now(UTC).isoformat(),
        database=db_health,
    )


async def _check_database_health(database: Database) -> DatabaseHealth:
    """Check database connectivity and response time."""
    start_time = datetime.now(UTC)

    try:
        async with database.session() as session:
            await session.execute(text("SELECT 1"))

        end_time = datetime.now(UTC)
        response_time_ms = (end_time - start_time).total_seconds() * 1000

        return DatabaseHealth(
            connected=True, response_time_ms=round(response_time_ms, 2)
        )

    except Exception as e:
        return DatabaseHealth(connected=False, error=str(e))
