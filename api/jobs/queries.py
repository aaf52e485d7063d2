"""
Read-only job lookups.
"""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from api.config.logging import get_logger
from api.core.exceptions import StorageError
from api.infra.database import Database, get_database
from api.jobs.repository import JobRepository
from api.jobs.schemas import JobResponse, normalize_job

logger = get_logger(__name__)


def parse_job_id(raw: str | UUID) -> UUID | None:
    """Parse a job id; anything that is not a UUID cannot name a job."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(raw)
    except (TypeError, ValueError):
        return None


class JobQueries:
    """Fresh reads of stored jobs, normalized to the public shape."""

    def __init__(self, database: Database):
        self.database = database

    async def get_by_id(self, job_id: str | UUID) -> JobResponse | None:
        parsed = parse_job_id(job_id)
        if parsed is None:
            return None

        try:
            async with self.database.session() as session:
                row = await JobRepository(session).find_by_id(parsed)
        except (SQLAlchemyError, OSError) as e:
            logger.error("failed to fetch job", job_id=str(parsed), error=str(e), exc_info=True)
            raise StorageError("Failed to fetch job") from e

        return normalize_job(row) if row is not None else None

    async def list_all(self) -> list[JobResponse]:
        try:
            async with self.database.session() as session:
                rows = await JobRepository(session).list_all()
        except (SQLAlchemyError, OSError) as e:
            logger.error("failed to list jobs", error=str(e), exc_info=True)
            raise StorageError("Failed to list jobs") from e

        return [normalize_job(row) for row in rows]


def get_job_queries(database: Database = Depends(get_database)) -> JobQueries:
    """Dependency injection for job lookups."""
    return JobQueries(database)
