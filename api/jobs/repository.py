"""
Data access for the job store.

Every method is one round-trip on the caller's session and runs inside
whatever transaction the caller has open.
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import RowMapping, Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.infra.database import conflict_aware_insert
from api.jobs.models import Job, JobStatus, JobStatusRecord


def _job_with_status() -> Select:
    return select(
        Job.id,
        Job.idempotency_key,
        Job.payload,
        Job.result,
        Job.error,
        Job.created_at,
        Job.updated_at,
        Job.finished_at,
        JobStatusRecord.status,
    ).join(JobStatusRecord, JobStatusRecord.id == Job.job_status_id)


class JobRepository:
    """Atomic reads and inserts against the ``jobs`` relation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, job_id: UUID) -> RowMapping | None:
        result = await self.session.execute(_job_with_status().where(Job.id == job_id))
        return result.mappings().one_or_none()

    async def find_by_key(self, key: str) -> RowMapping | None:
        result = await self.session.execute(
            _job_with_status().where(Job.idempotency_key == key)
        )
        return result.mappings().one_or_none()

    async def list_all(self) -> Sequence[RowMapping]:
        result = await self.session.execute(
            _job_with_status().order_by(Job.created_at, Job.id)
        )
        return result.mappings().all()

    async def insert_if_absent(
        self, key: str, initial_status: JobStatus, payload: dict[str, Any]
    ) -> UUID | None:
        """
        Insert a job under ``key`` unless one already holds it.

        Returns the new id, or None when the key was taken. An existing row
        is never modified.
        """
        stmt = (
            conflict_aware_insert(self.session.bind.dialect.name, Job)
            .values(
                idempotency_key=key,
                job_status_id=initial_status.status_id,
                payload=payload,
            )
            .on_conflict_do_nothing(index_elements=["idempotency_key"])
            .returning(Job.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_unconditional(
        self, initial_status: JobStatus, payload: dict[str, Any]
    ) -> UUID:
        stmt = (
            conflict_aware_insert(self.session.bind.dialect.name, Job)
            .values(job_status_id=initial_status.status_id, payload=payload)
            .returning(Job.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
