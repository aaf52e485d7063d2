"""
Job store tables.
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    ForeignKey,
    Index,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.orm import Mapped, mapped_column

from api.infra.database import Base, conflict_aware_insert

IDEMPOTENCY_KEY_MAX_LENGTH = 200


class JobStatus(str, Enum):
    """Job status labels, in lookup-table id order."""

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def status_id(self) -> int:
        """Primary key of this status in ``job_statuses``."""
        return list(JobStatus).index(self) + 1


class JobStatusRecord(Base):
    """Lookup relation holding the human-readable status labels."""

    __tablename__ = "job_statuses"

    id: Mapped[int] = mapped_column(SmallInteger, primary_key=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, unique=True)


class Job(Base):
    """
    A submitted unit of work.

    ``idempotency_key`` is unique when present; the constraint lives in the
    store so concurrent submissions sharing a key resolve to one row.
    ``result``, ``error``, ``updated_at`` and ``finished_at`` are written by
    the execution engine, never by the submission path.
    """

    __tablename__ = "jobs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    idempotency_key: Mapped[str | None] = mapped_column(
        String(IDEMPOTENCY_KEY_MAX_LENGTH),
        nullable=True,
        comment="Caller-supplied idempotency key",
    )
    job_status_id: Mapped[int] = mapped_column(
        SmallInteger,
        ForeignKey("job_statuses.id"),
        nullable=False,
        default=JobStatus.QUEUED.status_id,
    )
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, comment="Caller-supplied job parameters"
    )
    result: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, comment="Job result data"
    )
    error: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, comment="Job error details"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )
    finished_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("idempotency_key", name="uq_jobs_idempotency_key"),
        Index("ix_jobs_created_at", "created_at"),
    )


async def seed_job_statuses(conn: AsyncConnection) -> None:
    """Insert the status lookup rows, leaving existing ones untouched."""
    stmt = (
        conflict_aware_insert(conn.dialect.name, JobStatusRecord)
        .values([{"id": s.status_id, "status": s.value} for s in JobStatus])
        .on_conflict_do_nothing(index_elements=["id"])
    )
    await conn.execute(stmt)
