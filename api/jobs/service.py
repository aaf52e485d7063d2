"""
Idempotent job submission.

A submission carrying an ``Idempotency-Key`` creates at most one job no
matter how many times, or how concurrently, it is retried. The store's
unique constraint on the key picks the single winner; the transaction here
only makes the insert and its confirming read one all-or-nothing unit.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from api.config.logging import get_logger
from api.core.exceptions import StorageError, ValidationError
from api.infra.database import Database, get_database
from api.jobs.models import IDEMPOTENCY_KEY_MAX_LENGTH, JobStatus
from api.jobs.repository import JobRepository
from api.jobs.schemas import JobResponse, normalize_job

logger = get_logger(__name__)


@dataclass(frozen=True)
class Created:
    """This submission inserted the job."""

    job: JobResponse
    created = True


@dataclass(frozen=True)
class AlreadyExisted:
    """A prior submission with the same key inserted the job."""

    job: JobResponse
    created = False


SubmissionOutcome = Created | AlreadyExisted


def validate_submission(payload: Any, idempotency_key: str | None) -> str | None:
    """
    Check a submission before touching storage.

    Returns the effective idempotency key (an empty key counts as none).
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(
            "Payload must be a JSON object", title="Invalid Payload"
        )

    if not idempotency_key:
        return None

    if len(idempotency_key) > IDEMPOTENCY_KEY_MAX_LENGTH:
        raise ValidationError(
            f"Idempotency-Key must be ≤ {IDEMPOTENCY_KEY_MAX_LENGTH} characters",
            title="Invalid Idempotency-Key",
        )

    return idempotency_key


class SubmissionCoordinator:
    """Turns a submission into exactly one stored job."""

    def __init__(self, database: Database):
        self.database = database

    async def submit(
        self, payload: dict[str, Any], idempotency_key: str | None = None
    ) -> SubmissionOutcome:
        key = validate_submission(payload, idempotency_key)

        try:
            async with self.database.transaction() as session:
                outcome = await self._submit_in_transaction(
                    JobRepository(session), payload, key
                )
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "failed to create job",
                has_idempotency_key=key is not None,
                error=str(e),
                exc_info=True,
            )
            raise StorageError("Failed to create job") from e

        logger.info(
            "Job submitted",
            job_id=str(outcome.job.id),
            created=outcome.created,
            has_idempotency_key=key is not None,
        )
        return outcome

    async def _submit_in_transaction(
        self, repository: JobRepository, payload: dict[str, Any], key: str | None
    ) -> SubmissionOutcome:
        if key is None:
            job_id = await repository.insert_unconditional(JobStatus.QUEUED, payload)
            return Created(normalize_job(await repository.find_by_id(job_id)))

        job_id = await repository.insert_if_absent(key, JobStatus.QUEUED, payload)
        if job_id is not None:
            return Created(normalize_job(await repository.find_by_id(job_id)))

        # Insert suppressed: the key belongs to an earlier submission
        row = await repository.find_by_key(key)
        if row is None:
            logger.error("Conflicting job not visible after suppressed insert")
            raise StorageError("Failed to create job")
        return AlreadyExisted(normalize_job(row))


def get_submission_coordinator(
    database: Database = Depends(get_database),
) -> SubmissionCoordinator:
    """Dependency injection for the submission coordinator."""
    return SubmissionCoordinator(database)
