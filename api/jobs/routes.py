"""
Job submission and lookup endpoints.
"""

from fastapi import APIRouter, Depends, Header, Response, status

from api.core.exceptions import NotFoundError
from api.jobs.queries import JobQueries, get_job_queries
from api.jobs.schemas import JobResponse, JobSubmission, ProblemDetail
from api.jobs.service import Created, SubmissionCoordinator, get_submission_coordinator

router = APIRouter(prefix="/jobs", tags=["jobs"])

PROBLEM_RESPONSES = {
    422: {"model": ProblemDetail, "description": "Invalid payload or idempotency key"},
    500: {"model": ProblemDetail, "description": "Storage failure"},
}


@router.post(
    "",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": JobResponse, "description": "Job already existed for this key"},
        **PROBLEM_RESPONSES,
    },
)
async def submit_job(
    submission: JobSubmission,
    response: Response,
    idempotency_key: str | None = Header(None, alias="Idempotency-Key"),
    coordinator: SubmissionCoordinator = Depends(get_submission_coordinator),
) -> JobResponse:
    """
    Submit a job.

    Retrying with the same ``Idempotency-Key`` returns the original job with
    200 instead of creating another one.
    """
    outcome = await coordinator.submit(submission.payload, idempotency_key)

    if isinstance(outcome, Created):
        response.headers["Location"] = f"/jobs/{outcome.job.id}"
    else:
        response.status_code = status.HTTP_200_OK

    return outcome.job


@router.get(
    "",
    response_model=list[JobResponse],
    responses={500: PROBLEM_RESPONSES[500]},
)
async def list_jobs(
    queries: JobQueries = Depends(get_job_queries),
) -> list[JobResponse]:
    """List all jobs."""
    return await queries.list_all()


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    responses={
        404: {"model": ProblemDetail, "description": "Job not found"},
        500: PROBLEM_RESPONSES[500],
    },
)
async def get_job(
    job_id: str,
    queries: JobQueries = Depends(get_job_queries),
) -> JobResponse:
    """Get a specific job by ID."""
    job = await queries.get_by_id(job_id)

    if job is None:
        raise NotFoundError("Job not found")

    return job
