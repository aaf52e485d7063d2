"""
Public job representations.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class JobSubmission(BaseModel):
    """Request body for ``POST /jobs``."""

    payload: dict[str, Any] = Field(..., description="Job parameters (JSON object)")


class JobResponse(BaseModel):
    """Job as returned by the API."""

    id: UUID
    status: str
    payload: dict[str, Any]
    result: Any | None = None
    error: Any | None = None
    created_at: datetime
    updated_at: datetime | None = None
    finished_at: datetime | None = None


class ProblemDetail(BaseModel):
    """Error body served as ``application/problem+json``."""

    title: str
    status: int
    detail: str


def normalize_job(row: Mapping[str, Any]) -> JobResponse:
    """Build the public job shape from a stored row joined with its status."""
    return JobResponse(
        id=row["id"],
        status=row["status"],
        payload=row["payload"],
        result=row.get("result"),
        error=row.get("error"),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
        finished_at=row.get("finished_at"),
    )
