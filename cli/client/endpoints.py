"""Jobs API client - typed endpoint wrappers"""

import uuid
from typing import Any

import httpx

from .base import APIClient
from ..utils.config_manager import config


class JobsClient:
    """Minimal client for the Jobs API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        api_config = config.load_config().get("api", {})

        self.api = APIClient(
            base_url=base_url or api_config.get("base_url"),
            timeout=float(timeout or api_config.get("timeout", 30)),
            transport=transport,
        )

    def __enter__(self):
        self.api.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.api.__exit__(exc_type, exc_val, exc_tb)

    @staticmethod
    def generate_key() -> str:
        """Generate a fresh idempotency key"""
        return str(uuid.uuid4())

    def health_check(self) -> dict[str, Any]:
        """Check API health status"""
        return self.api.get("/healthz")

    def create_job(
        self, payload: dict[str, Any], idempotency_key: str | None = None
    ) -> dict[str, Any]:
        """
        Submit a job.

        A key is generated when none is given; pass the same key again to
        retry the submission without creating a second job.
        """
        key = idempotency_key or self.generate_key()
        return self.api.post(
            "/jobs",
            json={"payload": payload},
            headers={"Idempotency-Key": key},
        )

    def get_job(self, job_id: str) -> dict[str, Any]:
        """Fetch a job by ID"""
        return self.api.get(f"/jobs/{job_id}")

    def list_jobs(self) -> list[dict[str, Any]]:
        """List all jobs"""
        return self.api.get("/jobs")
