"""Tests for the Jobs API client"""

import json
import uuid

import httpx
import pytest

from cli.client.base import JobsAPIError
from cli.client.endpoints import JobsClient

JOB = {
    "id": "6f1c2b1e-8a55-4a39-9a55-0d3f6c1d2e11",
    "status": "queued",
    "payload": {"task": "demo"},
    "result": None,
    "error": None,
    "created_at": "2026-10-19T09:00:00Z",
    "updated_at": None,
    "finished_at": None,
}


def make_client(handler) -> JobsClient:
    return JobsClient(
        base_url="http://jobs.test", transport=httpx.MockTransport(handler)
    )


def test_generate_key_is_uuid():
    key = JobsClient.generate_key()
    assert str(uuid.UUID(key)) == key
    assert JobsClient.generate_key() != key


def test_create_job_sends_generated_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.headers.get("Idempotency-Key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=JOB, headers={"Location": f"/jobs/{JOB['id']}"})

    with make_client(handler) as client:
        job = client.create_job({"task": "demo"})

    assert job == JOB
    assert seen["path"] == "/jobs"
    assert seen["body"] == {"payload": {"task": "demo"}}
    uuid.UUID(seen["key"])


def test_create_job_uses_given_key():
    keys = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers["Idempotency-Key"])
        return httpx.Response(200, json=JOB)

    with make_client(handler) as client:
        client.create_job({"task": "demo"}, idempotency_key="retry-me")
        client.create_job({"task": "demo"}, idempotency_key="retry-me")

    assert keys == ["retry-me", "retry-me"]


def test_get_and_list():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/jobs":
            return httpx.Response(200, json=[JOB])
        return httpx.Response(200, json=JOB)

    with make_client(handler) as client:
        assert client.get_job(JOB["id"]) == JOB
        assert client.list_jobs() == [JOB]


def test_problem_detail_raises_api_error():
    problem = {"title": "Not Found", "status": 404, "detail": "Job not found"}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            404, json=problem, headers={"Content-Type": "application/problem+json"}
        )

    with make_client(handler) as client:
        with pytest.raises(JobsAPIError) as exc_info:
            client.get_job("missing")

    assert exc_info.value.status == 404
    assert exc_info.value.problem == problem
    assert str(exc_info.value) == "Job not found"


def test_connection_error_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with make_client(handler) as client:
        with pytest.raises(JobsAPIError, match="Connection failed") as exc_info:
            client.list_jobs()

    assert exc_info.value.status is None


def test_non_json_response_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with make_client(handler) as client:
        with pytest.raises(JobsAPIError, match="Invalid JSON response: 502"):
            client.health_check()
