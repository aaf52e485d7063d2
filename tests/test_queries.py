import uuid

import pytest
from sqlalchemy.exc import OperationalError

from api.core.exceptions import StorageError
from api.jobs.queries import JobQueries, parse_job_id
from api.jobs.repository import JobRepository
from api.jobs.service import SubmissionCoordinator


@pytest.fixture
def queries(database) -> JobQueries:
    return JobQueries(database)


def test_parse_job_id():
    job_id = uuid.uuid4()

    assert parse_job_id(job_id) is job_id
    assert parse_job_id(str(job_id)) == job_id
    assert parse_job_id("not-a-uuid") is None
    assert parse_job_id("") is None


async def test_get_by_id_round_trip(queries, database):
    payload = {"task": "demo", "args": [1, 2, 3]}
    outcome = await SubmissionCoordinator(database).submit(payload)

    job = await queries.get_by_id(str(outcome.job.id))

    assert job is not None
    assert job.id == outcome.job.id
    assert job.payload == payload
    assert job.status == "queued"
    assert job.result is None
    assert job.error is None
    assert job.updated_at is None
    assert job.finished_at is None


async def test_get_by_id_missing(queries):
    assert await queries.get_by_id(uuid.uuid4()) is None


async def test_get_by_id_malformed_is_missing(queries):
    assert await queries.get_by_id("definitely-not-a-uuid") is None


async def test_list_all_is_a_fresh_read(queries, database):
    assert await queries.list_all() == []

    coordinator = SubmissionCoordinator(database)
    first = await coordinator.submit({"task": "demo"})
    assert [j.id for j in await queries.list_all()] == [first.job.id]

    second = await coordinator.submit({"task": "demo"})
    listed = {j.id for j in await queries.list_all()}
    assert listed == {first.job.id, second.job.id}


async def test_lookup_storage_failure(queries, monkeypatch):
    async def broken(self, job_id):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(JobRepository, "find_by_id", broken)

    with pytest.raises(StorageError, match="Failed to fetch job"):
        await queries.get_by_id(uuid.uuid4())


async def test_list_storage_failure(queries, monkeypatch):
    async def broken(self):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(JobRepository, "list_all", broken)

    with pytest.raises(StorageError, match="Failed to list jobs"):
        await queries.list_all()


async def test_lookup_timeout_is_storage_failure(queries, monkeypatch):
    async def timed_out(self, job_id):
        raise TimeoutError("timed out acquiring a connection")

    monkeypatch.setattr(JobRepository, "find_by_id", timed_out)

    with pytest.raises(StorageError, match="Failed to fetch job"):
        await queries.get_by_id(uuid.uuid4())
