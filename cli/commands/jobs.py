"""Job Commands - submit and inspect jobs"""

import json

import typer
from rich.console import Console

from ..client.base import JobsAPIError
from ..client.endpoints import JobsClient
from ..utils.formatting import (
    create_job_panel,
    create_jobs_table,
    print_error,
    print_info,
    print_success,
)

console = Console()
app = typer.Typer(name="jobs", help="Submit and inspect jobs")


def _report_api_error(e: JobsAPIError):
    if e.problem:
        print_error(f"{e.problem.get('title', 'API Error')} ({e.status}): {e}")
    else:
        print_error(str(e))


@app.command("submit")
def submit_job(
    payload: str = typer.Argument(..., help='Job payload as a JSON object, e.g. \'{"task": "demo"}\''),
    key: str | None = typer.Option(
        None, "--key", "-k", help="Idempotency key (generated when omitted)"
    ),
):
    """📤 Submit a job"""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        print_error(f"Payload is not valid JSON: {e}")
        raise typer.Exit(1) from None

    if not isinstance(data, dict):
        print_error("Payload must be a JSON object")
        raise typer.Exit(1)

    idempotency_key = key or JobsClient.generate_key()

    try:
        with JobsClient() as client:
            job = client.create_job(data, idempotency_key=idempotency_key)
    except JobsAPIError as e:
        _report_api_error(e)
        raise typer.Exit(1) from None

    print_success(f"Job {job['id']} submitted")
    print_info(f"Idempotency-Key: {idempotency_key} (reuse it to retry safely)")
    console.print(create_job_panel(job))


@app.command("get")
def get_job(job_id: str = typer.Argument(..., help="Job ID")):
    """🔎 Show a job"""
    try:
        with JobsClient() as client:
            job = client.get_job(job_id)
    except JobsAPIError as e:
        _report_api_error(e)
        raise typer.Exit(1) from None

    console.print(create_job_panel(job))


@app.command("list")
def list_jobs():
    """📋 List all jobs"""
    try:
        with JobsClient() as client:
            jobs = client.list_jobs()
    except JobsAPIError as e:
        _report_api_error(e)
        raise typer.Exit(1) from None

    if not jobs:
        print_info("No jobs yet")
        return

    console.print(create_jobs_table(jobs))
    console.print(f"[dim]{len(jobs)} job(s)[/dim]")
