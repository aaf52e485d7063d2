"""Rich Formatting Utilities for CLI Output"""

import json
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()

STATUS_STYLES = {
    "queued": "yellow",
    "running": "blue",
    "succeeded": "green",
    "failed": "red",
    "canceled": "dim",
}


def print_success(message: str):
    """Print success message with green styling"""
    console.print(f"[green]✓ {message}[/green]")


def print_error(message: str):
    """Print error message with red styling"""
    console.print(f"[red]✗ {message}[/red]")


def print_info(message: str):
    """Print info message with blue styling"""
    console.print(f"[blue]ℹ {message}[/blue]")


def _status_text(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def _preview(payload: Any, width: int = 50) -> str:
    text = json.dumps(payload, separators=(",", ":"))
    text = text[:width] + "..." if len(text) > width else text
    return escape(text)


def _pretty(value: Any) -> str:
    return escape(json.dumps(value, indent=2))


def create_jobs_table(jobs: list[dict[str, Any]]) -> Table:
    """Create a formatted table for the jobs list"""
    table = Table(title="Jobs", box=box.ROUNDED)

    table.add_column("ID", justify="left", style="cyan", no_wrap=True)
    table.add_column("Status", justify="center")
    table.add_column("Created", justify="left", style="magenta")
    table.add_column("Payload", justify="left", style="white")

    for job in jobs:
        table.add_row(
            job.get("id", ""),
            _status_text(job.get("status", "")),
            job.get("created_at", ""),
            _preview(job.get("payload", {})),
        )

    return table


def create_job_panel(job: dict[str, Any], title: str = "Job") -> Panel:
    """Create a formatted panel for a single job"""
    lines = [
        f"• ID: [cyan]{job.get('id')}[/cyan]",
        f"• Status: {_status_text(job.get('status', ''))}",
        f"• Created: [magenta]{job.get('created_at')}[/magenta]",
    ]
    if job.get("finished_at"):
        lines.append(f"• Finished: [magenta]{job['finished_at']}[/magenta]")

    lines.append(f"\n[bold]Payload[/bold]\n{_pretty(job.get('payload'))}")
    if job.get("result") is not None:
        lines.append(f"\n[bold green]Result[/bold green]\n{_pretty(job['result'])}")
    if job.get("error") is not None:
        lines.append(f"\n[bold red]Error[/bold red]\n{_pretty(job['error'])}")

    return Panel("\n".join(lines), title=title, border_style="cyan")
