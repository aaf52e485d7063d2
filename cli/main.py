"""Jobs API CLI - Main Entry Point"""

import typer
from rich.console import Console
from rich.panel import Panel

from .client.base import JobsAPIError
from .client.endpoints import JobsClient
from .commands import config, jobs
from .utils.config_manager import config as config_manager
from .utils.formatting import print_error, print_info

console = Console()

app = typer.Typer(
    name="jobs-cli",
    help="Jobs API CLI - submit jobs safely with idempotency keys",
    rich_markup_mode="rich",
)

app.add_typer(jobs.app, name="jobs")
app.add_typer(config.app, name="config")


@app.command()
def status():
    """📊 Check system status and connectivity"""
    base_url = config_manager.get("api.base_url")
    print_info(f"Checking connection to: {base_url}")

    try:
        with JobsClient(base_url) as client:
            health = client.health_check()
    except JobsAPIError as e:
        print_error(f"Failed to connect: {e}")
        console.print(Panel(
            f"🚫 [red]Connection Failed[/red]\n\n"
            f"Make sure the Jobs API is running at:\n"
            f"[blue]{base_url}[/blue]\n\n"
            f"You can update the API URL with:\n"
            f"[cyan]jobs-cli config set api.base_url <url>[/cyan]",
            title="Connection Error",
            border_style="red",
        ))
        raise typer.Exit(1) from None

    database = health.get("database", {})
    db_state = "[green]connected[/green]" if database.get("connected") else "[red]unreachable[/red]"
    console.print(Panel(
        f"🚀 [green]Connected Successfully![/green]\n\n"
        f"• Version: [cyan]{health.get('version', 'unknown')}[/cyan]\n"
        f"• Environment: [yellow]{health.get('environment', 'unknown')}[/yellow]\n"
        f"• Database: {db_state}\n"
        f"• API URL: [blue]{base_url}[/blue]",
        title="System Status",
        border_style="green",
    ))


@app.command()
def version():
    """📎 Show CLI version information"""
    from . import __version__

    console.print(f"Jobs API CLI v{__version__}")


if __name__ == "__main__":
    app()
