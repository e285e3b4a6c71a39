"""Rich Formatting Utilities for CLI Output"""

from rich import box
from rich.console import Console
from rich.table import Table

from jobqueue.jobs.schemas import JobStats

console = Console()


def print_success(message: str):
    """Print success message with green styling"""
    console.print(f"[green]✓ {message}[/green]")


def print_error(message: str):
    """Print error message with red styling"""
    console.print(f"[red]✗ {message}[/red]")


def print_info(message: str):
    """Print info message with blue styling"""
    console.print(f"[blue]ℹ {message}[/blue]")


def create_stats_table(stats: JobStats) -> Table:
    """Create a formatted table of job counts per status"""
    table = Table(title="Jobs", box=box.ROUNDED)

    table.add_column("Status", justify="left", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right", style="magenta")

    styles = {
        "pending": "yellow",
        "processing": "blue",
        "completed": "green",
        "failed": "red",
    }
    for status, count in stats.model_dump().items():
        table.add_row(f"[{styles[status]}]{status}[/{styles[status]}]", str(count))

    table.add_section()
    table.add_row("[bold]total[/bold]", f"[bold]{stats.total}[/bold]")

    return table
