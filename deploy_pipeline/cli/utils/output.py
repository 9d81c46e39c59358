# deploy_pipeline/cli/utils/output.py
"""Output formatting utilities"""

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING
from ...models import BatchResult, Step, StepStatus

console = Console()

STATUS_STYLES = {
    StepStatus.SUCCEEDED: "[green]succeeded[/green]",
    StepStatus.FAILED: "[red]failed[/red]",
    StepStatus.NOT_APPLICABLE: "[dim]n/a[/dim]",
    StepStatus.NOT_ATTEMPTED: "[yellow]not attempted[/yellow]",
}


def format_pending_table(projects: List[str]) -> None:
    """Display projects pending deployment"""
    if not projects:
        console.print("[yellow]No projects pending deployment[/yellow]")
        return

    table = Table(title="Projects Pending Deployment", box=box.SIMPLE)
    table.add_column("Project Name", style="cyan")

    for name in projects:
        table.add_row(name)

    console.print(table)


def format_batch_result(batch: BatchResult) -> None:
    """Format and display a deploy batch result"""
    if not batch.results and not batch.failures:
        console.print("[yellow]No projects pending deployment[/yellow]")
        return

    if batch.results:
        table = Table(title="Deployment Results", box=box.ROUNDED)
        table.add_column("Project", style="cyan")
        table.add_column("Pull")
        table.add_column("Build")
        table.add_column("Publish")
        table.add_column("Install")
        table.add_column("Post-deploy")
        table.add_column("Result")

        for result in batch.results:
            row = [result.project]
            row.extend(STATUS_STYLES[result.status(step)] for step in Step)
            row.append(
                f"[green]{EMOJI_SUCCESS} deployed[/green]" if result.deployed
                else f"[red]{EMOJI_ERROR} failed[/red]"
            )
            table.add_row(*row)

        console.print(table)

    if batch.failures:
        lines = [f"[red]{EMOJI_WARNING}[/red] {f.error}" for f in batch.failures]
        console.print(Panel("\n".join(lines), title="Skipped Projects", border_style="red"))

    if batch.deployed:
        console.print(f"[green]{EMOJI_SUCCESS}[/green] Deployed: {batch.summary}")
