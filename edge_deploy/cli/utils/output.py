"""Output formatting utilities"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from ...api.exceptions import EdgeDeployError
from ...models import RewriteReport, TaskResult

console = Console(stderr=True)


def format_task_result(result: TaskResult) -> None:
    """Format and display the result of one task action"""
    if result.is_success:
        lines = [
            f"[green]✓[/green] {result.action or 'Task'} completed successfully!",
        ]
        for name, value in result.output_variables.items():
            lines.append(f"[bold]{name}:[/bold] {value}")
        if result.duration is not None:
            lines.append(f"[dim]Duration: {result.duration:.2f}s[/dim]")

        console.print(Panel("\n".join(lines), title="Task Result", border_style="green"))
    else:
        console.print(Panel(
            f"[red]✗ {result.action or 'Task'} failed:[/red] {result.message}",
            title="Task Error",
            border_style="red"
        ))


def format_rewrite_report(report: Optional[RewriteReport]) -> None:
    """Show which registry credentials were filled in"""
    if report is None:
        console.print("[yellow]Generated deployment file not found; credentials were not expanded[/yellow]")
        return

    if not report.replaced and not report.unresolved:
        console.print("[dim]No registry credential placeholders to expand[/dim]")
        return

    table = Table(title="Registry Credentials", box=box.ROUNDED)
    table.add_column("Entry", style="cyan")
    table.add_column("Status")

    for key, server in report.replaced.items():
        table.add_row(key, f"[green]✓ {server}[/green]")
    for key in report.unresolved:
        table.add_row(key, "[yellow]⚠ no matching credential[/yellow]")

    console.print(table)


def print_error(error: EdgeDeployError) -> None:
    code = f" [dim]({error.error_code})[/dim]" if error.error_code else ""
    console.print(f"[red]Error:[/red] {error}{code}")
