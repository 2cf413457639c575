# deploy_stager/cli/utils/output.py
"""Output formatting utilities"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from ...api.exceptions import StagerError
from ...constants import MSG_STAGE_SUCCESS, MSG_DISTRIBUTED
from ...core.validation_engine import ValidationResult
from ...models import StageResult

console = Console()


def format_stage_result(result: StageResult) -> None:
    """Format and display a staging run"""
    lines = [
        f"[green]{MSG_STAGE_SUCCESS.format(revision=result.revision, releases_path=result.releases_path)}[/green]",
        f"",
        f"[bold]Archive:[/bold] {result.archive_path}",
        f"[bold]Remote archive:[/bold] {result.remote_archive_path}",
        f"[bold]Steps:[/bold] {', '.join(result.steps)}",
    ]

    if result.server:
        release_path = result.metadata.get("release_path", result.releases_path)
        lines.append(MSG_DISTRIBUTED.format(release_path=release_path, server=result.server))

    if result.duration is not None:
        lines.append(f"[bold]Duration:[/bold] {result.duration:.1f}s")

    if result.rollback and not result.rollback.success:
        lines.append("")
        lines.append("[yellow]Local cleanup left files behind:[/yellow]")
        for error in result.rollback.errors:
            lines.append(f"  • {error}")

    panel = Panel(
        "\n".join(lines),
        title="Stage Result",
        border_style="green"
    )
    console.print(panel)


def format_stage_error(error: StagerError) -> None:
    """Display a failed staging run"""
    panel = Panel(
        f"[red]✗ Stage failed:[/red] {error}",
        title=f"Stage Error ({error.error_code})" if error.error_code else "Stage Error",
        border_style="red"
    )
    console.print(panel)


def format_check_result(result: ValidationResult) -> None:
    """Display dependency check results as a table"""
    table = Table(title="Dependency Check", box=box.ROUNDED)
    table.add_column("Status", justify="center")
    table.add_column("Check")

    for info in result.info:
        table.add_row("[green]✓[/green]", info.lstrip("✓ "))
    for error in result.errors:
        table.add_row("[red]✗[/red]", error)

    console.print(table)
