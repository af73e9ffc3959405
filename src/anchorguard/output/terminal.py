"""Rich terminal reporter."""

from __future__ import annotations

from typing import Dict, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from anchorguard.review.models import RunResult

_STATUS_STYLE = {
    "posted": "bold green",
    "duplicate": "dim",
    "failed": "bold red",
    "skipped": "yellow",
    "found": "cyan",
}


def render(result: RunResult, console: Console, *, show_summary: bool = True) -> None:
    """Print the heading changes and what was done with them."""
    if not result.files:
        console.print()
        console.print("[bold green]No heading changes detected.[/bold green]")
        if show_summary:
            _print_summary(console, result)
        return

    status: Dict[Tuple[str, int, str], str] = {
        (o.path, o.line, o.heading): o.status for o in result.outcomes
    }

    console.print()
    table = Table(
        title="Removed Headings",
        show_lines=False,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("File", style="magenta")
    table.add_column("Line", justify="right", style="green")
    table.add_column("Heading", style="cyan", min_width=20)
    table.add_column("Status", justify="center")

    for file in result.files:
        for change in file.changes:
            state = status.get((file.path, change.line, change.heading), "found")
            table.add_row(
                file.path,
                str(change.line) if change.line > 0 else "-",
                Text(change.heading),
                Text(state, style=_STATUS_STYLE.get(state, "")),
            )

    console.print(table)

    if show_summary:
        _print_summary(console, result)

    if result.dry_run:
        console.print()
        console.print("[bold yellow]Dry run — no comments were posted.[/bold yellow]")


def _print_summary(console: Console, result: RunResult) -> None:
    console.print()
    console.print(f"[dim]Files checked:[/dim]  {len(result.files_checked)}")
    console.print(f"[dim]Headings:[/dim]       {result.total_changes}")
    console.print(f"[dim]Posted:[/dim]         {len(result.posted)}")
    console.print(f"[dim]Duplicates:[/dim]     {len(result.duplicates)}")
    console.print(f"[dim]Failed:[/dim]         {len(result.failed)}")
    console.print(f"[dim]Duration:[/dim]       {result.duration_ms:.0f}ms")
