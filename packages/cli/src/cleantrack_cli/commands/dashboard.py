"""dashboard command — aggregate counts across complaints."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from cleantrack_core.errors import StoreError
from cleantrack_core.workflow import recent, summarize

from cleantrack_cli.commands.common import complaints_table, get_workflow, require_session

console = Console()


@click.command("dashboard")
@click.option(
    "--recent",
    "recent_count",
    type=click.IntRange(min=0),
    default=5,
    show_default=True,
    help="Number of recent complaints to show.",
)
@click.pass_context
def dashboard_cmd(ctx, recent_count: int):
    """Show complaint counts by status and category.

    Administrators see every complaint; everyone else sees their own.
    """
    session = require_session(ctx)
    workflow = get_workflow(ctx)
    try:
        complaints = workflow.list_all() if session.is_admin else workflow.list_by_owner(session.user_id)
    except StoreError as e:
        raise click.ClickException(f"Failed to load complaints: {e}")

    summary = summarize(complaints)
    heading = "Admin Dashboard" if session.is_admin else f"Hello, {session.submitter_name}"

    # --- Summary ---
    console.print(f"\n[bold]{heading}[/bold]")
    console.print(f"  Total:        {summary.total}")
    console.print(f"  [yellow]Pending:[/yellow]      {summary.pending}")
    console.print(f"  [blue]In progress:[/blue]  {summary.in_progress}")
    console.print(f"  [green]Resolved:[/green]     {summary.resolved}")
    if summary.rejected:
        console.print(f"  [red]Rejected:[/red]     {summary.rejected}")

    # --- Category breakdown ---
    if summary.by_category:
        cat_table = Table(title="By Category", show_header=True)
        cat_table.add_column("Category", style="bold")
        cat_table.add_column("Count", justify="right")
        cat_table.add_column("% of total", justify="right")
        for category, count in summary.by_category.items():
            cat_table.add_row(category.label, str(count), f"{count / summary.total * 100:.1f}%")
        console.print(cat_table)
    else:
        console.print("[dim]No complaints yet.[/dim]")

    # --- Recent complaints ---
    latest = recent(complaints, recent_count)
    if latest:
        console.print(complaints_table(latest, "Recent Complaints"))
