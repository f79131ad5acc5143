"""list and show commands — read complaints from the store."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from cleantrack_core.errors import NotFound, StoreError
from cleantrack_core.models import Category, Status
from cleantrack_core.workflow import filter_complaints

from cleantrack_cli.commands.common import (
    PRIORITY_STYLE,
    STATUS_STYLE,
    complaints_table,
    get_workflow,
    require_admin,
    require_session,
    short_ts,
    styled,
)

console = Console()


@click.command("list")
@click.option("--all", "show_all", is_flag=True, help="Every complaint (administrators only).")
@click.option("--status", type=click.Choice([s.value for s in Status]), default=None, help="Only this status.")
@click.option("--category", type=click.Choice([c.value for c in Category]), default=None, help="Only this category.")
@click.option("--search", default=None, help="Case-insensitive text to look for in titles.")
@click.pass_context
def list_cmd(ctx, show_all: bool, status: str | None, category: str | None, search: str | None):
    """List complaints, newest first."""
    workflow = get_workflow(ctx)
    try:
        if show_all:
            require_admin(ctx)
            complaints = workflow.list_all()
            title = "All Complaints"
        else:
            session = require_session(ctx)
            complaints = workflow.list_by_owner(session.user_id)
            title = "My Complaints"
    except StoreError as e:
        raise click.ClickException(f"Failed to load complaints: {e}")

    complaints = filter_complaints(complaints, status=status, category=category, search_text=search)
    if not complaints:
        console.print("[yellow]No complaints found.[/yellow]")
        return

    console.print(complaints_table(complaints, title))
    console.print(f"{len(complaints)} {'result' if len(complaints) == 1 else 'results'}")


@click.command("show")
@click.argument("complaint_id")
@click.pass_context
def show_cmd(ctx, complaint_id: str):
    """Show one complaint and its status timeline."""
    session = require_session(ctx)
    try:
        complaint = get_workflow(ctx).get(complaint_id)
    except NotFound:
        raise click.ClickException(f"Complaint {complaint_id} not found.")
    except StoreError as e:
        raise click.ClickException(f"Failed to load complaint: {e}")

    if complaint.user_id != session.user_id and not session.is_admin:
        raise click.ClickException(f"Complaint {complaint_id} not found.")

    console.print(f"\n[bold]{complaint.title}[/bold]  ({complaint.id})")
    console.print(
        f"  {styled(complaint.status.value, STATUS_STYLE, complaint.status.label)}"
        f"  ·  priority {styled(complaint.priority.value, PRIORITY_STYLE, complaint.priority.label)}"
        f"  ·  {complaint.category.label}"
    )
    console.print(f"  Reported by {complaint.user_name} on {short_ts(complaint.created_at)}")
    if complaint.location:
        loc = complaint.location
        parts = [p for p in (loc.address, _coords(loc.latitude, loc.longitude)) if p]
        if parts:
            console.print(f"  Location: {'; '.join(parts)}")
    console.print(f"\n{complaint.description}\n")

    for i, url in enumerate(complaint.images, start=1):
        console.print(f"  Photo {i}: {url}")

    timeline = Table(title="Status Timeline", show_header=True, header_style="bold cyan")
    timeline.add_column("When", width=16)
    timeline.add_column("Status", width=13)
    timeline.add_column("Note")
    timeline.add_column("By", max_width=20)
    for event in complaint.timeline():
        timeline.add_row(
            short_ts(event.updated_at),
            styled(event.status.value, STATUS_STYLE, event.status.label),
            event.note,
            event.updated_by,
        )
    console.print(timeline)


def _coords(latitude: float | None, longitude: float | None) -> str | None:
    if latitude is None or longitude is None:
        return None
    return f"{latitude:.5f}, {longitude:.5f}"
