"""update command — administrator status/priority changes."""

from __future__ import annotations

import click
from rich.console import Console

from cleantrack_core.errors import NotFound, PartialUpdateError, StoreError
from cleantrack_core.models import Priority, Status

from cleantrack_cli.commands.common import get_workflow, require_admin

console = Console()


@click.command("update")
@click.argument("complaint_id")
@click.option("--status", type=click.Choice([s.value for s in Status]), default=None, help="New status.")
@click.option("--priority", type=click.Choice([p.value for p in Priority]), default=None, help="New priority.")
@click.option("--note", default=None, help="Note recorded on the status timeline.")
@click.pass_context
def update_cmd(ctx, complaint_id: str, status: str | None, priority: str | None, note: str | None):
    """Change a complaint's status or priority, or add a note.

    A note without a status change is still recorded on the timeline.
    Status and priority are saved separately: if the priority update fails
    the status change stays in place.
    """
    session = require_admin(ctx)
    if status is None and priority is None and not (note and note.strip()):
        raise click.UsageError("Nothing to update. Pass --status, --priority, or --note.")

    try:
        result = get_workflow(ctx).manage(
            complaint_id,
            session.actor_name,
            status=status,
            priority=priority,
            note=note,
        )
    except NotFound:
        raise click.ClickException(f"Complaint {complaint_id} not found.")
    except PartialUpdateError as e:
        raise click.ClickException(
            f"Status was updated but the {e.failed_step} update failed ({e.cause}). Please retry the {e.failed_step} change."
        )
    except StoreError as e:
        raise click.ClickException(f"Failed to update complaint: {e}. Please try again.")

    if not result.changed:
        console.print("[yellow]Nothing changed.[/yellow]")
        return
    console.print("[green]Complaint updated successfully.[/green]")
