"""Helpers shared by the cleantrack subcommands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from rich.table import Table

if TYPE_CHECKING:
    from cleantrack_core.models import Complaint
    from cleantrack_core.session import Session
    from cleantrack_core.workflow import ComplaintWorkflow

STATUS_STYLE = {
    "pending": "yellow",
    "in_progress": "blue",
    "resolved": "green",
    "rejected": "red",
}

PRIORITY_STYLE = {"low": "green", "medium": "yellow", "high": "red"}


def get_workflow(ctx: click.Context) -> ComplaintWorkflow:
    return ctx.obj["workflow"]


def require_session(ctx: click.Context) -> Session:
    session = ctx.obj.get("session") if ctx.obj else None
    if session is None:
        raise click.UsageError("No user configured. Pass --user-id, set CLEANTRACK_USER_ID, or run `cleantrack init`.")
    return session


def require_admin(ctx: click.Context) -> Session:
    session = require_session(ctx)
    if not session.is_admin:
        raise click.UsageError("This command is only available to administrators (use --admin).")
    return session


def styled(value: str, styles: dict[str, str], label: str | None = None) -> str:
    style = styles.get(value, "white")
    return f"[{style}]{label or value}[/{style}]"


def short_ts(ts: str) -> str:
    return (ts or "")[:16].replace("T", " ")


def complaints_table(complaints: list[Complaint], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold", width=10)
    table.add_column("Title", max_width=40)
    table.add_column("Category", max_width=28)
    table.add_column("Status", width=13)
    table.add_column("Priority", width=8)
    table.add_column("Reported By", max_width=20)
    table.add_column("Created", width=16)

    for c in complaints:
        table.add_row(
            c.id[:8],
            c.title[:40],
            c.category.label,
            styled(c.status.value, STATUS_STYLE, c.status.label),
            styled(c.priority.value, PRIORITY_STYLE, c.priority.label),
            c.user_name,
            short_ts(c.created_at),
        )
    return table
