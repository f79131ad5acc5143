"""init command — interactive setup wizard.

Writes .cleantrack.yml once so later commands need no flags: who you are,
where complaints are stored, and which Cloudinary preset receives photos.
"""

from __future__ import annotations

import click
from rich.console import Console

from cleantrack_core.config import write_config

console = Console()


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up cleantrack on this machine.

    Creates or updates the configuration file with your identity, the store
    backend, and the image upload settings.
    """
    config_path = (ctx.obj or {}).get("config_path", ".cleantrack.yml")
    console.print("\n[bold cyan]cleantrack init[/bold cyan] — setup wizard\n")

    # --- Identity ---
    config: dict = {
        "user_id": click.prompt("Your user id"),
        "user_name": click.prompt("Your display name", default="", show_default=False) or None,
    }
    if click.confirm("Are you a municipal administrator?", default=False):
        config["role"] = "admin"

    # --- Choose store backend ---
    console.print("\nComplaint store:")
    console.print("  [bold]memory[/bold]  — nothing is kept between runs (default)")
    console.print("  [bold]sqlite[/bold]  — local SQLite file")
    console.print("  [bold]gist[/bold]    — shared GitHub Gist, zero infrastructure")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["memory", "sqlite", "gist"]),
        default="memory",
    )
    config["store"] = store_type

    if store_type == "sqlite":
        config["store_path"] = click.prompt("SQLite database path", default=".cleantrack.db")
        console.print(f"[green]SQLite store configured at {config['store_path']}[/green]")
    elif store_type == "gist":
        console.print(
            "\n[yellow]Note:[/yellow] the Gist store needs a GitHub token with [bold]gist[/bold] scope, "
            "read from GITHUB_TOKEN or the gh CLI session."
        )
        config["gist_id"] = click.prompt("Gist id")

    # --- Image uploads ---
    if click.confirm("\nConfigure Cloudinary for photo uploads?", default=False):
        config["cloudinary_cloud_name"] = click.prompt("Cloudinary cloud name")
        config["cloudinary_upload_preset"] = click.prompt("Unsigned upload preset", default="cleantrack_uploads")

    write_config(config, config_path)
    console.print(f"[green]Wrote {config_path}[/green]")
    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Report an issue with: [bold]cleantrack submit[/bold]")
