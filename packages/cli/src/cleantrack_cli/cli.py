"""CLI entry point for cleantrack.

Commands:
  submit     — file a new complaint with optional photos and location
  list       — list your complaints (or every complaint, for admins) with filters
  show       — complaint details and status timeline
  update     — admin: change status, priority, or add a note
  dashboard  — counts per status and category plus recent complaints
  init       — interactive setup wizard writing .cleantrack.yml
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console

from cleantrack_cli.commands.dashboard import dashboard_cmd
from cleantrack_cli.commands.init import init_cmd
from cleantrack_cli.commands.listing import list_cmd, show_cmd
from cleantrack_cli.commands.submit import submit_cmd
from cleantrack_cli.commands.update import update_cmd
from cleantrack_core.errors import StoreError

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .cleantrack.yml settings.

    Store selection hierarchy:
      store: gist   → GistStore   (requires gist_id and a GitHub token)
      store: sqlite → SQLiteStore (uses store_path, default .cleantrack.db)
      (default)     → MemoryStore (nothing survives the process)

    This factory lives in cli.py so neither cleantrack_core nor
    cleantrack_store know about the CLI config format.
    """
    from cleantrack_store.memory import MemoryStore

    store_type = config.get("store", "memory")

    if store_type == "gist":
        from cleantrack_store.gist import GistStore

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if not gist_id or not token:
            console.print("[yellow]GistStore requires gist_id and a GitHub token. Falling back to memory store.[/yellow]")
            return MemoryStore()
        return GistStore(gist_id=gist_id, token=token)

    if store_type == "sqlite":
        from cleantrack_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=config.get("store_path") or ".cleantrack.db")

    return MemoryStore()


def _build_uploader(config: dict):
    """Return a CloudinaryUploader, or None when no cloud name is configured."""
    cloud_name = config.get("cloudinary_cloud_name")
    if not cloud_name:
        return None

    from cleantrack_core.uploader.cloudinary import CloudinaryUploader

    return CloudinaryUploader(
        cloud_name=cloud_name,
        upload_preset=config.get("cloudinary_upload_preset") or "cleantrack_uploads",
        folder=config.get("upload_folder") or "cleantrack",
        max_retries=config.get("upload_retries"),
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("cleantrack"),
    prog_name="cleantrack",
)
@click.option(
    "--config",
    "config_path",
    default=".cleantrack.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CLEANTRACK_CONFIG",
)
@click.option("--user-id", default=None, help="Your user id. Overrides CLEANTRACK_USER_ID and the config file.")
@click.option("--user-name", default=None, help="Display name recorded on complaints and status updates.")
@click.option("--admin", is_flag=True, default=False, help="Act as an administrator.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, user_id: str | None, user_name: str | None, admin: bool, verbose: bool):
    """Report municipal issues and track them to resolution."""
    from cleantrack_cli.auth import resolve_github_token, resolve_session
    from cleantrack_core.config import load_config
    from cleantrack_core.workflow import ComplaintWorkflow

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    ctx.ensure_object(dict)

    overrides = {"user_id": user_id, "user_name": user_name, "role": "admin" if admin else None}
    config = load_config(config_path, cli_overrides=overrides)

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    # init writes the config file and needs no store.
    if ctx.invoked_subcommand == "init":
        return

    # Only the Gist store needs a token; skip the gh subprocess otherwise.
    if config.get("store") == "gist" and not config.get("github_token"):
        config["github_token"] = resolve_github_token()

    try:
        store = _build_store(config)
    except StoreError as e:
        raise click.ClickException(f"Could not open the complaint store: {e}") from e
    ctx.obj["store"] = store
    ctx.obj["workflow"] = ComplaintWorkflow(store)
    ctx.obj["session"] = resolve_session(config)
    ctx.call_on_close(store.close)


main.add_command(submit_cmd)
main.add_command(list_cmd)
main.add_command(show_cmd)
main.add_command(update_cmd)
main.add_command(dashboard_cmd)
main.add_command(init_cmd)
