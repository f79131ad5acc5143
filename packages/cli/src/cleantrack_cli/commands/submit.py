"""submit command — file a new complaint."""

from __future__ import annotations

import click
from rich.console import Console

from cleantrack_core.errors import StoreError, UploadError, ValidationError
from cleantrack_core.models import MAX_IMAGES, Category, Location
from cleantrack_core.submission import submit_complaint

from cleantrack_cli.commands.common import get_workflow, require_session

console = Console()


@click.command("submit")
@click.option("--title", prompt=True, help="Short summary of the issue.")
@click.option("--description", prompt=True, help="What is wrong and where.")
@click.option(
    "--category",
    type=click.Choice([c.value for c in Category]),
    prompt=True,
    help="Issue category.",
)
@click.option(
    "--image",
    "images",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help=f"Photo to attach (repeatable, at most {MAX_IMAGES}).",
)
@click.option("--lat", "latitude", type=float, default=None, help="Latitude of the issue.")
@click.option("--lng", "longitude", type=float, default=None, help="Longitude of the issue.")
@click.option("--address", default=None, help="Street address or landmark.")
@click.pass_context
def submit_cmd(
    ctx,
    title: str,
    description: str,
    category: str,
    images: tuple[str, ...],
    latitude: float | None,
    longitude: float | None,
    address: str | None,
):
    """Report a new issue.

    Photos are uploaded first; if any upload fails nothing is saved and the
    whole submission can be retried.
    """
    from cleantrack_cli.cli import _build_uploader

    session = require_session(ctx)
    location = None
    if latitude is not None or longitude is not None or address:
        location = Location(latitude=latitude, longitude=longitude, address=address)

    uploader = _build_uploader(ctx.obj["config"]) if images else None

    try:
        with console.status("Submitting complaint..."):
            complaint_id = submit_complaint(
                get_workflow(ctx),
                uploader,
                session,
                title,
                description,
                category,
                images=list(images),
                location=location,
            )
    except ValidationError as e:
        raise click.UsageError(str(e))
    except UploadError as e:
        raise click.ClickException(f"Submission failed: could not upload images ({e}). Nothing was saved; please try again.")
    except StoreError as e:
        raise click.ClickException(f"Submission failed: {e}. Please try again.")

    console.print(f"[green]Complaint submitted.[/green] Track it with: [bold]cleantrack show {complaint_id}[/bold]")
