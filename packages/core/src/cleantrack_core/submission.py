"""Submission flow: validate the form, upload images, then create the complaint.

Uploads happen before anything is written, so an UploadError leaves no
partial complaint behind and the user can resubmit with the same images.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from cleantrack_core.errors import ValidationError
from cleantrack_core.models import MAX_IMAGES, Category, ComplaintInput, Location

if TYPE_CHECKING:
    from cleantrack_core.session import Session
    from cleantrack_core.uploader.base import BaseUploader
    from cleantrack_core.workflow import ComplaintWorkflow

logger = logging.getLogger(__name__)


def validate_submission(title: str | None, description: str | None, category: str | None) -> tuple[str, str, Category]:
    """Check the submission form and return trimmed title, description and the category."""
    title = (title or "").strip()
    description = (description or "").strip()
    if not title:
        raise ValidationError("Please enter a title for your complaint.")
    if not description:
        raise ValidationError("Please describe the issue in detail.")
    if not category:
        raise ValidationError("Please select a category.")
    try:
        return title, description, Category(category)
    except ValueError:
        choices = ", ".join(c.value for c in Category)
        raise ValidationError(f"Unknown category {category!r}. Choose one of: {choices}.")


def submit_complaint(
    workflow: ComplaintWorkflow,
    uploader: BaseUploader | None,
    session: Session,
    title: str,
    description: str,
    category: str,
    images: Sequence[str] = (),
    location: Location | None = None,
) -> str:
    """Run the full submission and return the new complaint id."""
    title, description, resolved_category = validate_submission(title, description, category)
    if len(images) > MAX_IMAGES:
        raise ValidationError(f"You can attach at most {MAX_IMAGES} images.")

    image_urls: list[str] = []
    if images:
        if uploader is None:
            raise ValidationError("Image uploads are not configured; submit without images or set up Cloudinary.")
        image_urls = uploader.upload_all(images)

    complaint_id = workflow.create(
        ComplaintInput(
            title=title,
            description=description,
            category=resolved_category,
            images=image_urls,
            location=location,
            user_id=session.user_id,
            user_name=session.submitter_name,
        )
    )
    logger.info("Complaint %s submitted with %d image(s)", complaint_id, len(image_urls))
    return complaint_id
