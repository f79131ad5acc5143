"""Error taxonomy shared by the workflow and its callers.

NotFound and StoreUnavailable originate in the store layer and are
re-exported here so callers only need one import.
"""

from __future__ import annotations

from cleantrack_store.errors import NotFound, StoreError, StoreUnavailable

__all__ = [
    "CleanTrackError",
    "NotFound",
    "PartialUpdateError",
    "StoreError",
    "StoreUnavailable",
    "UploadError",
    "ValidationError",
]


class CleanTrackError(Exception):
    """Base class for errors raised by cleantrack_core."""


class UploadError(CleanTrackError):
    """An image could not be uploaded; the submission must be aborted."""


class ValidationError(CleanTrackError):
    """Submitted form data is incomplete. The message is shown to the user as-is."""


class PartialUpdateError(CleanTrackError):
    """A multi-step admin update failed after some steps were applied.

    ``applied`` lists the steps that went through ("status", "priority");
    nothing is rolled back.
    """

    def __init__(self, applied: list[str], failed_step: str, cause: Exception):
        super().__init__(f"{failed_step} update failed after applying {', '.join(applied) or 'nothing'}: {cause}")
        self.applied = applied
        self.failed_step = failed_step
        self.cause = cause
