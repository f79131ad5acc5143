"""Base uploader implementing the Template Method pattern.

All backends share the same upload algorithm:
    upload_all() → upload() for each reference, in order
                 → _upload_with_retry() → _upload_once()   ← only this differs per backend

Subclasses implement two things only:
  - __init__: validate and store the SDK client or settings
  - _upload_once: make one raw upload attempt and return the URL
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Iterable

from cleantrack_core.errors import UploadError

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3


class BaseUploader(ABC):
    MAX_RETRIES: int = _MAX_RETRIES

    def __init__(self, max_retries: int | None = None):
        if max_retries is not None:
            self.MAX_RETRIES = max(1, max_retries)

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def upload(self, reference: str) -> str:
        """Upload one local image and return its durable URL.

        Raises UploadError once every attempt has failed.
        """
        return self._upload_with_retry(reference)

    def upload_all(self, references: Iterable[str]) -> list[str]:
        """Upload images one at a time, returning URLs in input order.

        The first failure aborts the batch: a submission either gets every
        image or none of its URLs are used.
        """
        urls = []
        for index, reference in enumerate(references):
            urls.append(self.upload(reference))
            logger.debug("Uploaded image %d: %s", index + 1, urls[-1])
        return urls

    # ------------------------------------------------------------------ #
    # Abstract — implement in each backend                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _upload_once(self, reference: str) -> str:
        """Make a single upload attempt and return the URL.

        Raise UploadError for a definitive rejection. Any other exception is
        treated as transient and retried by _upload_with_retry.
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _upload_with_retry(self, reference: str) -> str:
        """Retry _upload_once up to MAX_RETRIES times with exponential backoff.

        UploadError raised by the backend is final and propagates at once.
        """
        for attempt in range(self.MAX_RETRIES):
            try:
                return self._upload_once(reference)
            except UploadError:
                # Definitive rejection from the backend.
                raise
            except Exception as e:
                if attempt == self.MAX_RETRIES - 1:
                    logger.error(
                        "%s upload of %s failed after %d attempts: %s",
                        self.__class__.__name__,
                        reference,
                        self.MAX_RETRIES,
                        e,
                    )
                    raise UploadError(f"Image upload failed: {e}") from e
                delay = 2**attempt
                logger.warning(
                    "%s upload error (attempt %d/%d): %s. Retrying in %ds...",
                    self.__class__.__name__,
                    attempt + 1,
                    self.MAX_RETRIES,
                    e,
                    delay,
                )
                time.sleep(delay)
        raise UploadError(f"Image upload failed: {reference}")
