from __future__ import annotations

import logging
import time

from cleantrack_core.errors import UploadError
from cleantrack_core.uploader.base import BaseUploader

logger = logging.getLogger(__name__)


def _local_path(reference: str) -> str:
    return reference[len("file://") :] if reference.startswith("file://") else reference


def _mime_type(reference: str) -> str:
    extension = reference.rsplit(".", 1)[-1].lower() if "." in reference else "jpg"
    return "image/png" if extension == "png" else "image/jpeg"


class CloudinaryUploader(BaseUploader):
    """Unsigned uploads to a Cloudinary upload preset.

    Unsigned presets need no API secret on the client, which is why the
    cloud name and preset are all that has to be configured.
    """

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str,
        folder: str = "cleantrack",
        max_retries: int | None = None,
    ):
        super().__init__(max_retries=max_retries)
        try:
            import cloudinary.uploader
        except ImportError:
            raise ImportError(
                "The 'cloudinary' package is required for this uploader. Install it with: pip install cloudinary"
            )
        self._uploader = cloudinary.uploader
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.folder = folder

    def _upload_once(self, reference: str) -> str:
        path = _local_path(reference)
        public_id = f"cleantrack_{int(time.time() * 1000)}"
        logger.debug("Uploading %s (%s) as %s", path, _mime_type(path), public_id)

        response = self._uploader.unsigned_upload(
            path,
            self.upload_preset,
            cloud_name=self.cloud_name,
            folder=self.folder,
            public_id=public_id,
            resource_type="image",
        )
        if response.get("error"):
            raise UploadError(response["error"].get("message", "Cloudinary rejected the upload"))

        url = response.get("secure_url")
        if not url:
            logger.error("Cloudinary response missing secure_url: %s", response)
            raise UploadError("Upload succeeded but no URL was returned")
        return url
