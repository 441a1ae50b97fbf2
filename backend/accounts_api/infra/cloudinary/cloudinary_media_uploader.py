# accounts_api/infra/cloudinary/cloudinary_media_uploader.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import cloudinary
import cloudinary.uploader

from accounts_api.services._shared.ports import MediaUploader, UploadedMedia

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CloudinaryMediaUploader(MediaUploader):
    """
    Upload local files to Cloudinary.

    Failures never raise: the uploader logs and returns ``None`` so the
    caller decides whether the missing asset is fatal (avatar) or not
    (cover image).
    """

    cloud_name: str | None
    api_key: str | None
    api_secret: str | None
    folder: str | None = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> CloudinaryMediaUploader:
        return cls(
            cloud_name=config.get("CLOUDINARY_CLOUD_NAME"),
            api_key=config.get("CLOUDINARY_API_KEY"),
            api_secret=config.get("CLOUDINARY_API_SECRET"),
            folder=config.get("CLOUDINARY_FOLDER") or None,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload(self, local_path: str | Path) -> UploadedMedia | None:
        path = Path(local_path)
        if not path.is_file():
            log.warning("Upload skipped, file missing: %s", path.name, extra={"event": "media.missing"})
            return None
        if not self.configured:
            log.warning("Cloudinary credentials are not configured", extra={"event": "media.unconfigured"})
            return None

        cloudinary.config(
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            secure=True,
        )
        try:
            result = cloudinary.uploader.upload(
                str(path),
                resource_type="auto",
                folder=self.folder,
            )
        except Exception:
            log.exception("Cloudinary upload failed", extra={"event": "media.upload_failed"})
            return None

        url = result.get("secure_url") or result.get("url")
        if not url:
            log.warning("Cloudinary returned no URL", extra={"event": "media.upload_failed"})
            return None
        log.info("Uploaded %s", path.name, extra={"event": "media.uploaded"})
        return UploadedMedia(url=url, public_id=result.get("public_id"))
