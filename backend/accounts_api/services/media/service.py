"""
Media staging and upload.

Incoming files are written to a local temp directory first, handed to the
configured :class:`MediaUploader`, and removed afterwards whatever the outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path

from accounts_api.services._shared.ports import MediaUploader, UploadedMedia

log = logging.getLogger(__name__)


@contextmanager
def staged_file(path: str | Path | None) -> Iterator[Path | None]:
    """
    Yield ``path`` and delete the file on exit, on success and on failure.

    ``None`` passes through untouched. A file already gone is not an error.
    """
    staged = Path(path) if path is not None else None
    try:
        yield staged
    finally:
        if staged is not None:
            with suppress(FileNotFoundError):
                staged.unlink()


class MediaService:
    """Upload staged files through a :class:`MediaUploader`."""

    def __init__(self, *, uploader: MediaUploader) -> None:
        self.uploader = uploader

    def upload(self, path: str | Path | None) -> UploadedMedia | None:
        """
        Upload the file at ``path`` and always remove the local copy.

        :returns: The stored asset, or ``None`` when ``path`` is ``None`` or
            the uploader failed.
        """
        with staged_file(path) as staged:
            if staged is None:
                return None
            media = self.uploader.upload(staged)
            if media is None:
                log.warning("Media upload returned nothing", extra={"event": "media.upload_failed"})
            return media
