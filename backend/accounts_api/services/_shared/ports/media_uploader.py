from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True, slots=True)
class UploadedMedia:
    """
    Result of a successful upload.

    :ivar url: Public URL of the stored asset.
    :ivar public_id: Provider-side identifier, when the provider returns one.
    """

    url: str
    public_id: str | None = None


class MediaUploader(Protocol):
    """Port for the file-object storage collaborator.

    Implementations receive a local file path and return the stored asset, or
    ``None`` when the upload failed. Deleting the local file is the caller's
    job (see :func:`accounts_api.services.media.service.staged_file`).
    """

    def upload(self, local_path: str | Path) -> UploadedMedia | None: ...


@dataclass
class StubMediaUploader(MediaUploader):
    """Deterministic in-memory uploader used in tests.

    :ivar fail: When ``True`` every upload returns ``None``.
    :ivar fail_names: File names (basename) whose upload returns ``None``.
    :ivar uploaded: Basenames of the files uploaded so far, in order.
    """

    base_url: str = "https://media.example.test"
    fail: bool = False
    fail_names: set[str] = field(default_factory=set)
    uploaded: list[str] = field(default_factory=list)

    def upload(self, local_path: str | Path) -> UploadedMedia | None:
        name = Path(local_path).name
        if self.fail or name in self.fail_names:
            return None
        if not Path(local_path).is_file():
            return None
        self.uploaded.append(name)
        return UploadedMedia(url=f"{self.base_url}/{name}", public_id=name)
