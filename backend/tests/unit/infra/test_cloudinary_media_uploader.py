"""Unit tests for CloudinaryMediaUploader with the SDK call monkeypatched."""

from __future__ import annotations

import cloudinary.uploader
import pytest
from accounts_api.infra.cloudinary.cloudinary_media_uploader import CloudinaryMediaUploader


@pytest.fixture()
def uploader() -> CloudinaryMediaUploader:
    return CloudinaryMediaUploader(
        cloud_name="demo", api_key="key", api_secret="secret", folder="avatars"
    )


@pytest.fixture()
def image(tmp_path):
    path = tmp_path / "a.png"
    path.write_bytes(b"x")
    return path


def test_upload_returns_secure_url(monkeypatch, uploader, image):
    calls = []

    def fake_upload(file, **options):
        calls.append((file, options))
        return {"secure_url": "https://res.cloudinary.com/demo/a.png", "public_id": "avatars/a"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)

    media = uploader.upload(image)

    assert media.url == "https://res.cloudinary.com/demo/a.png"
    assert media.public_id == "avatars/a"
    assert calls == [(str(image), {"resource_type": "auto", "folder": "avatars"})]


def test_sdk_failure_returns_none(monkeypatch, uploader, image):
    def boom(file, **options):
        raise RuntimeError("network down")

    monkeypatch.setattr(cloudinary.uploader, "upload", boom)

    assert uploader.upload(image) is None


def test_response_without_url_returns_none(monkeypatch, uploader, image):
    monkeypatch.setattr(cloudinary.uploader, "upload", lambda file, **options: {})

    assert uploader.upload(image) is None


def test_missing_file_skips_sdk(monkeypatch, uploader, tmp_path):
    def unexpected(file, **options):
        raise AssertionError("SDK must not be called")

    monkeypatch.setattr(cloudinary.uploader, "upload", unexpected)

    assert uploader.upload(tmp_path / "absent.png") is None


def test_unconfigured_skips_sdk(monkeypatch, image):
    def unexpected(file, **options):
        raise AssertionError("SDK must not be called")

    monkeypatch.setattr(cloudinary.uploader, "upload", unexpected)

    assert CloudinaryMediaUploader(cloud_name=None, api_key=None, api_secret=None).upload(image) is None


def test_from_config():
    uploader = CloudinaryMediaUploader.from_config(
        {
            "CLOUDINARY_CLOUD_NAME": "demo",
            "CLOUDINARY_API_KEY": "key",
            "CLOUDINARY_API_SECRET": "secret",
            "CLOUDINARY_FOLDER": "",
        }
    )

    assert uploader.configured
    assert uploader.folder is None
