"""
accounts_api.services._shared.ports
===================================

*Ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec` : signs and verifies access/refresh tokens, plus the
    :class:`~.TokenError` family raised on verification failure.

- :mod:`media_uploader`:
    :class:`~.MediaUploader` : opaque file-object storage collaborator, and
    :class:`~.StubMediaUploader` for tests.

Concrete adapters live under ``accounts_api.infra``.
"""

from __future__ import annotations

from .media_uploader import MediaUploader, StubMediaUploader, UploadedMedia
from .token_codec import (
    InvalidSignatureError,
    IssuedToken,
    MalformedTokenError,
    TokenClaims,
    TokenClass,
    TokenCodec,
    TokenError,
    TokenExpiredError,
)

__all__ = [
    "TokenCodec",
    "TokenClass",
    "TokenClaims",
    "IssuedToken",
    "TokenError",
    "InvalidSignatureError",
    "TokenExpiredError",
    "MalformedTokenError",
    "MediaUploader",
    "StubMediaUploader",
    "UploadedMedia",
]
