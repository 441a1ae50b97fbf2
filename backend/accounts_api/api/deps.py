"""Shared API helpers: response envelope, auth guard, cookies and uploads."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

from flask import Response, current_app, g, jsonify, request
from werkzeug.utils import secure_filename

from accounts_api.core.extensions import MEDIA_UPLOADER_KEY, TOKEN_CODEC_KEY, get_extension
from accounts_api.core.logger import ensure_request_id
from accounts_api.services import (
    IdentityService,
    MediaService,
    ServiceContext,
    SessionManager,
    UserPublicOut,
)
from accounts_api.services._shared.ports import IssuedToken

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


# ------------------------------ Envelope -------------------------------------


def success_response(data: Any = None, message: str = "Success", *, status: int = 200) -> Response:
    """Return ``{statusCode, data, message, success}`` as JSON."""

    response = jsonify(
        {
            "statusCode": status,
            "data": data if data is not None else {},
            "message": message,
            "success": status < 400,
        }
    )
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": getattr(request, "endpoint", None), "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------ Services -------------------------------------


def service_context() -> ServiceContext:
    user = g.get("current_user")
    return ServiceContext(actor_id=user.id if user else None, request_id=ensure_request_id())


def get_session_manager() -> SessionManager:
    return SessionManager(codec=get_extension(TOKEN_CODEC_KEY), ctx=service_context())


def get_identity_service() -> IdentityService:
    media = MediaService(uploader=get_extension(MEDIA_UPLOADER_KEY))
    return IdentityService(media=media, ctx=service_context())


# ------------------------------ Auth guard -----------------------------------


def extract_access_token() -> str | None:
    """Return the access token from the cookie, else from ``Authorization: Bearer``."""

    cookie_name = current_app.config.get("ACCESS_TOKEN_COOKIE", "accessToken")
    token = request.cookies.get(cookie_name)
    if token:
        return token

    scheme, _, value = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def require_auth(func: F) -> F:
    """Resolve the access token into ``g.current_user`` or answer 401.

    ``g.current_user`` is only set once the token verified and the identity
    was found.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_access_token()
        g.current_user = get_session_manager().authenticate_access_token(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user() -> UserPublicOut:
    return g.current_user


# ------------------------------ Cookies --------------------------------------


def _cookie_kwargs() -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": bool(current_app.config.get("SESSION_COOKIE_SECURE_FLAG", True)),
        "samesite": current_app.config.get("SESSION_COOKIE_SAMESITE_POLICY", "Lax"),
        "path": "/",
    }


def _max_age(ttl: timedelta) -> int:
    return int(ttl.total_seconds())


def set_token_cookies(response: Response, *, access: IssuedToken, refresh: IssuedToken) -> Response:
    """Attach both tokens as HttpOnly cookies living as long as the tokens."""

    settings = get_extension(TOKEN_CODEC_KEY).settings
    config = current_app.config
    response.set_cookie(
        config.get("ACCESS_TOKEN_COOKIE", "accessToken"),
        access.token,
        max_age=_max_age(settings.access_ttl),
        **_cookie_kwargs(),
    )
    response.set_cookie(
        config.get("REFRESH_TOKEN_COOKIE", "refreshToken"),
        refresh.token,
        max_age=_max_age(settings.refresh_ttl),
        **_cookie_kwargs(),
    )
    return response


def clear_token_cookies(response: Response) -> Response:
    config = current_app.config
    for name in (
        config.get("ACCESS_TOKEN_COOKIE", "accessToken"),
        config.get("REFRESH_TOKEN_COOKIE", "refreshToken"),
    ):
        response.delete_cookie(name, **_cookie_kwargs())
    return response


# ------------------------------ Uploads --------------------------------------


def save_upload_to_temp(field: str) -> Path | None:
    """Write the multipart file ``field`` under ``UPLOAD_TEMP_DIR``.

    The stored name is random; only the sanitized extension of the client
    filename is kept. Returns ``None`` when the field is absent or empty.
    """

    storage = request.files.get(field)
    if storage is None or not storage.filename:
        return None

    temp_dir = Path(current_app.config.get("UPLOAD_TEMP_DIR", "./public/temp"))
    temp_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(secure_filename(storage.filename)).suffix.lower()
    path = temp_dir / f"{uuid4().hex}{suffix}"
    storage.save(path)
    log.debug("Staged upload %s", field, extra={"event": "media.staged"})
    return path
