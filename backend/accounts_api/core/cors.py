"""CORS configuration for cookie-carrying API clients."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def init_app(app: Flask) -> None:
    """Configure CORS for API endpoints based on ``CORS_ORIGINS``.

    Token cookies only travel cross-origin when credentials are allowed, and
    browsers refuse credentials together with a wildcard origin. A blank or
    ``"*"`` setting therefore allows any origin but without cookies, so such
    clients must send the ``Authorization`` header instead.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
