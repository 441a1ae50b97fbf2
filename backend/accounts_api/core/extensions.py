"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import Any

from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from accounts_api.core.config import TokenSettings

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

TOKEN_CODEC_KEY = "token_codec"
PASSWORD_HASHER_KEY = "password_hasher"
MEDIA_UPLOADER_KEY = "media_uploader"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations and the auth collaborators.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. Token settings are
        validated here so a misconfigured deployment fails at start-up rather
        than on the first login.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from accounts_api import models as _models  # noqa: F401

    migrate.init_app(app, db)

    from accounts_api.infra.cloudinary.cloudinary_media_uploader import CloudinaryMediaUploader
    from accounts_api.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
    from accounts_api.security.passwords import PasswordHasher

    settings = TokenSettings.from_mapping(app.config)
    app.extensions[TOKEN_CODEC_KEY] = PyJWTTokenCodec(settings=settings)
    app.extensions[PASSWORD_HASHER_KEY] = PasswordHasher(
        method=app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    )
    app.extensions.setdefault(MEDIA_UPLOADER_KEY, CloudinaryMediaUploader.from_config(app.config))


def get_extension(key: str) -> Any:
    """Return a collaborator registered on the current app."""
    try:
        return current_app.extensions[key]
    except KeyError as exc:
        raise RuntimeError(f"Extension {key!r} is not initialized. Call init_app() first.") from exc
