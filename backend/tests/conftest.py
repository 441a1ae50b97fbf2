"""Pytest fixtures for the accounts API.

The application is built once per session from :class:`TestingConfig`. Every
test gets a fresh schema on the in-memory SQLite database, a stub media
uploader and its own upload temp directory, so nothing leaks between cases
and no test reaches Cloudinary.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest
from accounts_api.core.config import TestingConfig
from accounts_api.core.extensions import MEDIA_UPLOADER_KEY, TOKEN_CODEC_KEY
from accounts_api.core.extensions import db as _db
from accounts_api.factory import create_app
from accounts_api.services._shared.ports import StubMediaUploader


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture()
def db(app):
    """Create the schema for one test and drop it afterwards.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application, inside an
        application context.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db):
    """Return the Flask-scoped session used by the application code."""
    return db.session


@pytest.fixture()
def client(app, db):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def codec(app):
    """The token codec registered on the app."""
    return app.extensions[TOKEN_CODEC_KEY]


@pytest.fixture(autouse=True)
def media_uploader(app) -> StubMediaUploader:
    """Install a fresh in-memory uploader for every test."""
    stub = StubMediaUploader()
    app.extensions[MEDIA_UPLOADER_KEY] = stub
    return stub


@pytest.fixture(autouse=True)
def upload_dir(app, tmp_path):
    """Point ``UPLOAD_TEMP_DIR`` at a per-test directory."""
    target = tmp_path / "uploads"
    previous = app.config["UPLOAD_TEMP_DIR"]
    app.config["UPLOAD_TEMP_DIR"] = str(target)
    yield target
    app.config["UPLOAD_TEMP_DIR"] = previous


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory


# -- Hook up Factory Boy to the application session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "db" in request.fixturenames or "session" in request.fixturenames or "client" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
