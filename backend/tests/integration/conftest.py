"""Fixtures shared by the HTTP-level tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from tests.factories.user import UserFactory


@pytest.fixture()
def bare_client(app, db):
    """Test client without a cookie jar; credentials travel explicitly."""
    return app.test_client(use_cookies=False)


@pytest.fixture()
def ana(db):
    """A persisted user, reduced to plain values so it survives session removal."""
    user = UserFactory(username="ana", email="ana@x.io", raw_password="secret1")
    return SimpleNamespace(id=user.id, username="ana", email="ana@x.io", password="secret1")


@pytest.fixture()
def login(bare_client, ana):
    """Log ``ana`` in and return the response body's ``data``."""

    def _login(password: str = "secret1") -> dict:
        response = bare_client.post(
            "/api/v1/users/login", json={"username": ana.username, "password": password}
        )
        assert response.status_code == 200, response.get_json()
        return response.get_json()["data"]

    return _login
