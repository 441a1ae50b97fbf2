"""Assertion helper utilities for tests."""

from __future__ import annotations


def assert_json_keys(data: dict, required: set[str]) -> None:
    """Ensure that all required keys are present in ``data``.

    Raises
    ------
    AssertionError
        If any required key is missing.
    """

    missing = required - data.keys()
    assert not missing, f"Missing keys: {', '.join(sorted(missing))}"


def assert_error_envelope(response, status: int) -> dict:
    """Check ``response`` carries the error envelope with ``status``; return the body."""

    assert response.status_code == status
    body = response.get_json()
    assert_json_keys(body, {"statusCode", "message", "success", "errors"})
    assert body["statusCode"] == status
    assert body["success"] is False
    assert isinstance(body["errors"], list)
    return body


def assert_no_credentials(user_json: dict) -> None:
    """Public identity payloads never carry credential material."""

    for key in ("password", "passwordHash", "password_hash", "refreshToken", "refresh_token"):
        assert key not in user_json
