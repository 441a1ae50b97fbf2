"""Tests for the error envelope and domain error translation."""

from __future__ import annotations

import pytest
from accounts_api.core import errors as api_errors
from accounts_api.services._shared.base import BaseService
from accounts_api.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    ValidationFailedError,
)

from tests.helpers.assertions import assert_error_envelope


def test_error_envelope_shape():
    assert api_errors.error_envelope(status=404, message="User does not exist") == {
        "statusCode": 404,
        "message": "User does not exist",
        "success": False,
        "errors": [],
    }


@pytest.mark.parametrize(
    "exc,status,message",
    [
        (ValidationFailedError("All fields are required"), 400, "All fields are required"),
        (InvalidCredentialsError(), 401, "Invalid credentials"),
        (UnauthorizedError(), 401, "Unauthorized request"),
        (NotFoundError("User", 3), 404, "User does not exist"),
        (ConflictError("User", "email already in use"), 409, "User email already in use"),
        (ServiceError("odd"), 400, "odd"),
    ],
)
def test_translate_exceptions(exc, status, message):
    translated = BaseService.translate_exceptions(exc)

    assert isinstance(translated, api_errors.APIError)
    assert translated.status_code == status
    assert translated.message == message


def test_translate_passes_through_foreign_exceptions():
    exc = KeyError("x")
    assert BaseService.translate_exceptions(exc) is exc


def test_validation_errors_are_carried():
    translated = BaseService.translate_exceptions(
        ValidationFailedError("bad", errors=[{"field": "email", "message": "x"}])
    )
    assert translated.to_envelope()["errors"] == [{"field": "email", "message": "x"}]


def test_unknown_route_renders_envelope(client):
    body = assert_error_envelope(client.get("/api/v1/nope"), 404)
    assert body["message"] == "Route '/api/v1/nope' not found"


def test_method_not_allowed_renders_envelope(client):
    assert_error_envelope(client.get("/api/v1/users/login"), 405)


def test_schema_errors_list_fields(client):
    body = assert_error_envelope(client.post("/api/v1/users/change-password", json={}), 401)
    assert body["errors"] == []

    resp = client.post("/api/v1/users/login", json={"username": "ana"})
    body = assert_error_envelope(resp, 400)
    assert body["message"] == "Validation failed"
    assert {"field": "password", "message": "Missing data for required field."} in body["errors"]
