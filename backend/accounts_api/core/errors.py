"""Centralized JSON error handling producing the standard error envelope.

Every failure leaving a request is rendered as::

    {"statusCode": 401, "message": "...", "success": false, "errors": []}

Internal details (tracebacks, driver messages) are logged, never returned.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from accounts_api.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "validation_error",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        429: "too_many_requests",
        500: "internal_error",
    }
    return mapping.get(status_code, "error")


def error_envelope(
    *,
    status: int,
    message: str,
    errors: list[Any] | None = None,
) -> dict[str, Any]:
    """
    Build the error envelope.

    :param status: HTTP status code.
    :param message: Human-readable summary, safe for clients.
    :param errors: Optional list of structured, client-safe details.
    :returns: Envelope dictionary.
    """
    return {
        "statusCode": int(status),
        "message": message,
        "success": False,
        "errors": list(errors or []),
    }


def _envelope_response(envelope: dict[str, Any]) -> tuple[Response, int]:
    return jsonify(envelope), envelope["statusCode"]


class APIError(Exception):
    """
    The single structured error type surfaced to HTTP clients.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier used in logs. Defaults to
        ``"validation_error"``.
    errors : list[Any] | None, optional
        Structured details (e.g. field messages) copied into ``errors``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "validation_error",
        errors: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.errors = errors or []

    def to_envelope(self) -> dict[str, Any]:
        """Serialize into the standard error envelope."""
        return error_envelope(status=self.status_code, message=self.message, errors=self.errors)


class BadRequest(APIError):
    """400 for missing or malformed input."""

    def __init__(self, message: str = "Bad request", errors: list[Any] | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="validation_error", errors=errors)


class InvalidCredentials(APIError):
    """401 when a password does not match."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="invalid_credentials")


class Unauthorized(APIError):
    """401 when a token is missing, invalid, stale or mismatched."""

    def __init__(self, message: str = "Unauthorized request") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """409 for uniqueness collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


def _flatten_field_errors(messages: Any) -> list[dict[str, Any]]:
    """Turn marshmallow ``{"field": ["msg"]}`` into a list of ``{field, message}``."""
    if not isinstance(messages, dict):
        return [{"field": None, "message": str(messages)}]
    flattened: list[dict[str, Any]] = []
    for field, msgs in messages.items():
        for msg in msgs if isinstance(msgs, list) else [msgs]:
            flattened.append({"field": field, "message": msg})
    return flattened


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error renders the standard error envelope.
    - Domain ``ServiceError`` instances are translated through
      :meth:`BaseService.translate_exceptions`.
    - 5xx are logged with ``exc_info``; 4xx as warnings.
    """
    from accounts_api.services._shared.base import BaseService
    from accounts_api.services._shared.errors import ServiceError

    def _log_api_error(err: APIError) -> None:
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            ensure_request_id(),
            extra={"event": "api.error", "status": err.status_code},
        )

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log_api_error(err)
        return _envelope_response(err.to_envelope())

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = BaseService.translate_exceptions(err)
        if not isinstance(translated, APIError):
            return handle_unexpected_error(err)
        _log_api_error(translated)
        return _envelope_response(translated.to_envelope())

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _http_status_to_code(status)
        message = (err.description or code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: code=%s status=%s detail=%s request_id=%s",
            code,
            status,
            message,
            ensure_request_id(),
        )
        return _envelope_response(error_envelope(status=status, message=message))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        envelope = error_envelope(
            status=HTTPStatus.BAD_REQUEST,
            message="Validation failed",
            errors=_flatten_field_errors(err.messages),
        )
        return _envelope_response(envelope)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        return _envelope_response(
            error_envelope(status=HTTPStatus.CONFLICT, message="Resource conflict")
        )

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        return _envelope_response(
            error_envelope(status=HTTPStatus.INTERNAL_SERVER_ERROR, message="Internal server error")
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=err)
        return _envelope_response(
            error_envelope(status=HTTPStatus.INTERNAL_SERVER_ERROR, message="Internal server error")
        )
