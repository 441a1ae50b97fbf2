"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask or HTTP
helpers. The translation to the HTTP error envelope is handled by
``accounts_api/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint to match (e.g. ``"uq_users_email"``).
    :returns: ``True`` if the driver message names the constraint or,
        for SQLite, the constrained column.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # SQLite reports "UNIQUE constraint failed: users.email"
    column = constraint_name.lower().removeprefix("uq_").replace("_", ".", 1)
    return column in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them into ``APIError`` instances.
    """


class ValidationFailedError(ServiceError):
    """Missing or malformed input, including a failed mandatory media upload."""

    def __init__(self, message: str, errors: list[Any] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class InvalidCredentialsError(ServiceError):
    """A supplied password does not match the stored digest."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class UnauthorizedError(ServiceError):
    """
    A token is missing, invalid, expired, stale or mismatched.

    Causes are deliberately not distinguished in the message.
    """

    def __init__(self, message: str = "Unauthorized request") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} does not exist"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str
    errors: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.entity} {self.detail}"
