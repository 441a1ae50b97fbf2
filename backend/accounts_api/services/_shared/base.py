# accounts_api/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass

from accounts_api.core import errors as api_errors
from accounts_api.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    ValidationFailedError,
)
from accounts_api.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated identity id, when known.
    :param request_id: Correlation id for logging.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services must never touch the global session; always use a Unit of Work.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work (commits on clean exit).

        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work (always rolls back).

        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to the API error type.

        :param exc: Exception raised within the service.
        :returns: Translated exception ready to be re-raised, or ``exc``
            untouched when it is not a domain error.
        """
        if isinstance(exc, ValidationFailedError):
            return api_errors.BadRequest(str(exc), errors=exc.errors)

        if isinstance(exc, InvalidCredentialsError):
            return api_errors.InvalidCredentials(str(exc))

        if isinstance(exc, UnauthorizedError):
            return api_errors.Unauthorized(str(exc))

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            conflict = api_errors.Conflict(str(exc))
            conflict.errors = list(exc.errors)
            return conflict

        # Any other ServiceError subclass → 400
        if isinstance(exc, ServiceError):
            return api_errors.BadRequest(str(exc))

        return exc
