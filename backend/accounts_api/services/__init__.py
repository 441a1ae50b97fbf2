"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`accounts_api.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``accounts_api.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Identity service (from ``accounts_api.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`RegisterIn`, :class:`UpdateAccountIn`, :class:`UserPublicOut`

- Session manager (from ``accounts_api.services.sessions``)
    * :class:`SessionManager`
    * DTOs: :class:`LoginIn`, :class:`LoginOut`, :class:`RefreshIn`,
      :class:`TokenPairOut`, :class:`ChangePasswordIn`

- Media (from ``accounts_api.services.media``)
    * :class:`MediaService`, :func:`staged_file`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Identity service + DTOs
from .identity.dto import RegisterIn, UpdateAccountIn, UserPublicOut
from .identity.service import IdentityService

# Media
from .media import MediaService, staged_file

# Session manager + DTOs
from .sessions import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    RefreshIn,
    SessionManager,
    TokenPairOut,
)

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Identity
    "IdentityService",
    "RegisterIn",
    "UpdateAccountIn",
    "UserPublicOut",
    # Media
    "MediaService",
    "staged_file",
    # Sessions
    "SessionManager",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "TokenPairOut",
    "ChangePasswordIn",
]
