from accounts_api.services.sessions.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPairOut,
)
from accounts_api.services.sessions.service import SessionManager

__all__ = [
    "ChangePasswordIn",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "SessionManager",
    "TokenPairOut",
]
