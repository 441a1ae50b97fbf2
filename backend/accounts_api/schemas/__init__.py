"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import ChangePasswordSchema, LoginSchema, RefreshSchema, TokenPairSchema
from .user import RegisterSchema, UpdateAccountSchema, UserSchema

__all__ = [
    "ChangePasswordSchema",
    "LoginSchema",
    "RefreshSchema",
    "TokenPairSchema",
    "RegisterSchema",
    "UpdateAccountSchema",
    "UserSchema",
]
