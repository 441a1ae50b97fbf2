"""Repository package exposing persistence-layer access."""

from __future__ import annotations

from accounts_api.repositories.base import BaseRepository
from accounts_api.repositories.user import UserRepository

__all__ = ["BaseRepository", "UserRepository"]
