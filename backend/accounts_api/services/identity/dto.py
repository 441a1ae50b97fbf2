"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts. Credential fields (password digest,
refresh token) never appear on an output DTO.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from accounts_api.models.user import User

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for user registration.

    :param username: Public handle (stored lowercase).
    :type username: str
    :param email: Login email (normalized to lowercase).
    :type email: str
    :param full_name: Display name.
    :type full_name: str
    :param password: Raw password to be hashed by the repository.
    :type password: str
    """

    username: str
    email: str
    full_name: str
    password: str


@dataclass(frozen=True, slots=True)
class UpdateAccountIn:
    """
    Input DTO for updating account details. Both fields are required.

    :param user_id: User identifier.
    :type user_id: int
    :param full_name: New display name.
    :type full_name: str
    :param email: New email.
    :type email: str
    """

    user_id: int
    full_name: str
    email: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Output DTO representing public-safe user data.

    :param id: User identifier.
    :param username: Username.
    :param email: Email address.
    :param full_name: Display name.
    :param avatar_url: Avatar URL.
    :param cover_image_url: Cover image URL, empty when absent.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar_url=user.avatar_url,
            cover_image_url=user.cover_image_url or "",
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
