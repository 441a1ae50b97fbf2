"""DTOs for the session lifecycle (login / refresh / logout / password)."""

from __future__ import annotations

from dataclasses import dataclass

from accounts_api.services._shared.ports import IssuedToken
from accounts_api.services.identity.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    Username, email or both may be given; a user matching either is selected.

    :param password: Raw password (to be verified).
    :type password: str
    :param username: Username, matched after lowercase/trim.
    :type username: str | None
    :param email: Email, matched after lowercase/trim.
    :type email: str | None
    """

    password: str
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh token, ``None`` when the client sent none.
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    user_id: int
    old_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with freshly issued access and refresh tokens.

    :param access_token: Access token and its expiry.
    :type access_token: IssuedToken
    :param refresh_token: Refresh token and its expiry.
    :type refresh_token: IssuedToken
    """

    access_token: IssuedToken
    refresh_token: IssuedToken


@dataclass(frozen=True, slots=True)
class LoginOut:
    """Public identity plus the token pair issued at login."""

    user: UserPublicOut
    access_token: IssuedToken
    refresh_token: IssuedToken
