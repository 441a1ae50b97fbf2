from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


class TokenClass(str, Enum):
    """The two bearer-token classes, each signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    Freshly signed token.

    :ivar token: Encoded compact JWS.
    :ivar expires_at: Absolute expiry (UTC).
    """

    token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified claims set.

    :ivar subject: Identity id the token was issued for (``sub``).
    :ivar issued_at: ``iat`` as an aware UTC datetime.
    :ivar expires_at: ``exp`` as an aware UTC datetime.
    :ivar jti: Unique token id.
    :ivar token_class: Class the token was verified against.
    """

    subject: str
    issued_at: datetime
    expires_at: datetime
    jti: str
    token_class: TokenClass


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidSignatureError(TokenError):
    """Signature does not match the secret of the requested token class."""


class TokenExpiredError(TokenError):
    """``exp`` is in the past."""


class MalformedTokenError(TokenError):
    """Not a decodable token, or required claims are missing/wrong."""


class TokenCodec(Protocol):
    """Port for issuing and verifying access and refresh tokens."""

    def issue_access_token(self, identity_id: int | str) -> IssuedToken: ...

    def issue_refresh_token(self, identity_id: int | str) -> IssuedToken: ...

    def verify(self, token: str, token_class: TokenClass) -> TokenClaims: ...
