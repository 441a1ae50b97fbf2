# accounts_api/infra/jwt/pyjwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import jwt

from accounts_api.core.config import TokenSettings
from accounts_api.services._shared.ports import (
    InvalidSignatureError,
    IssuedToken,
    MalformedTokenError,
    TokenClaims,
    TokenClass,
    TokenCodec,
    TokenExpiredError,
)

REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti", "type"]


@dataclass(frozen=True, slots=True)
class PyJWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWT codec backed by PyJWT.

    Access and refresh tokens share the algorithm but are signed with
    distinct secrets from :class:`TokenSettings`, so a token of one class
    fails signature verification against the other.

    .. note::
       Pure computation: no I/O and no app context required.
    """

    settings: TokenSettings

    def _secret_for(self, token_class: TokenClass) -> str:
        if token_class is TokenClass.ACCESS:
            return self.settings.access_secret
        return self.settings.refresh_secret

    def _issue(self, identity_id: int | str, token_class: TokenClass) -> IssuedToken:
        now = datetime.now(UTC)
        ttl = self.settings.access_ttl if token_class is TokenClass.ACCESS else self.settings.refresh_ttl
        expires_at = now + ttl
        payload: dict[str, Any] = {
            "sub": str(identity_id),
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            # jti keeps two tokens minted in the same second distinct
            "jti": uuid4().hex,
            "type": token_class.value,
            "iss": self.settings.issuer,
        }
        token = jwt.encode(payload, self._secret_for(token_class), algorithm=self.settings.algorithm)
        return IssuedToken(token=token, expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC))

    def issue_access_token(self, identity_id: int | str) -> IssuedToken:
        return self._issue(identity_id, TokenClass.ACCESS)

    def issue_refresh_token(self, identity_id: int | str) -> IssuedToken:
        return self._issue(identity_id, TokenClass.REFRESH)

    def verify(self, token: str, token_class: TokenClass) -> TokenClaims:
        """
        Verify signature, expiry, issuer and class of ``token``.

        :raises InvalidSignatureError: Wrong secret (including the other class's).
        :raises TokenExpiredError: ``exp`` has passed.
        :raises MalformedTokenError: Undecodable token or bad/missing claims.
        """
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Token must be a non-empty string.")
        try:
            payload = jwt.decode(
                token,
                self._secret_for(token_class),
                algorithms=[self.settings.algorithm],
                issuer=self.settings.issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(str(exc)) from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignatureError(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(str(exc)) from exc

        if payload.get("type") != token_class.value:
            raise MalformedTokenError(f"Expected a {token_class.value} token.")

        try:
            return TokenClaims(
                subject=str(payload["sub"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
                jti=str(payload["jti"]),
                token_class=token_class,
            )
        except (TypeError, ValueError) as exc:
            raise MalformedTokenError("Invalid timestamp claims.") from exc
