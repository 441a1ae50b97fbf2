"""Authentication helpers for tests."""

from __future__ import annotations

from accounts_api.core.config import TokenSettings
from accounts_api.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from freezegun import freeze_time


def bearer(token: str) -> dict[str, str]:
    """Return an ``Authorization`` header for ``token``."""

    return {"Authorization": f"Bearer {token}"}


def expired_access_token(codec: PyJWTTokenCodec, identity: int) -> str:
    """Return an access token for ``identity`` whose ``exp`` lies in the past.

    Parameters
    ----------
    codec:
        Codec holding the application's secrets.
    identity:
        Subject identifier to encode in the token.
    """

    with freeze_time("2020-01-01"):
        return codec.issue_access_token(identity).token


def foreign_codec(codec: PyJWTTokenCodec) -> PyJWTTokenCodec:
    """Return a codec with the same lifetimes but unrelated secrets."""

    settings = codec.settings
    return PyJWTTokenCodec(
        settings=TokenSettings(
            access_secret="someone-elses-access-secret-0123456789",
            refresh_secret="someone-elses-refresh-secret-0123456789",
            access_ttl=settings.access_ttl,
            refresh_ttl=settings.refresh_ttl,
            algorithm=settings.algorithm,
            issuer=settings.issuer,
        )
    )
