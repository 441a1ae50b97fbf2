"""Unit tests for the PyJWT token codec."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from accounts_api.core.config import TokenSettings
from accounts_api.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from accounts_api.services._shared.ports import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenClass,
    TokenError,
    TokenExpiredError,
)
from freezegun import freeze_time

ACCESS_SECRET = "unit-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-secret-0123456789abcdef"


@pytest.fixture()
def settings() -> TokenSettings:
    return TokenSettings(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=10),
    )


@pytest.fixture()
def codec(settings) -> PyJWTTokenCodec:
    return PyJWTTokenCodec(settings=settings)


class TestIssueAndVerify:
    def test_access_token_round_trip(self, codec):
        issued = codec.issue_access_token(42)

        claims = codec.verify(issued.token, TokenClass.ACCESS)

        assert claims.subject == "42"
        assert claims.token_class is TokenClass.ACCESS
        assert claims.expires_at == issued.expires_at

    def test_refresh_token_round_trip(self, codec):
        issued = codec.issue_refresh_token(7)

        claims = codec.verify(issued.token, TokenClass.REFRESH)

        assert claims.subject == "7"
        assert claims.token_class is TokenClass.REFRESH

    def test_lifetimes_follow_settings(self, codec):
        with freeze_time("2024-01-01 12:00:00"):
            access = codec.issue_access_token(1)
            refresh = codec.issue_refresh_token(1)

        start = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        assert access.expires_at == start + timedelta(minutes=15)
        assert refresh.expires_at == start + timedelta(days=10)

    def test_tokens_issued_in_same_second_differ(self, codec):
        with freeze_time("2024-01-01 12:00:00"):
            first = codec.issue_refresh_token(1)
            second = codec.issue_refresh_token(1)

        assert first.token != second.token


class TestRejections:
    def test_refresh_token_fails_as_access(self, codec):
        refresh = codec.issue_refresh_token(1).token

        with pytest.raises(InvalidSignatureError):
            codec.verify(refresh, TokenClass.ACCESS)

    def test_access_token_fails_as_refresh(self, codec):
        access = codec.issue_access_token(1).token

        with pytest.raises(InvalidSignatureError):
            codec.verify(access, TokenClass.REFRESH)

    def test_expired_access_token(self, codec):
        with freeze_time("2024-01-01 12:00:00"):
            token = codec.issue_access_token(1).token

        with freeze_time("2024-01-01 12:16:00"), pytest.raises(TokenExpiredError):
            codec.verify(token, TokenClass.ACCESS)

    def test_access_token_valid_just_before_expiry(self, codec):
        with freeze_time("2024-01-01 12:00:00"):
            token = codec.issue_access_token(1).token

        with freeze_time("2024-01-01 12:14:59"):
            assert codec.verify(token, TokenClass.ACCESS).subject == "1"

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c", None])
    def test_malformed_tokens(self, codec, garbage):
        with pytest.raises(MalformedTokenError):
            codec.verify(garbage, TokenClass.ACCESS)

    def test_type_claim_must_match(self, codec, settings):
        now = datetime.now(UTC)
        forged = jwt.encode(
            {
                "sub": "1",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(minutes=5)).timestamp()),
                "jti": "x",
                "type": "refresh",
                "iss": settings.issuer,
            },
            ACCESS_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(MalformedTokenError):
            codec.verify(forged, TokenClass.ACCESS)

    def test_missing_jti_is_malformed(self, codec, settings):
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "1",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(minutes=5)).timestamp()),
                "type": "access",
                "iss": settings.issuer,
            },
            ACCESS_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(MalformedTokenError):
            codec.verify(token, TokenClass.ACCESS)

    def test_every_failure_is_a_token_error(self, codec):
        with pytest.raises(TokenError):
            codec.verify("nope", TokenClass.REFRESH)
