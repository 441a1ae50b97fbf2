"""Tests for configuration classes and token settings."""

from __future__ import annotations

from datetime import timedelta

import pytest
from accounts_api.core.config import (
    ConfigurationError,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    TokenSettings,
    env_bool,
    env_int,
    get_config,
)
from accounts_api.factory import create_app

ACCESS_SECRET = "unit-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-secret-0123456789abcdef"


def _settings(**overrides) -> TokenSettings:
    values = {
        "access_secret": ACCESS_SECRET,
        "refresh_secret": REFRESH_SECRET,
        "access_ttl": timedelta(minutes=15),
        "refresh_ttl": timedelta(days=10),
    }
    values.update(overrides)
    return TokenSettings(**values)


class TestTokenSettings:
    def test_valid_settings(self):
        settings = _settings()
        assert settings.algorithm == "HS256"

    @pytest.mark.parametrize("field", ["access_secret", "refresh_secret"])
    def test_missing_secret(self, field):
        with pytest.raises(ConfigurationError):
            _settings(**{field: ""})

    def test_identical_secrets(self):
        with pytest.raises(ConfigurationError, match="differ"):
            _settings(access_secret="same", refresh_secret="same")

    @pytest.mark.parametrize("field", ["access_secret", "refresh_secret"])
    def test_short_secret(self, field):
        with pytest.raises(ConfigurationError, match="at least 32 bytes"):
            _settings(**{field: "x" * 31})

    def test_secret_length_counts_bytes(self):
        settings = _settings(access_secret="\u00e9" * 16)
        assert settings.access_secret == "\u00e9" * 16

    @pytest.mark.parametrize("field", ["access_ttl", "refresh_ttl"])
    def test_non_positive_ttl(self, field):
        with pytest.raises(ConfigurationError):
            _settings(**{field: timedelta(0)})

    def test_from_mapping(self):
        settings = TokenSettings.from_mapping(
            {
                "ACCESS_TOKEN_SECRET": ACCESS_SECRET,
                "REFRESH_TOKEN_SECRET": REFRESH_SECRET,
                "ACCESS_TOKEN_EXPIRES_MINUTES": "5",
                "REFRESH_TOKEN_EXPIRES_DAYS": 2,
                "JWT_ISSUER": "unit",
            }
        )

        assert settings.access_ttl == timedelta(minutes=5)
        assert settings.refresh_ttl == timedelta(days=2)
        assert settings.issuer == "unit"

    def test_from_mapping_without_secrets(self):
        with pytest.raises(ConfigurationError):
            TokenSettings.from_mapping({})


def test_app_refuses_to_start_without_secrets():
    class NoSecrets(TestingConfig):
        ACCESS_TOKEN_SECRET = None
        REFRESH_TOKEN_SECRET = None

    with pytest.raises(ConfigurationError):
        create_app(NoSecrets)


class TestEnvHelpers:
    @pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("off", False), ("", False)])
    def test_env_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("UNIT_FLAG", raw)
        assert env_bool("UNIT_FLAG") is expected

    def test_env_bool_default(self, monkeypatch):
        monkeypatch.delenv("UNIT_FLAG", raising=False)
        assert env_bool("UNIT_FLAG", True) is True

    def test_env_int(self, monkeypatch):
        monkeypatch.setenv("UNIT_INT", "42")
        assert env_int("UNIT_INT", 1) == 42

    def test_env_int_invalid(self, monkeypatch):
        monkeypatch.setenv("UNIT_INT", "many")
        with pytest.raises(ConfigurationError):
            env_int("UNIT_INT", 1)

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("development", DevelopmentConfig),
            ("testing", TestingConfig),
            ("production", ProductionConfig),
            ("unknown", DevelopmentConfig),
        ],
    )
    def test_get_config(self, monkeypatch, name, expected):
        monkeypatch.setenv("APP_ENV", name)
        assert get_config() is expected


def test_testing_config_uses_distinct_secrets():
    assert TestingConfig.ACCESS_TOKEN_SECRET != TestingConfig.REFRESH_TOKEN_SECRET


def test_testing_config_secrets_are_long_enough_for_hs256():
    TokenSettings.from_mapping(
        {
            "ACCESS_TOKEN_SECRET": TestingConfig.ACCESS_TOKEN_SECRET,
            "REFRESH_TOKEN_SECRET": TestingConfig.REFRESH_TOKEN_SECRET,
        }
    )
    for secret in (TestingConfig.ACCESS_TOKEN_SECRET, TestingConfig.REFRESH_TOKEN_SECRET):
        assert len(secret.encode("utf-8")) >= 32
