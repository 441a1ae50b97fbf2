"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'
# HS256 keys shorter than the digest size are rejected (RFC 7518 section 3.2).
MIN_SECRET_BYTES: Final[int] = 32

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing or inconsistent."""


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {val!r}") from exc


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    ACCESS_TOKEN_SECRET: str | None
        HMAC key for access tokens. Required; no default.
    REFRESH_TOKEN_SECRET: str | None
        HMAC key for refresh tokens. Required and distinct from the access key.
    ACCESS_TOKEN_EXPIRES_MINUTES: int
        Access token lifetime in minutes.
    REFRESH_TOKEN_EXPIRES_DAYS: int
        Refresh token lifetime in days.
    SQLALCHEMY_DATABASE_URI: str
        Store connection string consumed by SQLAlchemy.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method (``scrypt`` by default).
    CLOUDINARY_*: str | None
        Credentials for the media upload collaborator.
    UPLOAD_TEMP_DIR: str
        Directory where multipart uploads are staged before upload.
    SESSION_COOKIE_SECURE_FLAG: bool
        Emit token cookies with the ``Secure`` attribute.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    SECRET_KEY = os.getenv("SECRET_KEY")

    # Tokens
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
    ACCESS_TOKEN_EXPIRES_MINUTES = env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 15)
    REFRESH_TOKEN_EXPIRES_DAYS = env_int("REFRESH_TOKEN_EXPIRES_DAYS", 10)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "accounts-api")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # Cookies
    ACCESS_TOKEN_COOKIE = "accessToken"
    REFRESH_TOKEN_COOKIE = "refreshToken"
    SESSION_COOKIE_SECURE_FLAG = env_bool("SESSION_COOKIE_SECURE_FLAG", True)
    SESSION_COOKIE_SAMESITE_POLICY = os.getenv("SESSION_COOKIE_SAMESITE_POLICY", "Lax")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./accounts.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Media
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
    CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER", "accounts")
    UPLOAD_TEMP_DIR = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Local servers usually speak plain HTTP, so the ``Secure`` cookie flag is
    opt-in here.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SESSION_COOKIE_SECURE_FLAG = env_bool("SESSION_COOKIE_SECURE_FLAG", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships fixed, distinct token secrets and a cheap hashing method.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    ACCESS_TOKEN_SECRET = "testing-access-token-secret-0123456789"
    REFRESH_TOKEN_SECRET = "testing-refresh-token-secret-0123456789"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PROPAGATE_EXCEPTIONS = True
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    SESSION_COOKIE_SECURE_FLAG = True


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Signing configuration handed to the token codec at construction.

    :param access_secret: HMAC key for access tokens, at least
        ``MIN_SECRET_BYTES`` long.
    :param refresh_secret: HMAC key for refresh tokens (must differ).
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: JWS algorithm name.
    :param issuer: Value of the ``iss`` claim.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"
    issuer: str = "accounts-api"

    def __post_init__(self) -> None:
        if not self.access_secret:
            raise ConfigurationError("ACCESS_TOKEN_SECRET is required.")
        if not self.refresh_secret:
            raise ConfigurationError("REFRESH_TOKEN_SECRET is required.")
        if self.access_secret == self.refresh_secret:
            raise ConfigurationError("Access and refresh token secrets must differ.")
        for name, secret in (
            ("ACCESS_TOKEN_SECRET", self.access_secret),
            ("REFRESH_TOKEN_SECRET", self.refresh_secret),
        ):
            if len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
                raise ConfigurationError(f"{name} must be at least {MIN_SECRET_BYTES} bytes.")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise ConfigurationError("Token lifetimes must be positive.")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenSettings:
        """Build settings from a Flask config (or any mapping)."""
        return cls(
            access_secret=config.get("ACCESS_TOKEN_SECRET") or "",
            refresh_secret=config.get("REFRESH_TOKEN_SECRET") or "",
            access_ttl=timedelta(minutes=int(config.get("ACCESS_TOKEN_EXPIRES_MINUTES", 15))),
            refresh_ttl=timedelta(days=int(config.get("REFRESH_TOKEN_EXPIRES_DAYS", 10))),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
            issuer=str(config.get("JWT_ISSUER", "accounts-api")),
        )
