"""
Password hashing for stored credentials.

Digests are produced by :func:`werkzeug.security.generate_password_hash`
(salted; ``scrypt`` by default, which is memory-hard) and checked with
:func:`werkzeug.security.check_password_hash`, whose final comparison runs
through :func:`hmac.compare_digest`.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app, has_app_context
from werkzeug.security import check_password_hash, generate_password_hash

from accounts_api.core.extensions import PASSWORD_HASHER_KEY

DEFAULT_METHOD = "scrypt"


@dataclass(frozen=True, slots=True)
class PasswordHasher:
    """
    One-way hash and verify.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``.
    :param salt_length: Random salt length in characters.
    """

    method: str = DEFAULT_METHOD
    salt_length: int = 16

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        :param plaintext: Raw password.
        :returns: Self-describing digest (``method$salt$hash``).
        :raises ValueError: If the password is empty or not a string.
        """
        if not isinstance(plaintext, str) or not plaintext:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(plaintext, method=self.method, salt_length=self.salt_length)

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """
        Check ``plaintext`` against ``digest``.

        Digests made with a different method still verify; the method is read
        from the digest itself.
        """
        if not digest or not isinstance(plaintext, str):
            return False
        return bool(check_password_hash(digest, plaintext))


_default_hasher = PasswordHasher()


def current_hasher() -> PasswordHasher:
    """Return the app-configured hasher, or the module default outside an app."""
    if has_app_context():
        hasher = current_app.extensions.get(PASSWORD_HASHER_KEY)
        if isinstance(hasher, PasswordHasher):
            return hasher
    return _default_hasher


def hash_password(plaintext: str) -> str:
    return current_hasher().hash(plaintext)


def verify_password(plaintext: str, digest: str | None) -> bool:
    return current_hasher().verify(plaintext, digest)
