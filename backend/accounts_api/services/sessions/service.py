# accounts_api/services/sessions/service.py
from __future__ import annotations

import hmac
import logging
from typing import NoReturn

from accounts_api.repositories.user import UserRepository
from accounts_api.security.passwords import verify_password
from accounts_api.services._shared.base import BaseService, ServiceContext
from accounts_api.services._shared.errors import (
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from accounts_api.services._shared.ports import TokenClass, TokenCodec, TokenError
from accounts_api.services.identity.dto import UserPublicOut
from accounts_api.services.sessions.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPairOut,
)

log = logging.getLogger(__name__)


class SessionManager(BaseService):
    """
    Session lifecycle service (login / refresh / logout / change password).

    Tokens are issued and verified through a pluggable :class:`TokenCodec`.
    The single valid refresh token of an identity lives on its user row:
    login overwrites it, refresh rotates it with a conditional update, and
    logout clears it. Access tokens are never persisted.

    Every token failure surfaces as :class:`UnauthorizedError` with the same
    message; the concrete cause is only logged.
    """

    def __init__(self, *, codec: TokenCodec, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.codec = codec

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and issue a fresh token pair.

        :raises ValidationFailedError: Blank username and email, or blank password.
        :raises NotFoundError: No user matches the username or the email.
        :raises InvalidCredentialsError: Password mismatch.
        """
        username = (dto.username or "").strip().lower()
        email = (dto.email or "").strip().lower()
        if not username and not email:
            raise ValidationFailedError("username or email is required")
        if not dto.password:
            raise ValidationFailedError("password is required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_identity(username=username, email=email)
            if user is None:
                log.warning("Login for unknown identity", extra={"event": "session.login.rejected"})
                raise NotFoundError("User", username or email)
            if not verify_password(dto.password, user.password_hash):
                log.warning(
                    "Login with wrong password",
                    extra={"event": "session.login.rejected", "identity_id": user.id},
                )
                raise InvalidCredentialsError("Invalid user credentials")

            access = self.codec.issue_access_token(user.id)
            refresh = self.codec.issue_refresh_token(user.id)
            # Overwrites any previous session of this identity.
            repo.set_refresh_token(user.id, refresh.token)
            public = UserPublicOut.from_model(user)

        log.info("User logged in", extra={"event": "session.login", "identity_id": public.id})
        return LoginOut(user=public, access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange the presented refresh token for a new pair.

        The presented token must verify against the refresh secret and equal
        the stored one. The new refresh token replaces it only if the row
        still holds the presented value, so a token can be redeemed once.

        :raises UnauthorizedError: On any failure.
        """
        presented = dto.refresh_token
        if not presented:
            self._reject("session.refresh.rejected", "missing refresh token")

        try:
            claims = self.codec.verify(presented, TokenClass.REFRESH)
        except TokenError as exc:
            self._reject(
                "session.refresh.rejected",
                f"refresh token failed verification ({type(exc).__name__})",
                exc,
            )
        user_id = self._coerce_user_id(claims.subject)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                self._reject("session.refresh.rejected", "identity no longer exists")

            stored = user.refresh_token or ""
            if not hmac.compare_digest(stored.encode(), presented.encode()):
                self._reject(
                    "session.refresh.rejected", "stale or unknown refresh token", identity_id=user_id
                )

            access = self.codec.issue_access_token(user_id)
            refresh = self.codec.issue_refresh_token(user_id)
            if not repo.swap_refresh_token(user_id, presented, refresh.token):
                self._reject(
                    "session.refresh.rejected",
                    "refresh token rotated concurrently",
                    identity_id=user_id,
                )

        log.info("Tokens refreshed", extra={"event": "session.refresh", "identity_id": user_id})
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int) -> None:
        """Clear the stored refresh token. Idempotent; unknown ids are a no-op."""
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            repo.set_refresh_token(user_id, None)
        log.info("User logged out", extra={"event": "session.logout", "identity_id": user_id})

    # ------------------------------------------------------------------ #
    # Password
    # ------------------------------------------------------------------ #

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Replace the password after checking the current one.

        The stored refresh token is left as is.

        :raises NotFoundError: Unknown user.
        :raises InvalidCredentialsError: ``old_password`` does not match.
        :raises ValidationFailedError: Blank ``new_password``.
        """
        if not dto.new_password:
            raise ValidationFailedError("new password is required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)
            if not verify_password(dto.old_password or "", user.password_hash):
                log.warning(
                    "Password change with wrong old password",
                    extra={"event": "session.password_change.rejected", "identity_id": user.id},
                )
                raise InvalidCredentialsError("Invalid old password")
            repo.update_password(user.id, dto.new_password)

        log.info("Password changed", extra={"event": "session.password_changed", "identity_id": dto.user_id})

    # ------------------------------------------------------------------ #
    # Access-token authentication
    # ------------------------------------------------------------------ #

    def authenticate_access_token(self, token: str | None) -> UserPublicOut:
        """
        Resolve an access token to the public identity it names.

        Only the signature, expiry and class of the token are checked; the
        stored refresh token is not consulted.

        :raises UnauthorizedError: Missing, invalid or expired token, or the
            identity no longer exists.
        """
        if not token:
            self._reject("session.access.rejected", "missing access token")
        try:
            claims = self.codec.verify(token, TokenClass.ACCESS)
        except TokenError as exc:
            self._reject(
                "session.access.rejected",
                f"access token failed verification ({type(exc).__name__})",
                exc,
            )
        user_id = self._coerce_user_id(claims.subject)

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                self._reject("session.access.rejected", "identity no longer exists")
            return UserPublicOut.from_model(user)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _coerce_user_id(self, subject: str) -> int:
        try:
            return int(subject)
        except (TypeError, ValueError) as exc:
            self._reject("session.rejected", "non-numeric token subject", exc)

    @staticmethod
    def _reject(
        event: str,
        reason: str,
        cause: Exception | None = None,
        *,
        identity_id: int | None = None,
    ) -> NoReturn:
        """Log ``reason`` and raise the uniform :class:`UnauthorizedError`."""
        log.warning("Rejected: %s", reason, extra={"event": event, "identity_id": identity_id})
        raise UnauthorizedError() from cause
