"""
IdentityService
===============

Aggregate service responsible for managing the `User` account:
- Registration with avatar and optional cover image
- Retrieval of the public identity
- Account details and profile media updates

Tokens and passwords after registration belong to
:class:`accounts_api.services.sessions.SessionManager`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.exc import IntegrityError

from accounts_api.repositories.user import UserRepository
from accounts_api.services._shared.base import BaseService, ServiceContext
from accounts_api.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
    violates,
)
from accounts_api.services.identity.dto import RegisterIn, UpdateAccountIn, UserPublicOut
from accounts_api.services.media import MediaService, staged_file

log = logging.getLogger(__name__)


def _blank(*values: str | None) -> bool:
    return any(v is None or not str(v).strip() for v in values)


class IdentityService(BaseService):
    """
    Application service for the `User` account.

    Responsibilities
    ----------------
    - Register users ensuring username and email uniqueness.
    - Retrieve and update account details safely.
    - Replace avatar and cover image through the media collaborator.
    """

    def __init__(self, *, media: MediaService, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.media = media

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(
        self,
        dto: RegisterIn,
        *,
        avatar_path: str | Path | None,
        cover_image_path: str | Path | None = None,
    ) -> UserPublicOut:
        """
        Register a new user.

        Staged files are removed on every path out of this method.

        :raises ValidationFailedError: Blank field, missing avatar, or a
            failed avatar upload.
        :raises ConflictError: Username or email already taken.
        """
        with staged_file(avatar_path), staged_file(cover_image_path):
            if _blank(dto.username, dto.email, dto.full_name, dto.password):
                raise ValidationFailedError("All fields are required")

            with self.ro_uow() as uow:
                if uow.users.exists_by_username_or_email(dto.username, dto.email):
                    raise ConflictError("User", "with email or username already exists")

            if avatar_path is None:
                raise ValidationFailedError("Avatar file is required")

            avatar = self.media.upload(avatar_path)
            if avatar is None:
                raise ValidationFailedError("Avatar upload failed")
            cover = self.media.upload(cover_image_path)

            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                try:
                    user = repo.create(
                        username=dto.username,
                        email=dto.email,
                        full_name=dto.full_name.strip(),
                        avatar_url=avatar.url,
                        cover_image_url=cover.url if cover else "",
                        password=dto.password,
                    )
                except ValueError as exc:
                    raise ValidationFailedError(str(exc)) from exc
                except IntegrityError as exc:
                    conflict = self._conflict_from(exc)
                    if conflict is None:
                        raise
                    raise conflict from exc
                public = UserPublicOut.from_model(user)

        log.info("User registered", extra={"event": "identity.registered", "identity_id": public.id})
        return public

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Updates
    # --------------------------------------------------------------------- #

    def update_account(self, dto: UpdateAccountIn) -> UserPublicOut:
        """
        Update full name and email. Both are required.

        :raises ValidationFailedError: Blank or malformed fields.
        :raises NotFoundError: If user does not exist.
        :raises ConflictError: Email taken by another user.
        """
        if _blank(dto.full_name, dto.email):
            raise ValidationFailedError("All fields are required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)

            other = repo.get_by_email(dto.email)
            if other is not None and other.id != user.id:
                raise ConflictError("User", "email already in use")

            try:
                repo.assign_updates(user, {"full_name": dto.full_name.strip(), "email": dto.email})
            except ValueError as exc:
                raise ValidationFailedError(str(exc)) from exc
            except IntegrityError as exc:
                conflict = self._conflict_from(exc)
                if conflict is None:
                    raise
                raise conflict from exc
            public = UserPublicOut.from_model(user)

        log.info("Account updated", extra={"event": "identity.updated", "identity_id": dto.user_id})
        return public

    def update_avatar(self, user_id: int, path: str | Path | None) -> UserPublicOut:
        """Upload a new avatar and store its URL.

        :raises ValidationFailedError: Missing file or failed upload.
        """
        return self._replace_media(user_id, path, field="avatar_url", label="Avatar")

    def update_cover_image(self, user_id: int, path: str | Path | None) -> UserPublicOut:
        """Upload a new cover image and store its URL.

        :raises ValidationFailedError: Missing file or failed upload.
        """
        return self._replace_media(user_id, path, field="cover_image_url", label="Cover image")

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _replace_media(
        self,
        user_id: int,
        path: str | Path | None,
        *,
        field: str,
        label: str,
    ) -> UserPublicOut:
        if path is None:
            raise ValidationFailedError(f"{label} file is missing")

        media = self.media.upload(path)
        if media is None:
            raise ValidationFailedError(f"{label} upload failed")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            repo.assign_updates(user, {field: media.url})
            public = UserPublicOut.from_model(user)

        log.info("%s replaced", label, extra={"event": "identity.media_updated", "identity_id": user_id})
        return public

    @staticmethod
    def _conflict_from(exc: IntegrityError) -> ConflictError | None:
        if violates(exc, "uq_users_email"):
            return ConflictError("User", "email already in use")
        if violates(exc, "uq_users_username"):
            return ConflictError("User", "username already in use")
        return None
