"""User repository for persistence and credential utilities."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update

from accounts_api.models.user import User
from accounts_api.repositories.base import BaseRepository
from accounts_api.security.passwords import hash_password


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Handles lookups, password digests and the stored refresh token. It never
    mints or verifies tokens.
    """

    model = User

    # ---------------------------- Whitelist ----------------------------

    def _updatable_fields(self):
        """Publicly allowed updatable fields (not password, not username)."""
        return {"email", "full_name", "avatar_url", "cover_image_url"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username.strip().lower())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: User instance or ``None`` when not found.
        """
        stmt = select(User).where(User.email == email.strip().lower())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_identity(self, *, username: str | None = None, email: str | None = None) -> User | None:
        """Fetch a user whose username OR email equals the given value.

        Blank arguments are ignored; both blank yields ``None``. Values are
        normalised to lowercase before matching.
        """
        clauses = []
        if username and username.strip():
            clauses.append(User.username == username.strip().lower())
        if email and email.strip():
            clauses.append(User.email == email.strip().lower())
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username_or_email(self, username: str, email: str) -> bool:
        stmt = select(User.id).where(
            or_(User.username == username.strip().lower(), User.email == email.strip().lower())
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Writes ----------------------------

    def create(
        self,
        *,
        username: str,
        email: str,
        full_name: str,
        avatar_url: str,
        password: str,
        cover_image_url: str = "",
    ) -> User:
        """Insert a user, hashing ``password`` before it reaches the row.

        :raises sqlalchemy.exc.IntegrityError: On username/email collision.
        """
        user = User(
            username=username,
            email=email,
            full_name=full_name,
            avatar_url=avatar_url,
            cover_image_url=cover_image_url or "",
            password_hash=hash_password(password),
        )
        return self.add(user)

    def update_password(self, user_id: int, new_password: str) -> None:
        """Replace the stored digest with a hash of ``new_password``.

        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found.")
        user.password_hash = hash_password(new_password)
        self.flush()

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Overwrite the stored refresh token (``None`` clears it).

        :returns: ``True`` when the user row exists.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session="fetch")
        )
        return self.session.execute(stmt).rowcount == 1

    def swap_refresh_token(self, user_id: int, expected: str, new: str) -> bool:
        """
        Replace the stored refresh token only if it still equals ``expected``.

        Issued as a single conditional ``UPDATE`` so two concurrent refreshes
        presenting the same token cannot both succeed.

        :returns: ``True`` when exactly one row was updated.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1
