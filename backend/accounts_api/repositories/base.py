"""Generic repository base for SQLAlchemy 2.x.

Repositories are persistence-only: lookups, staged inserts and whitelisted
attribute updates. They flush but never commit or roll back; the Unit of Work
owns the transaction.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

from accounts_api.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence helpers for a single mapped model.

    Subclasses set ``model`` and list the attributes callers may assign in
    ``_updatable_fields``.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def _updatable_fields(self) -> set[str]:
        return set()

    # --------------------------------- Reads ---------------------------------

    def get(self, entity_id: Any) -> E | None:
        """Fetch by primary key ``id``; ``None`` when absent."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        return cast(E | None, self.session.execute(stmt).scalars().first())

    # -------------------------------- Writes ---------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so the primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(self, instance: E, fields: Mapping[str, Any]) -> E:
        """Set whitelisted attributes on ``instance`` and flush.

        Attributes are assigned one by one so model ``@validates`` hooks run.

        :raises ValueError: If ``fields`` names a non-updatable attribute, or a
            validator rejects a value.
        """
        allowed = self._updatable_fields()
        rejected = sorted(k for k in fields if k not in allowed)
        if rejected:
            raise ValueError(f"Non-updatable fields: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.flush()
        return instance
