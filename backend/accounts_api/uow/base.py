"""Transaction boundary contract used by the services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from accounts_api.repositories import UserRepository


class UnitOfWork(ABC):
    """
    One transaction around one use case.

    Implementations expose ``users`` bound to the transaction's session and
    decide on exit whether the work is committed or discarded.
    """

    users: UserRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
