"""Generic repository interface (Dependency Inversion Principle).

``IRepository[T]`` is the contract every module repository extends.
Service code depends on these abstractions and never queries the ORM
itself, which keeps services testable with ``MagicMock`` repositories.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the entity managed by the repository
    (e.g. ``Brand``, ``Product``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key, or ``None``."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""
