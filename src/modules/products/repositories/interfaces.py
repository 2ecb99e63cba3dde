"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by the
uniqueness rules (name, slug, SKU across live and soft-deleted rows),
listing, counting and global search.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_id(self, id: str, include_deleted: bool = False) -> Optional[Product]:
        """Retrieve a product by primary key.

        Soft-deleted products are only returned with ``include_deleted``.
        """

    @abstractmethod
    def exists_with(self, field: str, value: str, exclude_id: Any = None) -> bool:
        """Whether any product, soft-deleted ones included, has ``field == value``.

        ``exclude_id`` leaves one product out of the check (self-exclusion
        on update).
        """

    @abstractmethod
    def list(self, filters: Optional[Mapping[str, Any]] = None) -> List[Product]:
        """List live products, optionally filtered and ordered."""

    @abstractmethod
    def count(self) -> int:
        """Number of live products."""

    @abstractmethod
    def search(self, query: str, limit: int) -> List[Product]:
        """Live products whose name, slug or description contain ``query``."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID."""

    @abstractmethod
    def delete_many(self, ids: Sequence[str]) -> int:
        """Soft-delete several products, returning how many were deleted."""
