"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and the Service Layer decides how to translate a
missing entity.  ``IntegrityError`` from ``save`` is left to the service.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from modules.products.exceptions import ProductValidationError
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

UNIQUE_FIELDS = ("name", "slug", "sku")


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str, include_deleted: bool = False) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent, malformed or (by default)
        soft-deleted IDs.
        """
        queryset = Product.objects.select_related("brand")
        if not include_deleted:
            queryset = queryset.alive()
        try:
            return queryset.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def exists_with(self, field: str, value: str, exclude_id: Any = None) -> bool:
        if field not in UNIQUE_FIELDS:
            raise ValueError(f"'{field}' is not a unique product field.")
        # Unfiltered manager: soft-deleted rows still reserve the value.
        queryset = Product.objects.filter(**{field: value})
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def list(self, filters: Optional[Mapping[str, Any]] = None) -> List[Product]:
        """List live products through ``ProductFilter``.

        Examples of valid filters::

            {"is_visible": True}
            {"brand": "<brand uuid>", "ordering": "-price"}

        Raises:
            ProductValidationError: if a filter value cannot be parsed.
        """
        queryset = Product.objects.alive().select_related("brand")
        if not filters:
            return list(queryset)
        filterset = ProductFilter(data=dict(filters), queryset=queryset)
        if not filterset.is_valid():
            raise ProductValidationError(
                {field: list(messages) for field, messages in filterset.errors.items()}
            )
        return list(filterset.qs)

    def count(self) -> int:
        return Product.objects.alive().count()

    def search(self, query: str, limit: int) -> List[Product]:
        """Live products whose name, slug or description contains ``query``.

        Matching is case-insensitive through ``icontains``.  On SQLite that
        folds ASCII letters only, so ``"café"`` does not match ``"CAFÉ"``
        there; PostgreSQL and MySQL fold the full Unicode range.
        """
        queryset = (
            Product.objects.alive()
            .select_related("brand")
            .filter(
                Q(name__icontains=query)
                | Q(slug__icontains=query)
                | Q(description__icontains=query)
            )
        )
        return list(queryset[:limit])

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product.

        Runs in its own savepoint so a constraint violation leaves the
        caller's transaction usable.
        """
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            sku=entity.sku,
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if a live product was found and soft-deleted,
        ``False`` otherwise.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

    @transaction.atomic
    def delete_many(self, ids: Sequence[str]) -> int:
        count, _ = Product.objects.filter(id__in=list(ids)).delete()
        logger.info("product.bulk_soft_deleted", count=count)
        return count
