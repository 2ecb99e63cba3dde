"""Product model with name/slug/SKU uniqueness and soft delete.

Business rules implemented at the storage layer:
- ``name``, ``slug`` and ``sku`` are each unique across every row,
  soft-deleted ones included (the constraints are unconditional).
- ``price`` fits 6 integer digits and 2 decimals.
- ``quantity`` stays within 0..100.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).

The service layer checks the same rules first; the constraints are the
second line of defence when two writers race.
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import SoftDeleteModel
from modules.products.constants import (
    IMAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    QUANTITY_MAX,
    QUANTITY_MIN,
    SKU_MAX_LENGTH,
    SLUG_MAX_LENGTH,
    ProductType,
)

logger = structlog.get_logger(__name__)


class Product(SoftDeleteModel):
    """Product aggregate root.

    ``slug`` is written once, when the product is created, and never
    recomputed from later name changes.  ``image`` is an opaque storage
    path; uploads are handled elsewhere.
    """

    name = models.CharField(max_length=NAME_MAX_LENGTH)
    slug = models.SlugField(max_length=SLUG_MAX_LENGTH)
    description = models.TextField(blank=True, default="")
    sku = models.CharField(max_length=SKU_MAX_LENGTH)
    price = models.DecimalField(max_digits=8, decimal_places=2)
    quantity = models.PositiveSmallIntegerField(default=0)
    type = models.CharField(max_length=20, choices=ProductType.choices)
    is_visible = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)
    published_at = models.DateField()
    brand = models.ForeignKey(
        "brands.Brand",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="products",
    )
    image = models.CharField(max_length=IMAGE_MAX_LENGTH, blank=True, default="")

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_visible"], name="products_visible_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["name"], name="products_name_uniq"),
            models.UniqueConstraint(fields=["slug"], name="products_slug_uniq"),
            models.UniqueConstraint(fields=["sku"], name="products_sku_uniq"),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=QUANTITY_MIN)
                & models.Q(quantity__lte=QUANTITY_MAX),
                name="products_quantity_range",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                sku=self.sku,
                slug=self.slug,
            )

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
