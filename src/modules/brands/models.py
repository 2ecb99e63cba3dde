"""Brand model.

Brands are referenced by products (many-to-one) but live in their own
module: the catalog only ever resolves a brand id to its display name.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Brand(BaseModel):
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")

    class Meta:
        db_table = "brands"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
