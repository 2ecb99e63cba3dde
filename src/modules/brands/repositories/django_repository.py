"""Django ORM implementation of the Brand repository."""

from __future__ import annotations

from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.brands.models import Brand
from modules.brands.repositories.interfaces import IBrandRepository

logger = structlog.get_logger(__name__)


class BrandDjangoRepository(IBrandRepository):
    def get_by_id(self, id: str) -> Optional[Brand]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return Brand.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[Brand]:
        return Brand.objects.filter(name=name).first()

    @transaction.atomic
    def save(self, entity: Brand) -> Brand:
        entity.save()
        logger.info("brand.saved", brand_id=str(entity.id), name=entity.name)
        return entity
