"""Product domain constants."""

import re

from django.db import models


class ProductType(models.TextChoices):
    DOWNLOADABLE = "downloadable", "Downloadable"
    DELIVERABLE = "deliverable", "Deliverable"


# At most 6 integer digits and 2 decimals; "12." is accepted.
PRICE_PATTERN = re.compile(r"\d{1,6}(\.\d{0,2})?")

QUANTITY_MIN = 0
QUANTITY_MAX = 100

SKU_MAX_LENGTH = 64
NAME_MAX_LENGTH = 255
SLUG_MAX_LENGTH = 255
IMAGE_MAX_LENGTH = 255

# Constraint name -> field, used to map IntegrityError back to a field.
UNIQUE_CONSTRAINTS: dict[str, str] = {
    "products_name_uniq": "name",
    "products_slug_uniq": "slug",
    "products_sku_uniq": "sku",
}
