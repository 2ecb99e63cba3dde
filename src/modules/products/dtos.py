"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between whatever collects the raw input
(admin screens, management commands) and ``ProductService``.
DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``ProductOutputDTO``: output with all product fields.
- ``ProductSearchResultDTO``: one global-search hit with its details.

Unknown keys (a submitted ``slug`` included) are ignored: the slug is
derived by the service and never taken from input.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.brands.dtos import BrandRefDTO

from modules.products.constants import (
    IMAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PRICE_PATTERN,
    QUANTITY_MAX,
    QUANTITY_MIN,
    SKU_MAX_LENGTH,
    ProductType,
)

if TYPE_CHECKING:
    from modules.products.models import Product


# ---------------------------------------------------------------------------
# Field rules shared by create and update
# ---------------------------------------------------------------------------


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty.")
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters.")
    return v


def _clean_sku(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("SKU must not be empty.")
    if len(v) > SKU_MAX_LENGTH:
        raise ValueError(f"SKU must be at most {SKU_MAX_LENGTH} characters.")
    return v


def _parse_price(v: Any) -> Decimal:
    """Check the textual form of ``v`` before turning it into a Decimal.

    The format rule applies to what was typed, so ``Decimal("12.340")``
    is rejected just like the string ``"12.340"``.
    """
    if isinstance(v, bool) or not isinstance(v, (str, int, float, Decimal)):
        raise ValueError("Price must be a number.")
    text = format(v, "f") if isinstance(v, Decimal) else str(v).strip()
    if not PRICE_PATTERN.fullmatch(text):
        raise ValueError(
            "Price must have at most 6 digits before and 2 digits after "
            "the decimal point."
        )
    return Decimal(text)


def _check_quantity(v: int) -> int:
    if not QUANTITY_MIN <= v <= QUANTITY_MAX:
        raise ValueError(
            f"Quantity must be between {QUANTITY_MIN} and {QUANTITY_MAX}."
        )
    return v


def _check_image(v: str) -> str:
    if len(v) > IMAGE_MAX_LENGTH:
        raise ValueError(f"Image path must be at most {IMAGE_MAX_LENGTH} characters.")
    return v


def _not_null(v: Any) -> Any:
    if v is None:
        raise ValueError("This field may not be null.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` and ``sku`` are non-empty once stripped.
    - ``price`` matches ``\\d{1,6}(\\.\\d{0,2})?``.
    - ``quantity`` is within 0..100.
    - ``type`` is a ``ProductType`` value.

    ``published_at`` left as ``None`` is filled with today's date by the
    service.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    sku: str
    price: Decimal
    quantity: int
    type: ProductType
    description: str = ""
    is_visible: bool = True
    is_featured: bool = False
    published_at: Optional[date] = None
    brand_id: Optional[UUID] = None
    image: str = ""

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        return _clean_sku(v)

    @field_validator("price", mode="before")
    @classmethod
    def price_must_match_format(cls, v: Any) -> Decimal:
        return _parse_price(v)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_in_range(cls, v: int) -> int:
        return _check_quantity(v)

    @field_validator("description", "image", mode="before")
    @classmethod
    def blank_when_null(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("image")
    @classmethod
    def image_must_fit(cls, v: str) -> str:
        return _check_image(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional: only the fields present in the input are
    applied (see ``changes()``).  A supplied field goes through the same
    rules as on creation.  ``brand_id=None`` unlinks the brand.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Decimal] = None
    quantity: Optional[int] = None
    type: Optional[ProductType] = None
    description: Optional[str] = None
    is_visible: Optional[bool] = None
    is_featured: Optional[bool] = None
    published_at: Optional[date] = None
    brand_id: Optional[UUID] = None
    image: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: Optional[str]) -> str:
        return _clean_name(_not_null(v))

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: Optional[str]) -> str:
        return _clean_sku(_not_null(v))

    @field_validator("price", mode="before")
    @classmethod
    def price_must_match_format(cls, v: Any) -> Decimal:
        return _parse_price(_not_null(v))

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_in_range(cls, v: Optional[int]) -> int:
        return _check_quantity(_not_null(v))

    @field_validator("type", "is_visible", "is_featured", "published_at")
    @classmethod
    def must_not_be_null(cls, v: Any) -> Any:
        return _not_null(v)

    @field_validator("description", "image", mode="before")
    @classmethod
    def blank_when_null(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("image")
    @classmethod
    def image_must_fit(cls, v: str) -> str:
        return _check_image(v)

    def changes(self) -> Dict[str, Any]:
        """Return only the fields that were explicitly supplied."""
        return self.model_dump(exclude_unset=True)


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


def _brand_ref(product: Product) -> Optional[BrandRefDTO]:
    if product.brand_id is None:
        return None
    return BrandRefDTO.from_entity(product.brand)


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product read models."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    slug: str
    description: str
    sku: str
    price: Decimal
    quantity: int
    type: str
    is_visible: bool
    is_featured: bool
    published_at: date
    brand: Optional[BrandRefDTO]
    image: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            name=product.name,
            slug=product.slug,
            description=product.description,
            sku=product.sku,
            price=product.price,
            quantity=product.quantity,
            type=product.type,
            is_visible=product.is_visible,
            is_featured=product.is_featured,
            published_at=product.published_at,
            brand=_brand_ref(product),
            image=product.image,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductSearchResultDTO(BaseModel):
    """A single global-search hit.

    ``details`` always carries the ``Brand`` and ``Description`` entries,
    empty strings when the product has no brand or no description.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    title: str
    slug: str
    details: Dict[str, str]

    @classmethod
    def from_entity(cls, product: Product) -> ProductSearchResultDTO:
        brand = _brand_ref(product)
        return cls(
            id=product.id,
            title=product.name,
            slug=product.slug,
            details={
                "Brand": brand.name if brand is not None else "",
                "Description": product.description or "",
            },
        )
