"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository`` and brand look-ups to
the injected ``IBrandRepository``.

Business rules enforced here:
- ``name``, ``slug`` and ``sku`` are unique across all products,
  soft-deleted ones included.
- ``slug`` is derived from ``name`` once, at creation, and frozen.
- ``price`` format, ``quantity`` range and ``type`` (validated by DTO).
- Soft delete via repository; deleted products are hidden from reads.

Every command runs in one transaction: the uniqueness check and the
write cannot be split by a concurrent writer without the database
constraint firing, and that violation surfaces as the same
``ProductAlreadyExists`` the in-service check raises.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)
from uuid import UUID

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from modules.products.constants import SLUG_MAX_LENGTH, UNIQUE_CONSTRAINTS
from modules.products.dtos import (
    CreateProductDTO,
    ProductSearchResultDTO,
    UpdateProductDTO,
)
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductNotFound,
    ProductValidationError,
)
from modules.products.models import Product
from modules.products.slugs import derive_slug

if TYPE_CHECKING:
    from modules.brands.repositories.interfaces import IBrandRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

DTO = TypeVar("DTO", bound=BaseModel)


def _to_dto(
    dto_class: Type[DTO], data: Union[DTO, Mapping[str, Any]]
) -> Tuple[Optional[DTO], Dict[str, List[str]]]:
    """Accept a ready DTO or raw input.

    Returns the DTO, or ``None`` together with every field error when the
    input does not validate, so the caller can add its own checks before
    reporting them all at once.
    """
    if isinstance(data, dto_class):
        return data, {}
    try:
        return dto_class.model_validate(data), {}
    except PydanticValidationError as exc:
        return None, dict(ProductValidationError.from_pydantic(exc).errors)


def _as_uuid(value: Any) -> Optional[UUID]:
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _conflicting_field(exc: IntegrityError) -> Optional[str]:
    """Map a unique-constraint violation back to the product field."""
    message = str(exc)
    for constraint, field in UNIQUE_CONSTRAINTS.items():
        # PostgreSQL/MySQL report the constraint name, SQLite the column.
        if constraint in message or f"{Product._meta.db_table}.{field}" in message:
            return field
    return None


class ProductService:
    """Application service for Product use-cases.

    Receives its repositories via constructor injection (DIP).
    ``search_limit`` caps global search results and defaults to
    ``settings.PRODUCT_SEARCH_RESULTS_LIMIT``.
    """

    def __init__(
        self,
        repository: IProductRepository,
        brand_repository: IBrandRepository,
        search_limit: Optional[int] = None,
    ) -> None:
        self._repo = repository
        self._brands = brand_repository
        if search_limit is None:
            search_limit = settings.PRODUCT_SEARCH_RESULTS_LIMIT
        self._search_limit = search_limit

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(
        self, data: Union[CreateProductDTO, Mapping[str, Any]]
    ) -> Product:
        """Create a new product, deriving its slug from the name.

        Raises:
            ProductValidationError: if any field is invalid, the name has
                no sluggable characters or the brand does not exist.
            ProductAlreadyExists: if name, slug or SKU is already taken.
        """
        dto, errors = _to_dto(CreateProductDTO, data)
        if dto is not None:
            name, brand_id = dto.name, dto.brand_id
        else:
            raw = data if isinstance(data, Mapping) else {}
            name, brand_id = raw.get("name"), _as_uuid(raw.get("brand_id"))

        slug = ""
        if isinstance(name, str) and "name" not in errors:
            slug = derive_slug(name)
            if not slug:
                errors["slug"] = ["Name must contain at least one letter or digit."]
            elif len(slug) > SLUG_MAX_LENGTH:
                errors["slug"] = [
                    f"Slug must be at most {SLUG_MAX_LENGTH} characters."
                ]
        if "brand_id" not in errors:
            errors.update(self._check_brand(brand_id))
        if errors or dto is None:
            logger.warning("product.invalid", fields=sorted(errors))
            raise ProductValidationError(errors)

        log = logger.bind(sku=dto.sku, slug=slug)

        self._ensure_unique({"name": dto.name, "slug": slug, "sku": dto.sku})

        product = Product(
            name=dto.name,
            slug=slug,
            description=dto.description,
            sku=dto.sku,
            price=dto.price,
            quantity=dto.quantity,
            type=dto.type,
            is_visible=dto.is_visible,
            is_featured=dto.is_featured,
            published_at=dto.published_at or timezone.localdate(),
            brand_id=dto.brand_id,
            image=dto.image,
        )
        product = self._persist(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(
        self, id: str, data: Union[UpdateProductDTO, Mapping[str, Any]]
    ) -> Product:
        """Apply the supplied fields to a live product.

        The slug is never recomputed, even when the name changes.

        Raises:
            ProductValidationError: if a supplied field is invalid.
            ProductNotFound: if the product does not exist or is deleted.
            ProductAlreadyExists: if the new name or SKU belongs to
                another product.
        """
        log = logger.bind(product_id=str(id))
        dto, errors = _to_dto(UpdateProductDTO, data)
        if dto is not None:
            supplied: Mapping[str, Any] = dto.changes()
            brand_id = supplied.get("brand_id")
        else:
            supplied = data if isinstance(data, Mapping) else {}
            brand_id = _as_uuid(supplied.get("brand_id"))

        if "brand_id" in supplied and "brand_id" not in errors:
            errors.update(self._check_brand(brand_id))
        if errors or dto is None:
            log.warning("product.invalid", fields=sorted(errors))
            raise ProductValidationError(errors)

        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)

        changes = dto.changes()
        self._ensure_unique(
            {f: changes[f] for f in ("name", "sku") if f in changes},
            exclude_id=product.id,
        )

        for field, value in changes.items():
            setattr(product, field, value)

        product = self._persist(product)
        log.info("product.updated", fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.  Its name, slug and SKU stay reserved.

        Raises:
            ProductNotFound: if the product does not exist or is deleted.
        """
        if not self._repo.get_by_id(id):
            raise ProductNotFound(id)
        self._repo.delete(id)
        logger.info("product.soft_deleted", product_id=str(id))

    @transaction.atomic
    def delete_products(self, ids: Sequence[str]) -> int:
        """Soft-delete several products; all of them or none.

        Raises:
            ProductNotFound: for the first ID that is missing or deleted.
        """
        for id in ids:
            if not self._repo.get_by_id(id):
                raise ProductNotFound(id)
        count = self._repo.delete_many(ids)
        logger.info("product.bulk_soft_deleted", count=count)
        return count

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, id: str) -> Product:
        """Retrieve a single live product by ID.

        Raises:
            ProductNotFound: if the product does not exist or is deleted.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)
        logger.info("product.retrieved", product_id=str(id))
        return product

    def list_products(
        self, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Product]:
        """Return live products, optionally filtered and ordered."""
        return self._repo.list(filters)

    def count_products(self) -> int:
        """Number of live products (the navigation badge count)."""
        return self._repo.count()

    def search(
        self, query: str, limit: Optional[int] = None
    ) -> List[ProductSearchResultDTO]:
        """Global search over name, slug and description of live products.

        A blank query matches nothing.
        """
        if limit is None:
            limit = self._search_limit
        if limit < 1:
            raise ValueError("Search limit must be a positive integer.")
        query = query.strip()
        if not query:
            return []
        products = self._repo.search(query, limit)
        logger.info("product.searched", query=query, results=len(products))
        return [ProductSearchResultDTO.from_entity(p) for p in products]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_brand(self, brand_id: Optional[UUID]) -> Dict[str, List[str]]:
        if brand_id is None or self._brands.get_by_id(str(brand_id)):
            return {}
        return {"brand_id": ["Selected brand does not exist."]}

    def _ensure_unique(
        self, values: Mapping[str, str], exclude_id: Optional[Any] = None
    ) -> None:
        for field, value in values.items():
            if self._repo.exists_with(field, value, exclude_id=exclude_id):
                logger.warning(f"product.duplicate_{field}", value=value)
                raise ProductAlreadyExists(field, value)

    def _persist(self, product: Product) -> Product:
        try:
            return self._repo.save(product)
        except IntegrityError as exc:
            field = _conflicting_field(exc)
            if field is None:
                raise
            logger.warning("product.integrity_conflict", field=field)
            raise ProductAlreadyExists(field, getattr(product, field)) from exc
