"""Unit tests for Product DTOs.

Covers:
- CreateProductDTO: required fields, price format, quantity range, type.
- UpdateProductDTO: optional fields, null handling, supplied-field tracking.
- ProductOutputDTO / ProductSearchResultDTO: from_entity factories.
- ProductValidationError.from_pydantic: errors keyed by field.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.brands.dtos import BrandRefDTO
from modules.products.constants import ProductType
from modules.products.dtos import (
    CreateProductDTO,
    ProductOutputDTO,
    ProductSearchResultDTO,
    UpdateProductDTO,
)
from modules.products.exceptions import ProductValidationError
from modules.products.models import Product

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "name": "Widget",
        "sku": "SKU-001",
        "price": "19.99",
        "quantity": 10,
        "type": "deliverable",
    }
    data.update(overrides)
    return data


def _error_fields(exc_info) -> set:
    return {str(e["loc"][0]) for e in exc_info.value.errors()}


# ===========================================================================
# CreateProductDTO
# ===========================================================================


class TestCreateProductDTOValid:
    def test_create_with_valid_data(self):
        dto = CreateProductDTO(**_payload())
        assert dto.name == "Widget"
        assert dto.sku == "SKU-001"
        assert dto.price == Decimal("19.99")
        assert dto.quantity == 10
        assert dto.type == ProductType.DELIVERABLE

    def test_optional_fields_default(self):
        dto = CreateProductDTO(**_payload())
        assert dto.description == ""
        assert dto.is_visible is True
        assert dto.is_featured is False
        assert dto.published_at is None
        assert dto.brand_id is None
        assert dto.image == ""

    def test_strips_name_and_sku(self):
        dto = CreateProductDTO(**_payload(name="  Widget  ", sku=" SKU-9 "))
        assert dto.name == "Widget"
        assert dto.sku == "SKU-9"

    def test_slug_in_input_is_ignored(self):
        dto = CreateProductDTO(**_payload(slug="hand-picked"))
        assert not hasattr(dto, "slug")

    def test_null_description_becomes_blank(self):
        dto = CreateProductDTO(**_payload(description=None))
        assert dto.description == ""

    def test_is_frozen(self):
        dto = CreateProductDTO(**_payload())
        with pytest.raises(ValidationError):
            dto.name = "Changed"


class TestCreateProductDTOPrice:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("12.34", Decimal("12.34")),
            ("999999.99", Decimal("999999.99")),
            ("0", Decimal("0")),
            ("12.", Decimal("12")),
            ("5.5", Decimal("5.5")),
            (42, Decimal("42")),
            (Decimal("7.25"), Decimal("7.25")),
            (3.5, Decimal("3.5")),
        ],
    )
    def test_accepted(self, raw, expected):
        assert CreateProductDTO(**_payload(price=raw)).price == expected

    @pytest.mark.parametrize(
        "raw",
        ["12.345", "1234567", "-1.00", ".50", "abc", "", "1,50", True, None],
    )
    def test_rejected(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO(**_payload(price=raw))
        assert _error_fields(exc_info) == {"price"}


class TestCreateProductDTOQuantity:
    @pytest.mark.parametrize("value", [0, 100, 50])
    def test_accepted(self, value):
        assert CreateProductDTO(**_payload(quantity=value)).quantity == value

    @pytest.mark.parametrize("value", [-1, 101])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            CreateProductDTO(**_payload(quantity=value))

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO(**_payload(quantity="many"))
        assert _error_fields(exc_info) == {"quantity"}


class TestCreateProductDTOInvalid:
    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError, match="Name must not be empty"):
            CreateProductDTO(**_payload(name="   "))

    def test_empty_sku_rejected(self):
        with pytest.raises(ValidationError, match="SKU must not be empty"):
            CreateProductDTO(**_payload(sku=""))

    def test_too_long_sku_rejected(self):
        with pytest.raises(ValidationError, match="at most 64"):
            CreateProductDTO(**_payload(sku="X" * 65))

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO(**_payload(type="streamable"))
        assert _error_fields(exc_info) == {"type"}

    def test_missing_fields_all_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO()
        assert _error_fields(exc_info) == {"name", "sku", "price", "quantity", "type"}

    def test_too_long_image_rejected(self):
        with pytest.raises(ValidationError, match="at most 255") as exc_info:
            CreateProductDTO(**_payload(image="x" * 256))
        assert _error_fields(exc_info) == {"image"}

    def test_image_at_limit_accepted(self):
        assert CreateProductDTO(**_payload(image="x" * 255)).image == "x" * 255


# ===========================================================================
# UpdateProductDTO
# ===========================================================================


class TestUpdateProductDTO:
    def test_all_fields_optional(self):
        dto = UpdateProductDTO()
        assert dto.changes() == {}

    def test_changes_only_contains_supplied_fields(self):
        dto = UpdateProductDTO(name="New Name", quantity=5)
        assert dto.changes() == {"name": "New Name", "quantity": 5}

    def test_explicit_null_brand_is_a_change(self):
        dto = UpdateProductDTO(brand_id=None)
        assert dto.changes() == {"brand_id": None}

    def test_same_rules_as_create(self):
        with pytest.raises(ValidationError) as exc_info:
            UpdateProductDTO(price="12.345", quantity=101, name=" ")
        assert _error_fields(exc_info) == {"price", "quantity", "name"}

    @pytest.mark.parametrize("field", ["name", "sku", "price", "quantity", "type", "is_visible"])
    def test_null_rejected_for_required_fields(self, field):
        with pytest.raises(ValidationError, match="may not be null"):
            UpdateProductDTO(**{field: None})

    def test_null_description_becomes_blank(self):
        assert UpdateProductDTO(description=None).changes() == {"description": ""}

    def test_too_long_image_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            UpdateProductDTO(image="x" * 300)
        assert _error_fields(exc_info) == {"image"}

    def test_null_image_becomes_blank(self):
        assert UpdateProductDTO(image=None).changes() == {"image": ""}

    def test_slug_is_not_an_update_field(self):
        assert "slug" not in UpdateProductDTO(slug="other").changes()


# ===========================================================================
# Output DTOs
# ===========================================================================


def _saved_product(brand=None, **overrides) -> Product:
    defaults = {
        "name": "Widget",
        "slug": "widget",
        "sku": "SKU-001",
        "price": Decimal("19.99"),
        "quantity": 10,
        "type": ProductType.DELIVERABLE,
        "published_at": date(2026, 1, 15),
        "brand": brand,
    }
    defaults.update(overrides)
    return Product.objects.create(**defaults)


class TestProductOutputDTO:
    def test_from_entity(self, brand):
        product = _saved_product(brand=brand, description="Nice")
        dto = ProductOutputDTO.from_entity(product)
        assert dto.id == product.id
        assert dto.slug == "widget"
        assert dto.price == Decimal("19.99")
        assert dto.type == "deliverable"
        assert dto.brand == BrandRefDTO(id=brand.id, name="Acme")
        assert dto.published_at == date(2026, 1, 15)

    def test_from_entity_without_brand(self):
        dto = ProductOutputDTO.from_entity(_saved_product())
        assert dto.brand is None


class TestProductSearchResultDTO:
    def test_details_carry_brand_and_description(self, brand):
        product = _saved_product(brand=brand, description="Hot-swappable")
        dto = ProductSearchResultDTO.from_entity(product)
        assert dto.title == "Widget"
        assert dto.details == {"Brand": "Acme", "Description": "Hot-swappable"}

    def test_details_are_empty_without_brand(self):
        dto = ProductSearchResultDTO.from_entity(_saved_product())
        assert dto.details == {"Brand": "", "Description": ""}


# ===========================================================================
# ProductValidationError
# ===========================================================================


class TestProductValidationErrorFromPydantic:
    def test_errors_keyed_by_field(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO(**_payload(price="12.345", quantity=-1, name=""))
        error = ProductValidationError.from_pydantic(exc_info.value)
        assert set(error.errors) == {"price", "quantity", "name"}
        assert error.errors["quantity"] == ["Quantity must be between 0 and 100."]
        assert error.errors["name"] == ["Name must not be empty."]

    def test_missing_field_uses_pydantic_message(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO(**{k: v for k, v in _payload().items() if k != "sku"})
        error = ProductValidationError.from_pydantic(exc_info.value)
        assert error.errors == {"sku": ["Field required"]}

    def test_message_lists_every_field(self):
        error = ProductValidationError({"price": ["bad"], "quantity": ["worse"]})
        assert "price: bad" in str(error)
        assert "quantity: worse" in str(error)
