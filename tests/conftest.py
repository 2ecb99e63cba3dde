from decimal import Decimal

import pytest

from modules.brands.models import Brand
from modules.brands.repositories.django_repository import BrandDjangoRepository
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def brand():
    """A persisted Brand instance."""
    return Brand.objects.create(name="Acme", description="Peripherals")


@pytest.fixture()
def catalog_service():
    """ProductService wired to the Django repositories."""
    return ProductService(
        repository=ProductDjangoRepository(),
        brand_repository=BrandDjangoRepository(),
    )


@pytest.fixture()
def product_payload():
    """Raw input for a valid product, as an admin form would submit it."""
    return {
        "name": "Mechanical Keyboard",
        "sku": "KB-001",
        "price": "399.90",
        "quantity": 40,
        "type": "deliverable",
        "description": "Hot-swappable switches",
    }
