from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.brands.models import Brand
from modules.brands.repositories.django_repository import BrandDjangoRepository
from modules.products.constants import ProductType
from modules.products.exceptions import ProductAlreadyExists
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService


class Command(BaseCommand):
    help = "Seed the catalog with brands and products for development."

    BRANDS = [
        ("Northwind", "Home office furniture."),
        ("Acme", "Peripherals and small electronics."),
        ("Paperline", "Stationery."),
    ]

    CATALOG = [
        ("NW-001", "Standing Desk", "Northwind", Decimal("899.00"), 12, ProductType.DELIVERABLE),
        ("NW-002", "Ergonomic Chair", "Northwind", Decimal("1499.00"), 8, ProductType.DELIVERABLE),
        ("AC-001", "Mechanical Keyboard", "Acme", Decimal("399.90"), 40, ProductType.DELIVERABLE),
        ("AC-002", "Keyboard Firmware Pack", "Acme", Decimal("19.90"), 100, ProductType.DOWNLOADABLE),
        ("AC-003", "Café Mug Warmer", "Acme", Decimal("24.50"), 65, ProductType.DELIVERABLE),
        ("PL-001", "Printable Planner 2026", "Paperline", Decimal("9.90"), 100, ProductType.DOWNLOADABLE),
        ("PL-002", "A4 Notebook", None, Decimal("4.90"), 90, ProductType.DELIVERABLE),
    ]

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog...")
        brand_repo = BrandDjangoRepository()
        service = ProductService(
            repository=ProductDjangoRepository(),
            brand_repository=brand_repo,
        )

        brands = {}
        for name, description in self.BRANDS:
            brand = brand_repo.get_by_name(name)
            if brand is None:
                brand = brand_repo.save(Brand(name=name, description=description))
            brands[name] = brand

        created = skipped = 0
        for sku, name, brand_name, price, quantity, product_type in self.CATALOG:
            brand = brands.get(brand_name)
            try:
                service.create_product(
                    {
                        "sku": sku,
                        "name": name,
                        "price": price,
                        "quantity": quantity,
                        "type": product_type,
                        "brand_id": brand.id if brand else None,
                    }
                )
            except ProductAlreadyExists:
                skipped += 1
                continue
            created += 1

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"brands={len(brands)}, "
                f"products_created={created}, "
                f"products_skipped={skipped}"
            )
        )
