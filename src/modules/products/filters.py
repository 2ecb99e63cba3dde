import django_filters

from modules.products.constants import ProductType
from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Filters and sort keys of the product listing.

    ``is_visible`` is ternary: leaving it out lists both visible and
    hidden products.
    """

    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    is_visible = django_filters.BooleanFilter(field_name="is_visible")
    brand = django_filters.UUIDFilter(field_name="brand_id")
    type = django_filters.ChoiceFilter(field_name="type", choices=ProductType.choices)
    ordering = django_filters.OrderingFilter(
        fields=(
            ("name", "name"),
            ("price", "price"),
            ("quantity", "quantity"),
            ("published_at", "published_at"),
            ("brand__name", "brand_name"),
        )
    )

    class Meta:
        model = Product
        fields = ["name", "is_visible", "brand", "type"]
