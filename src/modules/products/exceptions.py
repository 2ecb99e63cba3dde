"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
Callers (admin screens, management commands) catch these and render
them; the service never retries on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

if TYPE_CHECKING:
    from pydantic import ValidationError

_FIELD_LABELS = {"name": "Name", "slug": "Slug", "sku": "SKU"}


class ProductValidationError(Exception):
    """One or more submitted fields are missing, malformed or out of range.

    ``errors`` maps each offending field to every reason found for it, so
    a single submission reports all of its problems at once.
    """

    def __init__(self, errors: Dict[str, List[str]]) -> None:
        self.errors = errors
        super().__init__(
            "; ".join(f"{field}: {', '.join(reasons)}" for field, reasons in errors.items())
        )

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> ProductValidationError:
        errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "__all__"
            if error["type"] == "value_error":
                reason = str(error["ctx"]["error"])
            else:
                reason = error["msg"]
            errors.setdefault(field, []).append(reason)
        return cls(errors)


class ProductAlreadyExists(Exception):
    """``name``, ``slug`` or ``sku`` is already held by another product.

    Soft-deleted products still hold their identifiers.  Raised the same
    way whether the service caught the collision or the database
    constraint did.
    """

    def __init__(self, field: str, value: str | None = None) -> None:
        self.field = field
        self.value = value
        if value is None:
            message = f"A product with this {field} already exists."
        else:
            label = _FIELD_LABELS.get(field, field)
            message = f"{label} '{value}' already registered."
        super().__init__(message)


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""

    def __init__(self, id: str) -> None:
        self.id = id
        super().__init__(f"Product {id} not found.")
