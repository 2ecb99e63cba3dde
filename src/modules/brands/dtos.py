"""Brand DTOs exposed to other modules."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.brands.models import Brand


class BrandRefDTO(BaseModel):
    """The ``{id, name}`` view of a brand that the catalog relies on."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str

    @classmethod
    def from_entity(cls, brand: Brand) -> BrandRefDTO:
        return cls(id=brand.id, name=brand.name)
