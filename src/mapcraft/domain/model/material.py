"""Material: a buildable raw material (a wood or acrylic sheet kind).

Materials are immutable catalog entries. Configurations and inventory
records refer to them by ``id`` only, so later catalog edits never change
what a placed order was built from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mapcraft.domain.exceptions import ValidationError
from mapcraft.domain.model.value_objects import Money


class MaterialKind(Enum):
    WOOD = "WOOD"
    ACRYLIC = "ACRYLIC"


@dataclass(frozen=True)
class Material:

    id: str
    name: str
    kind: MaterialKind
    unit_cost: Money
    unit: str = "sheet"

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("Material id is required")
        if not self.name or not self.name.strip():
            raise ValidationError("Material name is required")
