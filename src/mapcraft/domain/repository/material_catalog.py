"""Abstract repository for the Material catalog.

Read-mostly. Additions are administrative and assumed to be serialized
outside this core.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mapcraft.domain.model.material import Material


class MaterialCatalog(ABC):

    @abstractmethod
    def get(self, material_id: str) -> Material | None:
        """Return a material by id, or None if it is not catalogued."""

    @abstractmethod
    def list_all(self) -> list[Material]:
        """Return every material, ordered by id."""

    @abstractmethod
    def save(self, material: Material) -> None:
        """Add a material to the catalog."""
