"""Abstract repository for MapProduct aggregates.

Every read returns the whole tree (location, frame, size, layers) in one
fetch, so callers never trigger per-field lookups.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mapcraft.domain.model.product import MapProduct


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> MapProduct | None:
        """Return a fully populated product, or None if not found."""

    @abstractmethod
    def list_by_category(self, category: str) -> list[MapProduct]:
        """Return every product in a category, fully populated."""

    @abstractmethod
    def list_all(self) -> list[MapProduct]:
        """Return every product, fully populated."""

    @abstractmethod
    def save(self, product: MapProduct) -> None:
        """Persist a new or updated product."""
