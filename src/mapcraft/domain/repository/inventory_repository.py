"""Abstract repository for InventoryRecord aggregates.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (in-process, SQL) live in the
infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterable

from mapcraft.domain.model.inventory import InventoryRecord


class InventoryRepository(ABC):

    @abstractmethod
    def get(self, material_id: str) -> InventoryRecord | None:
        """Return a detached copy of a material's record, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryRecord]:
        """Return every record, ordered by material id."""

    @abstractmethod
    def add(self, record: InventoryRecord) -> None:
        """Create the record for a newly catalogued material."""

    @abstractmethod
    def locked(
        self, material_ids: Iterable[str]
    ) -> AbstractContextManager[dict[str, InventoryRecord]]:
        """Open an atomic unit of work over *material_ids*.

        Implementations must:
        - lock every listed material, in ascending id order, before
          yielding anything;
        - yield ``{material_id: record}`` for the ids that exist;
        - write back every yielded record on a clean exit, all at once;
        - write back nothing if the block raises.
        """
