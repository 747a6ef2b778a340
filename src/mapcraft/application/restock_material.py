"""Application service: Restock Material use case (administrative)."""

from __future__ import annotations

from mapcraft.application.dto import InventoryLineDTO
from mapcraft.domain.service.inventory_ledger import InventoryLedger


class RestockMaterialHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self, material_id: str, quantity: int) -> InventoryLineDTO:
        self._ledger.restock(material_id, quantity)
        return InventoryLineDTO.from_domain(
            self._ledger.record(material_id), self._ledger.policy
        )
