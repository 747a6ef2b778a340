"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from mapcraft.application.dto import InventoryLineDTO
from mapcraft.domain.service.inventory_ledger import InventoryLedger


class ShowInventoryHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self, low_only: bool = False) -> list[InventoryLineDTO]:
        records = self._ledger.low_stock() if low_only else self._ledger.snapshot()
        return [
            InventoryLineDTO.from_domain(record, self._ledger.policy)
            for record in records
        ]
