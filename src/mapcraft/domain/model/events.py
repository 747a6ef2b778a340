"""Low-stock signals published by the InventoryLedger.

Delivery is at-least-once with no ordering promise across materials:
every mutation that leaves a material low publishes ``LowStockRaised``
again, and ``LowStockCleared`` follows the first mutation that lifts a
flagged material back above its threshold.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LowStockRaised:

    material_id: str
    available: int
    threshold: int


@dataclass(frozen=True)
class LowStockCleared:

    material_id: str
    available: int
    threshold: int


StockEvent = LowStockRaised | LowStockCleared
