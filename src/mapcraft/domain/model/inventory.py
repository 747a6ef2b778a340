"""InventoryRecord aggregate: tracks stock and reservations per material.

Each material has one InventoryRecord that knows how many units are on hand
and how many of them are committed to active reservations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mapcraft.domain.exceptions import OverRelease, ValidationError


class LowStockPolicy(Enum):
    """How ``available`` is compared against ``low_threshold``."""

    AT_OR_BELOW = "AT_OR_BELOW"
    BELOW = "BELOW"

    def is_low(self, available: int, threshold: int) -> bool:
        if self is LowStockPolicy.BELOW:
            return available < threshold
        return available <= threshold


@dataclass
class InventoryRecord:
    """Aggregate root for per-material stock.

    Invariants:
    - ``0 <= reserved <= on_hand``
    - ``available`` is always >= 0

    Only the InventoryLedger mutates these records.
    """

    material_id: str
    on_hand: int
    reserved: int = 0
    low_threshold: int = 0
    low_stock_flagged: bool = False

    def __post_init__(self) -> None:
        if self.on_hand < 0 or self.reserved < 0:
            raise ValidationError(
                f"Inventory for {self.material_id} cannot be negative"
            )
        if self.reserved > self.on_hand:
            raise ValidationError(
                f"Inventory for {self.material_id} reserves {self.reserved} "
                f"of only {self.on_hand} on hand"
            )
        if self.low_threshold < 0:
            raise ValidationError("Low-stock threshold cannot be negative")

    @property
    def available(self) -> int:
        return self.on_hand - self.reserved

    def reserve(self, quantity: int) -> None:
        """Commit *quantity* units to a reservation.

        Callers check availability for the whole requirement set first;
        this guard only protects the record's own invariant.
        """
        _require_positive(quantity, "Reservation")
        if quantity > self.available:
            raise ValidationError(
                f"Insufficient inventory for {self.material_id} "
                f"(need {quantity}, have {self.available} available)"
            )
        self.reserved += quantity

    def release(self, quantity: int) -> None:
        """Return reserved units to the available pool."""
        _require_positive(quantity, "Release")
        if quantity > self.reserved:
            raise OverRelease(self.material_id, quantity, self.reserved)
        self.reserved -= quantity

    def consume(self, quantity: int) -> None:
        """Reserved units physically leave the shop.

        Both ``on_hand`` and ``reserved`` decrease by the same amount.
        """
        _require_positive(quantity, "Consume")
        if quantity > self.reserved:
            raise OverRelease(self.material_id, quantity, self.reserved)
        self.reserved -= quantity
        self.on_hand -= quantity

    def restock(self, quantity: int) -> None:
        _require_positive(quantity, "Restock")
        self.on_hand += quantity

    def is_low(self, policy: LowStockPolicy = LowStockPolicy.AT_OR_BELOW) -> bool:
        return policy.is_low(self.available, self.low_threshold)


def _require_positive(quantity: int, action: str) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"{action} quantity must be a positive integer")
