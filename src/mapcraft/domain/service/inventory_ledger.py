"""Domain service: Inventory Ledger.

The ledger is the only writer of ``on_hand`` and ``reserved``. Every
mutation runs inside one ``InventoryRepository.locked()`` unit of work that
covers exactly the materials it touches, so a multi-layer reservation is
either applied to every material or to none.

Each mutation is two-phase:
  Phase 1: validate every material against its locked record.
            Fails before any record changes.
  Phase 2: mutate every record; the unit of work writes them back together.

Every mutation joins the UnitOfWork the ledger was built with, so a caller
that opens one (the ReservationCoordinator) commits its own writes and the
ledger's together. Low-stock events are collected inside the unit of work and
published to subscribers only after the outermost transaction has committed.
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping

from mapcraft.domain.exceptions import (
    InsufficientStock,
    OverRelease,
    Shortage,
    UnknownMaterial,
    ValidationError,
)
from mapcraft.domain.model.events import LowStockCleared, LowStockRaised, StockEvent
from mapcraft.domain.model.inventory import InventoryRecord, LowStockPolicy
from mapcraft.domain.repository.inventory_repository import InventoryRepository
from mapcraft.domain.repository.material_catalog import MaterialCatalog
from mapcraft.domain.repository.unit_of_work import UnitOfWork
from mapcraft.logging_config import get_logger

logger = get_logger("ledger")

Subscriber = Callable[[StockEvent], None]


class InventoryLedger:

    def __init__(
        self,
        catalog: MaterialCatalog,
        inventory_repo: InventoryRepository,
        unit_of_work: UnitOfWork,
        policy: LowStockPolicy = LowStockPolicy.AT_OR_BELOW,
    ) -> None:
        self._catalog = catalog
        self._inventory_repo = inventory_repo
        self._uow = unit_of_work
        self._policy = policy
        self._subscribers: list[Subscriber] = []

    @property
    def policy(self) -> LowStockPolicy:
        return self._policy

    @property
    def unit_of_work(self) -> UnitOfWork:
        return self._uow

    def subscribe(self, handler: Subscriber) -> None:
        """Receive low-stock events after each committed mutation."""
        self._subscribers.append(handler)

    # --- Queries --------------------------------------------------------------

    def available(self, material_id: str) -> int:
        return self.record(material_id).available

    def record(self, material_id: str) -> InventoryRecord:
        self._require_catalogued([material_id])
        record = self._inventory_repo.get(material_id)
        if record is None:
            raise UnknownMaterial(material_id)
        return record

    def snapshot(self) -> list[InventoryRecord]:
        return self._inventory_repo.list_all()

    def low_stock(self) -> list[InventoryRecord]:
        return [r for r in self._inventory_repo.list_all() if r.is_low(self._policy)]

    # --- Administration -------------------------------------------------------

    def register(
        self, material_id: str, on_hand: int = 0, low_threshold: int = 0
    ) -> InventoryRecord:
        """Create the inventory record for a catalogued material."""
        self._require_catalogued([material_id])
        if self._inventory_repo.get(material_id) is not None:
            raise ValidationError(f"Inventory for '{material_id}' already exists")
        record = InventoryRecord(
            material_id=material_id,
            on_hand=on_hand,
            low_threshold=low_threshold,
        )
        record.low_stock_flagged = record.is_low(self._policy)
        self._inventory_repo.add(record)
        logger.info(
            "inventory_registered",
            extra={"material_id": material_id, "on_hand": on_hand},
        )
        return record

    # --- Mutations ------------------------------------------------------------

    def restock(self, material_id: str, quantity: int) -> None:
        """Add *quantity* physical units to ``on_hand``."""
        self.restock_all({material_id: quantity})

    def restock_all(self, quantities: Mapping[str, int]) -> None:
        """Add units of several materials to ``on_hand`` in one unit of work."""
        wanted = self._normalize(quantities)
        self._apply(wanted, "restock", lambda rec, qty: rec.restock(qty))
        logger.info("inventory_restocked", extra={"quantities": wanted})

    def reserve(self, requirements: Mapping[str, int]) -> None:
        """Reserve every material in *requirements*, or nothing at all.

        Raises InsufficientStock listing every short material, ordered by
        material id.
        """
        wanted = self._normalize(requirements)

        def check(records: dict[str, InventoryRecord]) -> None:
            shortages = [
                Shortage(mid, qty, records[mid].available)
                for mid, qty in wanted.items()
                if qty > records[mid].available
            ]
            if shortages:
                raise InsufficientStock(shortages)

        self._apply(wanted, "reserve", lambda rec, qty: rec.reserve(qty), check)

    def release(self, requirements: Mapping[str, int]) -> None:
        """Return reserved units to ``available``."""
        wanted = self._normalize(requirements)
        self._apply(
            wanted, "release", lambda rec, qty: rec.release(qty), self._over_release_check(wanted)
        )

    def consume(self, requirements: Mapping[str, int]) -> None:
        """Remove reserved units from the shop on fulfillment."""
        wanted = self._normalize(requirements)
        self._apply(
            wanted, "consume", lambda rec, qty: rec.consume(qty), self._over_release_check(wanted)
        )

    # --- Internal helpers -----------------------------------------------------

    def _apply(
        self,
        wanted: dict[str, int],
        action: str,
        mutate: Callable[[InventoryRecord, int], None],
        check: Callable[[dict[str, InventoryRecord]], None] | None = None,
    ) -> None:
        with self._uow.begin(), self._inventory_repo.locked(wanted) as records:
            missing = [mid for mid in wanted if mid not in records]
            if missing:
                raise UnknownMaterial(missing[0])

            # Phase 1: validate
            if check is not None:
                check(records)

            # Phase 2: mutate
            for mid, qty in wanted.items():
                mutate(records[mid], qty)

            events = self._flag_low_stock(records[mid] for mid in wanted)
            self._uow.after_commit(lambda: self._publish(events))

        logger.debug(
            "ledger_%s", action, extra={"requirements": wanted}
        )

    @staticmethod
    def _over_release_check(
        wanted: dict[str, int],
    ) -> Callable[[dict[str, InventoryRecord]], None]:
        def check(records: dict[str, InventoryRecord]) -> None:
            for mid, qty in wanted.items():
                if qty > records[mid].reserved:
                    raise OverRelease(mid, qty, records[mid].reserved)

        return check

    def _normalize(self, requirements: Mapping[str, int]) -> dict[str, int]:
        if not requirements:
            raise ValidationError("Requirements must name at least one material")
        for mid, qty in requirements.items():
            if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
                raise ValidationError(
                    f"Quantity for {mid} must be a positive integer, got {qty!r}"
                )
        self._require_catalogued(requirements)
        return {mid: requirements[mid] for mid in sorted(requirements)}

    def _require_catalogued(self, material_ids: Iterable[str]) -> None:
        for mid in sorted(material_ids):
            if self._catalog.get(mid) is None:
                raise UnknownMaterial(mid)

    def _flag_low_stock(self, records: Iterable[InventoryRecord]) -> list[StockEvent]:
        events: list[StockEvent] = []
        for record in records:
            if record.is_low(self._policy):
                record.low_stock_flagged = True
                events.append(
                    LowStockRaised(record.material_id, record.available, record.low_threshold)
                )
            elif record.low_stock_flagged:
                record.low_stock_flagged = False
                events.append(
                    LowStockCleared(record.material_id, record.available, record.low_threshold)
                )
        return events

    def _publish(self, events: list[StockEvent]) -> None:
        for event in events:
            logger.info(
                "low_stock_raised" if isinstance(event, LowStockRaised) else "low_stock_cleared",
                extra={
                    "material_id": event.material_id,
                    "available": event.available,
                    "threshold": event.threshold,
                },
            )
            for handler in self._subscribers:
                try:
                    handler(event)
                except Exception:
                    # Stock already committed; a failing subscriber must not
                    # undo it or starve the others.
                    logger.exception(
                        "low_stock_subscriber_failed",
                        extra={"material_id": event.material_id},
                    )
