"""Helpers for assembling configurations and wired services in tests."""

from __future__ import annotations

from mapcraft.domain.model.configuration import (
    FrameStyle,
    Layer,
    Location,
    ProductConfiguration,
    Size,
)
from mapcraft.domain.model.inventory import InventoryRecord, LowStockPolicy
from mapcraft.domain.service.configuration_validator import ConfigurationValidator
from mapcraft.domain.service.inventory_ledger import InventoryLedger
from mapcraft.domain.service.reservation_coordinator import ReservationCoordinator
from tests.fakes import (
    FakeInventoryRepository,
    FakeMaterialCatalog,
    FakeReservationRepository,
    FakeUnitOfWork,
    material,
)


def config(frame: str, *layers: str, depths: list[int] | None = None) -> ProductConfiguration:
    """Configuration with a *frame* material and one layer per material given."""
    depths = depths or list(range(1, len(layers) + 1))
    return ProductConfiguration(
        location=Location("Chicago", 41.8781, -87.6298, 12),
        frame=FrameStyle("Classic", frame),
        size=Size(300, 400),
        layers=tuple(Layer(d, mid) for d, mid in zip(depths, layers)),
    )


def ledger_with(
    *stock: tuple[str, int, int, int],
    policy: LowStockPolicy = LowStockPolicy.AT_OR_BELOW,
) -> tuple[InventoryLedger, FakeInventoryRepository, FakeMaterialCatalog]:
    """Ledger over (material_id, on_hand, reserved, low_threshold) tuples."""
    catalog = FakeMaterialCatalog([material(mid) for mid, *_ in stock])
    repo = FakeInventoryRepository(
        [
            InventoryRecord(material_id=mid, on_hand=on_hand, reserved=reserved, low_threshold=low)
            for mid, on_hand, reserved, low in stock
        ]
    )
    return InventoryLedger(catalog, repo, FakeUnitOfWork(repo), policy), repo, catalog


def services_with(*stock: tuple[str, int, int, int]):
    """Ledger, validator and coordinator sharing one set of fakes."""
    ledger, inventory_repo, catalog = ledger_with(*stock)
    reservations = FakeReservationRepository()
    ledger.unit_of_work.enlist(reservations)
    validator = ConfigurationValidator(catalog, ledger)
    coordinator = ReservationCoordinator(catalog, ledger, reservations)
    return ledger, validator, coordinator, reservations
