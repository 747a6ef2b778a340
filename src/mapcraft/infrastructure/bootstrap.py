"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from mapcraft import config
from mapcraft.domain.model.inventory import LowStockPolicy
from mapcraft.domain.service.configuration_validator import ConfigurationValidator
from mapcraft.domain.service.inventory_ledger import InventoryLedger
from mapcraft.domain.service.reservation_coordinator import ReservationCoordinator
from mapcraft.infrastructure.persistence.engine import init_engine, session_factory
from mapcraft.infrastructure.persistence.sql_inventory_repository import (
    SqlInventoryRepository,
)
from mapcraft.infrastructure.persistence.sql_material_catalog import SqlMaterialCatalog
from mapcraft.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
)
from mapcraft.infrastructure.persistence.sql_reservation_repository import (
    SqlReservationRepository,
)
from mapcraft.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


@dataclass(frozen=True)
class Container:

    catalog: SqlMaterialCatalog
    products: SqlProductRepository
    reservations: SqlReservationRepository
    ledger: InventoryLedger
    validator: ConfigurationValidator
    coordinator: ReservationCoordinator


def build(factory: sessionmaker[Session], policy: LowStockPolicy) -> Container:
    catalog = SqlMaterialCatalog(factory)
    reservations = SqlReservationRepository(factory)
    ledger = InventoryLedger(
        catalog, SqlInventoryRepository(factory), SqlUnitOfWork(factory), policy
    )
    return Container(
        catalog=catalog,
        products=SqlProductRepository(factory),
        reservations=reservations,
        ledger=ledger,
        validator=ConfigurationValidator(catalog, ledger),
        coordinator=ReservationCoordinator(catalog, ledger, reservations),
    )


def container(database_url: str | None = None) -> Container:
    """Build the service graph from environment settings."""
    url = database_url or config.DATABASE_URL
    if url.startswith("sqlite:///") and not url.endswith(":memory:"):
        Path(url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)
    engine = init_engine(url, echo=config.SQL_ECHO)
    return build(session_factory(engine), LowStockPolicy(config.LOW_STOCK_POLICY))
