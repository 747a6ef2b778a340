"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the SQL repositories
but keep everything in dicts. No database, no side effects.

FakeInventoryRepository is still safe under threads: ``locked()`` takes a
per-material lock in ascending id order and works on copies, so it can be
used for the concurrency tests. FakeUnitOfWork serializes transactions
like SQLite's BEGIN IMMEDIATE and restores its enlisted repositories when a
block raises.
"""

from __future__ import annotations

import copy
import threading
from contextlib import ExitStack, contextmanager
from dataclasses import replace
from typing import Iterable, Iterator

from mapcraft.domain.model.inventory import InventoryRecord
from mapcraft.domain.model.material import Material, MaterialKind
from mapcraft.domain.model.product import MapProduct
from mapcraft.domain.model.reservation import Reservation, ReturnRecord
from mapcraft.domain.model.value_objects import Money
from mapcraft.domain.repository.inventory_repository import InventoryRepository
from mapcraft.domain.repository.material_catalog import MaterialCatalog
from mapcraft.domain.repository.product_repository import ProductRepository
from mapcraft.domain.repository.reservation_repository import ReservationRepository
from mapcraft.domain.repository.unit_of_work import UnitOfWork


def material(material_id: str, cost: str = "5.00") -> Material:
    kind = MaterialKind.ACRYLIC if material_id.startswith("ACRYLIC") else MaterialKind.WOOD
    return Material(
        id=material_id,
        name=material_id.replace("_", " ").title(),
        kind=kind,
        unit_cost=Money.of(cost),
    )


class FakeMaterialCatalog(MaterialCatalog):

    def __init__(self, materials: list[Material] | None = None) -> None:
        self._store: dict[str, Material] = {}
        for m in materials or []:
            self._store[m.id] = m

    def get(self, material_id: str) -> Material | None:
        return self._store.get(material_id)

    def list_all(self) -> list[Material]:
        return [self._store[mid] for mid in sorted(self._store)]

    def save(self, material: Material) -> None:
        self._store[material.id] = material


class FakeInventoryRepository(InventoryRepository):

    def __init__(self, records: list[InventoryRecord] | None = None) -> None:
        self._store: dict[str, InventoryRecord] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()
        self.lock_order: list[list[str]] = []
        for record in records or []:
            self.add(record)

    def get(self, material_id: str) -> InventoryRecord | None:
        record = self._store.get(material_id)
        return copy.copy(record) if record is not None else None

    def list_all(self) -> list[InventoryRecord]:
        return [copy.copy(self._store[mid]) for mid in sorted(self._store)]

    def add(self, record: InventoryRecord) -> None:
        with self._guard:
            self._store[record.material_id] = copy.copy(record)
            self._locks.setdefault(record.material_id, threading.Lock())

    @contextmanager
    def locked(self, material_ids: Iterable[str]) -> Iterator[dict[str, InventoryRecord]]:
        ids = sorted(set(material_ids))
        with self._guard:
            locks = [self._locks[mid] for mid in ids if mid in self._locks]
        self.lock_order.append([mid for mid in ids if mid in self._locks])
        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)
            working = {
                mid: replace(self._store[mid]) for mid in ids if mid in self._store
            }
            yield working
            for mid, record in working.items():
                self._store[mid] = record

    def snapshot(self) -> dict[str, InventoryRecord]:
        return {mid: replace(rec) for mid, rec in self._store.items()}

    def restore(self, state: dict[str, InventoryRecord]) -> None:
        self._store = state


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[MapProduct] | None = None) -> None:
        self._store: dict[str, MapProduct] = {}
        for p in products or []:
            self._store[p.id] = p

    def get_by_id(self, product_id: str) -> MapProduct | None:
        return self._store.get(product_id)

    def list_by_category(self, category: str) -> list[MapProduct]:
        return [p for p in self.list_all() if p.category == category]

    def list_all(self) -> list[MapProduct]:
        return [self._store[pid] for pid in sorted(self._store)]

    def save(self, product: MapProduct) -> None:
        self._store[product.id] = product


class FakeReservationRepository(ReservationRepository):

    def __init__(self) -> None:
        self._store: dict[int, Reservation] = {}
        self._returns: list[ReturnRecord] = []
        self._next_id = 1
        self._guard = threading.Lock()

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        reservation = self._store.get(reservation_id)
        return copy.deepcopy(reservation) if reservation is not None else None

    def get_for_update(self, reservation_id: int) -> Reservation | None:
        return self.get_by_id(reservation_id)

    def save(self, reservation: Reservation) -> None:
        with self._guard:
            if reservation.id is None:
                reservation.id = self._next_id
                self._next_id += 1
            self._store[reservation.id] = copy.deepcopy(reservation)

    def add_return(self, record: ReturnRecord) -> ReturnRecord:
        with self._guard:
            stored = replace(record, id=len(self._returns) + 1)
            self._returns.append(stored)
            return stored

    def list_returns(self, reservation_id: int) -> list[ReturnRecord]:
        return [r for r in self._returns if r.reservation_id == reservation_id]

    def snapshot(self) -> tuple:
        return copy.deepcopy(self._store), list(self._returns), self._next_id

    def restore(self, state: tuple) -> None:
        self._store, self._returns, self._next_id = state


class FakeUnitOfWork(UnitOfWork):

    def __init__(self, *participants) -> None:
        super().__init__()
        self._participants = list(participants)
        self._lock = threading.Lock()

    def enlist(self, participant) -> None:
        self._participants.append(participant)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        with self._lock:
            states = [p.snapshot() for p in self._participants]
            try:
                yield
            except Exception:
                for participant, state in zip(self._participants, states):
                    participant.restore(state)
                raise
