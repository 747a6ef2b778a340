"""SQL-backed implementation of InventoryRepository.

``locked()`` runs in a single transaction: it selects the requested rows
``ORDER BY material_id FOR UPDATE`` so two multi-material reservations
always lock in the same order, hands detached domain records to the
caller, and copies them back onto the rows before committing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from mapcraft.domain.model.inventory import InventoryRecord
from mapcraft.domain.repository.inventory_repository import InventoryRepository
from mapcraft.infrastructure.persistence.engine import session_scope
from mapcraft.infrastructure.persistence.orm import InventoryRow


class SqlInventoryRepository(InventoryRepository):

    def __init__(self, factory: sessionmaker[Session]) -> None:
        self._factory = factory

    # --- InventoryRepository interface ----------------------------------------

    def get(self, material_id: str) -> InventoryRecord | None:
        with session_scope(self._factory) as session:
            row = session.get(InventoryRow, material_id)
            return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[InventoryRecord]:
        with session_scope(self._factory) as session:
            rows = session.execute(
                select(InventoryRow).order_by(InventoryRow.material_id)
            ).scalars()
            return [self._to_domain(row) for row in rows]

    def add(self, record: InventoryRecord) -> None:
        with session_scope(self._factory) as session:
            session.add(
                InventoryRow(
                    material_id=record.material_id,
                    on_hand=record.on_hand,
                    reserved=record.reserved,
                    low_threshold=record.low_threshold,
                    low_stock_flagged=record.low_stock_flagged,
                )
            )

    @contextmanager
    def locked(self, material_ids: Iterable[str]) -> Iterator[dict[str, InventoryRecord]]:
        ids = sorted(set(material_ids))
        with session_scope(self._factory) as session:
            rows = session.execute(
                select(InventoryRow)
                .where(InventoryRow.material_id.in_(ids))
                .order_by(InventoryRow.material_id)
                .with_for_update()
            ).scalars().all()
            records = {row.material_id: self._to_domain(row) for row in rows}

            yield records

            for row in rows:
                record = records[row.material_id]
                row.on_hand = record.on_hand
                row.reserved = record.reserved
                row.low_threshold = record.low_threshold
                row.low_stock_flagged = record.low_stock_flagged

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: InventoryRow) -> InventoryRecord:
        return InventoryRecord(
            material_id=row.material_id,
            on_hand=row.on_hand,
            reserved=row.reserved,
            low_threshold=row.low_threshold,
            low_stock_flagged=row.low_stock_flagged,
        )
