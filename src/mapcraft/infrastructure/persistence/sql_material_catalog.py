"""SQL-backed implementation of MaterialCatalog."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from mapcraft.domain.model.material import Material, MaterialKind
from mapcraft.domain.model.value_objects import Money
from mapcraft.domain.repository.material_catalog import MaterialCatalog
from mapcraft.infrastructure.persistence.engine import session_scope
from mapcraft.infrastructure.persistence.orm import MaterialRow


class SqlMaterialCatalog(MaterialCatalog):

    def __init__(self, factory: sessionmaker[Session]) -> None:
        self._factory = factory

    # --- MaterialCatalog interface --------------------------------------------

    def get(self, material_id: str) -> Material | None:
        with session_scope(self._factory) as session:
            row = session.get(MaterialRow, material_id)
            return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Material]:
        with session_scope(self._factory) as session:
            rows = session.execute(select(MaterialRow).order_by(MaterialRow.id)).scalars()
            return [self._to_domain(row) for row in rows]

    def save(self, material: Material) -> None:
        with session_scope(self._factory) as session:
            session.merge(
                MaterialRow(
                    id=material.id,
                    name=material.name,
                    kind=material.kind.value,
                    unit=material.unit,
                    unit_cost=material.unit_cost.amount,
                    currency=material.unit_cost.currency,
                )
            )

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: MaterialRow) -> Material:
        return Material(
            id=row.id,
            name=row.name,
            kind=MaterialKind(row.kind),
            unit=row.unit,
            unit_cost=Money(row.unit_cost, row.currency),
        )
