"""SQL-backed implementation of ReservationRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from mapcraft.domain.exceptions import Shortage
from mapcraft.domain.model.configuration import (
    configuration_from_dict,
    configuration_to_dict,
)
from mapcraft.domain.model.reservation import (
    Rejection,
    RejectionKind,
    ReleaseReason,
    Reservation,
    ReservationStatus,
    ReturnRecord,
)
from mapcraft.domain.repository.reservation_repository import ReservationRepository
from mapcraft.infrastructure.persistence.engine import session_scope
from mapcraft.infrastructure.persistence.orm import ReservationRow, ReturnRow


class SqlReservationRepository(ReservationRepository):

    def __init__(self, factory: sessionmaker[Session]) -> None:
        self._factory = factory

    # --- ReservationRepository interface --------------------------------------

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        with session_scope(self._factory) as session:
            row = session.get(ReservationRow, reservation_id)
            return self._to_domain(row) if row is not None else None

    def get_for_update(self, reservation_id: int) -> Reservation | None:
        with session_scope(self._factory) as session:
            row = session.execute(
                select(ReservationRow)
                .where(ReservationRow.id == reservation_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            return self._to_domain(row) if row is not None else None

    def save(self, reservation: Reservation) -> None:
        with session_scope(self._factory) as session:
            row = None
            if reservation.id is not None:
                row = session.get(ReservationRow, reservation.id)
            if row is None:
                row = ReservationRow()
                session.add(row)
            self._copy_to_row(reservation, row)
            session.flush()
            reservation.id = row.id

    def add_return(self, record: ReturnRecord) -> ReturnRecord:
        with session_scope(self._factory) as session:
            row = ReturnRow(
                reservation_id=record.reservation_id,
                quantities=dict(record.quantities),
                reason=record.reason,
                created_at=record.created_at,
            )
            session.add(row)
            session.flush()
            return ReturnRecord(
                id=row.id,
                reservation_id=record.reservation_id,
                quantities=dict(record.quantities),
                reason=record.reason,
                created_at=record.created_at,
            )

    def list_returns(self, reservation_id: int) -> list[ReturnRecord]:
        with session_scope(self._factory) as session:
            rows = session.execute(
                select(ReturnRow)
                .where(ReturnRow.reservation_id == reservation_id)
                .order_by(ReturnRow.id)
            ).scalars()
            return [
                ReturnRecord(
                    id=row.id,
                    reservation_id=row.reservation_id,
                    quantities=dict(row.quantities),
                    reason=row.reason,
                    created_at=row.created_at,
                )
                for row in rows
            ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _copy_to_row(reservation: Reservation, row: ReservationRow) -> None:
        row.quantity = reservation.quantity
        row.status = reservation.status.value
        row.release_reason = (
            reservation.release_reason.value if reservation.release_reason else None
        )
        row.configuration = configuration_to_dict(reservation.configuration)
        row.requirements = dict(reservation.requirements)
        row.rejection = _rejection_to_raw(reservation.rejection)
        row.created_at = reservation.created_at
        row.updated_at = reservation.updated_at

    @staticmethod
    def _to_domain(row: ReservationRow) -> Reservation:
        return Reservation(
            id=row.id,
            configuration=configuration_from_dict(row.configuration),
            quantity=row.quantity,
            requirements={mid: int(qty) for mid, qty in sorted(row.requirements.items())},
            status=ReservationStatus(row.status),
            release_reason=ReleaseReason(row.release_reason) if row.release_reason else None,
            rejection=_rejection_from_raw(row.rejection),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


def _rejection_to_raw(rejection: Rejection | None) -> dict | None:
    if rejection is None:
        return None
    return {
        "kind": rejection.kind.value,
        "defects": list(rejection.defects),
        "shortages": [
            {"material_id": s.material_id, "required": s.required, "available": s.available}
            for s in rejection.shortages
        ],
    }


def _rejection_from_raw(raw: dict | None) -> Rejection | None:
    if raw is None:
        return None
    return Rejection(
        kind=RejectionKind(raw["kind"]),
        defects=tuple(raw.get("defects", [])),
        shortages=tuple(
            Shortage(s["material_id"], s["required"], s["available"])
            for s in raw.get("shortages", [])
        ),
    )
