"""Domain service: Reservation/Fulfillment Coordinator.

Ties an order line's lifecycle to the InventoryLedger. Each operation runs
in one unit of work shared with the ledger: the reservation row is locked
and its status checked, the stock changes, and the new status is saved,
all in the same transaction. Either every part commits or none does, and
a second caller on the same line (in this process or another) waits for
the lock and then sees the new status.

Expected failures of ``place_order`` (a malformed design, not enough stock)
come back as a REJECTED reservation carrying a structured Rejection.
Out-of-sequence calls (fulfilling a released line, cancelling a consumed
one) raise InvalidTransition.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from mapcraft.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStock,
    InvalidTransition,
    StructuralError,
)
from mapcraft.domain.model.configuration import ProductConfiguration
from mapcraft.domain.model.reservation import (
    Rejection,
    RejectionKind,
    ReleaseReason,
    Reservation,
    ReservationStatus,
    ReturnRecord,
)
from mapcraft.domain.model.value_objects import Quantity
from mapcraft.domain.repository.material_catalog import MaterialCatalog
from mapcraft.domain.repository.reservation_repository import ReservationRepository
from mapcraft.domain.service.configuration_rules import validate_structure
from mapcraft.domain.service.inventory_ledger import InventoryLedger
from mapcraft.logging_config import get_logger

logger = get_logger("coordinator")


class ReservationCoordinator:

    def __init__(
        self,
        catalog: MaterialCatalog,
        ledger: InventoryLedger,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._reservation_repo = reservation_repo
        self._uow = ledger.unit_of_work

    def get(self, reservation_id: int) -> Reservation:
        reservation = self._reservation_repo.get_by_id(reservation_id)
        if reservation is None:
            raise EntityNotFoundError(f"Reservation #{reservation_id} not found")
        return reservation

    def place_order(self, config: ProductConfiguration, quantity: int = 1) -> Reservation:
        """Reserve materials for *quantity* copies of *config*.

        Returns the reservation in RESERVED or REJECTED state. Any other
        failure rolls the whole call back, so no PENDING line is left behind.
        """
        copies = Quantity(quantity).value
        reservation = Reservation.open(config, copies)

        with self._uow.begin():
            self._reservation_repo.save(reservation)
            try:
                validate_structure(config, self._catalog)
                requirements = config.requirements(copies)
                self._ledger.reserve(requirements)
            except StructuralError as exc:
                return self._reject(
                    reservation, Rejection(RejectionKind.STRUCTURAL, defects=exc.defects)
                )
            except InsufficientStock as exc:
                return self._reject(
                    reservation, Rejection(RejectionKind.OUT_OF_STOCK, shortages=exc.shortages)
                )

            reservation.mark_reserved(requirements)
            self._reservation_repo.save(reservation)

        logger.info(
            "reservation_placed",
            extra={
                "reservation_id": reservation.id,
                "quantity": copies,
                "requirements": requirements,
            },
        )
        return reservation

    def fulfill(self, reservation_id: int) -> Reservation:
        with self._transition(reservation_id) as reservation:
            reservation.ensure_can(ReservationStatus.RESERVED, "fulfill")
            self._ledger.consume(reservation.requirements)
            reservation.consume()
            self._reservation_repo.save(reservation)
        logger.info("reservation_fulfilled", extra={"reservation_id": reservation_id})
        return reservation

    def cancel(self, reservation_id: int) -> Reservation:
        return self._release(reservation_id, ReleaseReason.CANCELLED)

    def refund(self, reservation_id: int) -> Reservation:
        """Refund before fulfillment; after fulfillment use ``return_fulfilled``."""
        return self._release(reservation_id, ReleaseReason.REFUNDED)

    def return_fulfilled(self, reservation_id: int, reason: str = "refund") -> ReturnRecord:
        """Put the materials of a fulfilled order back on the shelf.

        The units already left ``on_hand``, so this is a restock of every
        required material plus an audit record, not a ledger release.
        A fulfilled line can be returned once.
        """
        with self._transition(reservation_id) as reservation:
            reservation.ensure_can(ReservationStatus.CONSUMED, "return")
            if self._reservation_repo.list_returns(reservation_id):
                raise InvalidTransition(reservation_id, "RETURNED", "return")
            self._ledger.restock_all(reservation.requirements)
            record = self._reservation_repo.add_return(
                ReturnRecord(
                    id=None,
                    reservation_id=reservation_id,
                    quantities=dict(reservation.requirements),
                    reason=reason,
                )
            )
        logger.info(
            "reservation_returned",
            extra={"reservation_id": reservation_id, "return_id": record.id},
        )
        return record

    # --- Internal helpers -----------------------------------------------------

    @contextmanager
    def _transition(self, reservation_id: int) -> Iterator[Reservation]:
        """Open a unit of work holding the reservation row locked."""
        with self._uow.begin():
            reservation = self._reservation_repo.get_for_update(reservation_id)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation #{reservation_id} not found")
            yield reservation

    def _release(self, reservation_id: int, reason: ReleaseReason) -> Reservation:
        with self._transition(reservation_id) as reservation:
            reservation.ensure_can(ReservationStatus.RESERVED, reason.action)
            self._ledger.release(reservation.requirements)
            reservation.release(reason)
            self._reservation_repo.save(reservation)
        logger.info(
            "reservation_released",
            extra={"reservation_id": reservation_id, "reason": reason.value},
        )
        return reservation

    def _reject(self, reservation: Reservation, rejection: Rejection) -> Reservation:
        reservation.reject(rejection)
        self._reservation_repo.save(reservation)
        logger.info(
            "reservation_rejected",
            extra={
                "reservation_id": reservation.id,
                "kind": rejection.kind.value,
                "detail": str(rejection),
            },
        )
        return reservation
