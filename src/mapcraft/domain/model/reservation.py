"""Reservation aggregate: inventory committed to one order line.

Lifecycle::

    PENDING -> RESERVED -> CONSUMED      (fulfilled)
    PENDING -> RESERVED -> RELEASED      (cancelled / refunded before fulfillment)
    PENDING -> REJECTED                  (structural defect or not enough stock)

``requirements`` is fixed when the reservation is created; afterwards only
the status moves. Stock changes happen in the InventoryLedger *before* the
matching transition is recorded here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from mapcraft.domain.exceptions import InvalidTransition, Shortage
from mapcraft.domain.model.configuration import ProductConfiguration


class ReservationStatus(Enum):
    PENDING = "PENDING"
    RESERVED = "RESERVED"
    CONSUMED = "CONSUMED"
    RELEASED = "RELEASED"
    REJECTED = "REJECTED"


class ReleaseReason(Enum):
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"

    @property
    def action(self) -> str:
        return "cancel" if self is ReleaseReason.CANCELLED else "refund"


class RejectionKind(Enum):
    STRUCTURAL = "STRUCTURAL"
    OUT_OF_STOCK = "OUT_OF_STOCK"


@dataclass(frozen=True)
class Rejection:
    """Why an order line could not be reserved."""

    kind: RejectionKind
    defects: tuple[str, ...] = ()
    shortages: tuple[Shortage, ...] = ()

    @property
    def retryable(self) -> bool:
        return self.kind is RejectionKind.OUT_OF_STOCK

    def __str__(self) -> str:
        if self.kind is RejectionKind.STRUCTURAL:
            return "; ".join(self.defects)
        return ", ".join(str(s) for s in self.shortages)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Reservation:
    """Aggregate root for an order line's material commitment.

    Use ``Reservation.open()`` for new order lines. The ``__init__`` stays
    simple so repositories can reconstitute persisted rows as they are.
    """

    id: int | None
    configuration: ProductConfiguration
    quantity: int
    requirements: dict[str, int]
    status: ReservationStatus = ReservationStatus.PENDING
    release_reason: ReleaseReason | None = None
    rejection: Rejection | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def open(configuration: ProductConfiguration, quantity: int) -> Reservation:
        return Reservation(
            id=None,
            configuration=configuration,
            quantity=quantity,
            requirements={},
        )

    # --- State transitions ----------------------------------------------------

    def mark_reserved(self, requirements: dict[str, int]) -> None:
        self._require(ReservationStatus.PENDING, "reserve")
        self.requirements = dict(requirements)
        self._move(ReservationStatus.RESERVED)

    def reject(self, rejection: Rejection) -> None:
        self._require(ReservationStatus.PENDING, "reject")
        self.rejection = rejection
        self._move(ReservationStatus.REJECTED)

    def consume(self) -> None:
        self._require(ReservationStatus.RESERVED, "fulfill")
        self._move(ReservationStatus.CONSUMED)

    def release(self, reason: ReleaseReason) -> None:
        self._require(ReservationStatus.RESERVED, reason.action)
        self.release_reason = reason
        self._move(ReservationStatus.RELEASED)

    # --- Guards ---------------------------------------------------------------

    def ensure_can(self, expected: ReservationStatus, action: str) -> None:
        """Raise InvalidTransition unless the reservation is in *expected*.

        Lets the coordinator check a transition before touching the ledger.
        """
        self._require(expected, action)

    def _require(self, expected: ReservationStatus, action: str) -> None:
        if self.status is not expected:
            raise InvalidTransition(self.id, self.status.value, action)

    def _move(self, status: ReservationStatus) -> None:
        self.status = status
        self.updated_at = _now()


@dataclass(frozen=True)
class ReturnRecord:
    """Audit row for stock physically returned after fulfillment."""

    id: int | None
    reservation_id: int
    quantities: dict[str, int]
    reason: str
    created_at: datetime = field(default_factory=_now)
