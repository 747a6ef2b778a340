"""Application service: Return Order use case (refund after fulfillment)."""

from __future__ import annotations

from dataclasses import dataclass

from mapcraft.domain.service.reservation_coordinator import ReservationCoordinator


@dataclass(frozen=True)
class ReturnDTO:

    id: int
    reservation_id: int
    restocked: dict[str, int]
    reason: str


class ReturnOrderHandler:

    def __init__(self, coordinator: ReservationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, reservation_id: int, reason: str = "refund") -> ReturnDTO:
        record = self._coordinator.return_fulfilled(reservation_id, reason)
        return ReturnDTO(
            id=record.id,  # type: ignore[arg-type]
            reservation_id=record.reservation_id,
            restocked=dict(record.quantities),
            reason=record.reason,
        )
