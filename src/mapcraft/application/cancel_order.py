"""Application service: Cancel / Refund Order use case.

Both release the reserved materials back to ``available``; they differ
only in the reason recorded on the reservation. Neither applies once the
order has been fulfilled; see ReturnOrderHandler for that.
"""

from __future__ import annotations

from mapcraft.application.dto import ReservationDTO
from mapcraft.domain.service.reservation_coordinator import ReservationCoordinator


class CancelOrderHandler:

    def __init__(self, coordinator: ReservationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, reservation_id: int, refund: bool = False) -> ReservationDTO:
        if refund:
            reservation = self._coordinator.refund(reservation_id)
        else:
            reservation = self._coordinator.cancel(reservation_id)
        return ReservationDTO.from_domain(reservation)
