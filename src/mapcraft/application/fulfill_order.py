"""Application service: Fulfill Order use case.

The materials physically leave the workshop: reserved stock is consumed.
"""

from __future__ import annotations

from mapcraft.application.dto import ReservationDTO
from mapcraft.domain.service.reservation_coordinator import ReservationCoordinator


class FulfillOrderHandler:

    def __init__(self, coordinator: ReservationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, reservation_id: int) -> ReservationDTO:
        return ReservationDTO.from_domain(self._coordinator.fulfill(reservation_id))
