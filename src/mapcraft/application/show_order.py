"""Application service: Show Order use case (query)."""

from __future__ import annotations

from mapcraft.application.dto import ReservationDTO
from mapcraft.domain.service.reservation_coordinator import ReservationCoordinator


class ShowOrderHandler:

    def __init__(self, coordinator: ReservationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, reservation_id: int) -> ReservationDTO:
        return ReservationDTO.from_domain(self._coordinator.get(reservation_id))
