"""Application service: Place Order use case.

Resolves what the shopper asked for (a catalog product, or a custom design
submitted as plain data) into a ProductConfiguration and hands it to the
coordinator. A REJECTED result is returned, not raised: the caller decides
whether to show "fix your design" or "come back later".
"""

from __future__ import annotations

from mapcraft.application.dto import ReservationDTO
from mapcraft.domain.exceptions import EntityNotFoundError
from mapcraft.domain.model.configuration import configuration_from_dict
from mapcraft.domain.repository.product_repository import ProductRepository
from mapcraft.domain.service.reservation_coordinator import ReservationCoordinator


class PlaceOrderHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        coordinator: ReservationCoordinator,
    ) -> None:
        self._product_repo = product_repo
        self._coordinator = coordinator

    def handle(self, product_id: str, quantity: int) -> ReservationDTO:
        """Order *quantity* copies of a catalog product."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        reservation = self._coordinator.place_order(product.configuration, quantity)
        return ReservationDTO.from_domain(reservation)

    def handle_custom(self, raw_configuration: dict, quantity: int) -> ReservationDTO:
        """Order *quantity* copies of a shopper's own design."""
        config = configuration_from_dict(raw_configuration)
        reservation = self._coordinator.place_order(config, quantity)
        return ReservationDTO.from_domain(reservation)
