"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from mapcraft.domain.model.configuration import ProductConfiguration
from mapcraft.domain.model.inventory import InventoryRecord, LowStockPolicy
from mapcraft.domain.model.product import MapProduct
from mapcraft.domain.model.reservation import Reservation


@dataclass(frozen=True)
class LayerDTO:

    depth: int
    material: str
    color: str | None


@dataclass(frozen=True)
class ProductDTO:
    """Output: a product with its configuration flattened for display."""

    id: str
    name: str
    category: str
    price: str
    is_template: bool
    location: str
    frame: str
    size: str
    layers: list[LayerDTO]

    @staticmethod
    def from_domain(product: MapProduct) -> ProductDTO:
        config: ProductConfiguration = product.configuration
        loc = config.location
        return ProductDTO(
            id=product.id,
            name=product.name,
            category=product.category,
            price=str(product.price),
            is_template=product.is_template,
            location=f"{loc.name} ({loc.latitude:.4f}, {loc.longitude:.4f}) z{loc.zoom_level}",
            frame=f"{config.frame.style} / {config.frame.material_id}",
            size=f"{config.size.width}x{config.size.height} mm",
            layers=[
                LayerDTO(depth=layer.depth, material=layer.material_id, color=layer.color)
                for layer in config.layers
            ],
        )


@dataclass(frozen=True)
class ReservationDTO:
    """Output: an order line's reservation as displayed to the user."""

    id: int
    status: str
    quantity: int
    requirements: dict[str, int]
    release_reason: str | None
    rejection: str | None
    retryable: bool | None
    created_at: str

    @staticmethod
    def from_domain(reservation: Reservation) -> ReservationDTO:
        rejection = reservation.rejection
        return ReservationDTO(
            id=reservation.id,  # type: ignore[arg-type]
            status=reservation.status.value,
            quantity=reservation.quantity,
            requirements=dict(reservation.requirements),
            release_reason=(
                reservation.release_reason.value if reservation.release_reason else None
            ),
            rejection=str(rejection) if rejection else None,
            retryable=rejection.retryable if rejection else None,
            created_at=reservation.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class InventoryLineDTO:

    material_id: str
    on_hand: int
    reserved: int
    available: int
    low_threshold: int
    low: bool

    @staticmethod
    def from_domain(record: InventoryRecord, policy: LowStockPolicy) -> InventoryLineDTO:
        return InventoryLineDTO(
            material_id=record.material_id,
            on_hand=record.on_hand,
            reserved=record.reserved,
            available=record.available,
            low_threshold=record.low_threshold,
            low=record.is_low(policy),
        )
