"""Starter catalog: materials, opening stock and two template products."""

from __future__ import annotations

from mapcraft.domain.model.configuration import (
    FrameStyle,
    Layer,
    Location,
    MapStyle,
    ProductConfiguration,
    Size,
)
from mapcraft.domain.model.material import Material, MaterialKind
from mapcraft.domain.model.product import MapProduct
from mapcraft.domain.model.value_objects import Money
from mapcraft.domain.repository.material_catalog import MaterialCatalog
from mapcraft.domain.repository.product_repository import ProductRepository
from mapcraft.domain.service.inventory_ledger import InventoryLedger
from mapcraft.logging_config import get_logger

logger = get_logger("seed")

OPENING_STOCK = 40
LOW_THRESHOLD = 10

MATERIALS = [
    Material("ACRYLIC_BLACK", "Black acrylic", MaterialKind.ACRYLIC, Money.of("6.50")),
    Material("ACRYLIC_BLUE", "Blue acrylic", MaterialKind.ACRYLIC, Money.of("6.50")),
    Material("ACRYLIC_CLEAR", "Clear acrylic", MaterialKind.ACRYLIC, Money.of("5.75")),
    Material("ACRYLIC_WHITE", "White acrylic", MaterialKind.ACRYLIC, Money.of("6.50")),
    Material("WOOD_CHERRY", "Cherry plywood", MaterialKind.WOOD, Money.of("9.25")),
    Material("WOOD_MAPLE", "Maple plywood", MaterialKind.WOOD, Money.of("7.80")),
    Material("WOOD_OAK", "Oak plywood", MaterialKind.WOOD, Money.of("8.40")),
    Material("WOOD_WALNUT", "Walnut plywood", MaterialKind.WOOD, Money.of("11.00")),
]

TEMPLATES = [
    MapProduct(
        id="new-york-framed",
        name="New York City Framed Map",
        description=(
            "Multi-layer laser-cut map of Manhattan and the surrounding "
            "boroughs in a walnut frame."
        ),
        price=Money.of("149.99"),
        category="framed-maps",
        configuration=ProductConfiguration(
            location=Location("New York City", 40.7128, -74.0060, 12),
            frame=FrameStyle("Classic", "WOOD_WALNUT", "Dark Brown"),
            size=Size(300, 400),
            layers=(
                Layer(1, "WOOD_MAPLE", "Light Brown"),
                Layer(2, "ACRYLIC_BLUE", "Deep Blue"),
                Layer(3, "WOOD_WALNUT", "Dark Brown"),
            ),
            map_style=MapStyle.MINIMAL,
            custom_text="New York City",
        ),
    ),
    MapProduct(
        id="san-francisco-key-holder",
        name="San Francisco Key Holder Map",
        description="Laser-cut map of San Francisco that doubles as a key holder.",
        price=Money.of("79.99"),
        category="key-holder-maps",
        configuration=ProductConfiguration(
            location=Location("San Francisco", 37.7749, -122.4194, 13),
            frame=FrameStyle("Modern", "WOOD_OAK", "Natural"),
            size=Size(200, 300),
            layers=(
                Layer(1, "WOOD_OAK", "Natural"),
                Layer(2, "ACRYLIC_BLACK", "Black"),
            ),
            map_style=MapStyle.ROAD,
            custom_text="San Francisco",
        ),
    ),
]


def seed(
    catalog: MaterialCatalog,
    ledger: InventoryLedger,
    product_repo: ProductRepository,
) -> None:
    """Load the starter data; materials that already have stock are skipped."""
    stocked = {record.material_id for record in ledger.snapshot()}
    for material in MATERIALS:
        catalog.save(material)
        if material.id not in stocked:
            ledger.register(material.id, OPENING_STOCK, LOW_THRESHOLD)
    for product in TEMPLATES:
        product_repo.save(product)
    logger.info(
        "catalog_seeded",
        extra={"materials": len(MATERIALS), "products": len(TEMPLATES)},
    )
