"""SQL-backed implementation of ProductRepository.

Every read eager-loads location, frame, size and layers with joins in the
same SELECT, so a category page costs one query however many products it
shows.
"""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, joinedload, sessionmaker

from mapcraft.domain.model.configuration import (
    FrameStyle,
    Layer,
    Location,
    MapStyle,
    ProductConfiguration,
    Size,
)
from mapcraft.domain.model.product import MapProduct
from mapcraft.domain.model.value_objects import Money
from mapcraft.domain.repository.product_repository import ProductRepository
from mapcraft.infrastructure.persistence.engine import session_scope
from mapcraft.infrastructure.persistence.orm import (
    FrameStyleRow,
    LayerRow,
    LocationRow,
    ProductRow,
    SizeRow,
)


def _aggregate_query() -> Select:
    return select(ProductRow).options(
        joinedload(ProductRow.location),
        joinedload(ProductRow.frame),
        joinedload(ProductRow.size),
        joinedload(ProductRow.layers),
    )


class SqlProductRepository(ProductRepository):

    def __init__(self, factory: sessionmaker[Session]) -> None:
        self._factory = factory

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> MapProduct | None:
        with session_scope(self._factory) as session:
            row = session.execute(
                _aggregate_query().where(ProductRow.id == product_id)
            ).unique().scalar_one_or_none()
            return self._to_domain(row) if row is not None else None

    def list_by_category(self, category: str) -> list[MapProduct]:
        with session_scope(self._factory) as session:
            rows = session.execute(
                _aggregate_query()
                .where(ProductRow.category == category)
                .order_by(ProductRow.id)
            ).unique().scalars()
            return [self._to_domain(row) for row in rows]

    def list_all(self) -> list[MapProduct]:
        with session_scope(self._factory) as session:
            rows = session.execute(
                _aggregate_query().order_by(ProductRow.id)
            ).unique().scalars()
            return [self._to_domain(row) for row in rows]

    def save(self, product: MapProduct) -> None:
        with session_scope(self._factory) as session:
            existing = session.get(ProductRow, product.id)
            if existing is not None:
                session.delete(existing)
                session.flush()
            session.add(self._to_row(product))

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_row(product: MapProduct) -> ProductRow:
        config = product.configuration
        return ProductRow(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price.amount,
            currency=product.price.currency,
            category=product.category,
            is_template=product.is_template,
            map_style=config.map_style.value,
            custom_text=config.custom_text,
            location=LocationRow(
                name=config.location.name,
                latitude=config.location.latitude,
                longitude=config.location.longitude,
                zoom_level=config.location.zoom_level,
            ),
            frame=FrameStyleRow(
                style=config.frame.style,
                material_id=config.frame.material_id,
                color=config.frame.color,
            ),
            size=SizeRow(width=config.size.width, height=config.size.height),
            layers=[
                LayerRow(depth=layer.depth, material_id=layer.material_id, color=layer.color)
                for layer in config.layers
            ],
        )

    @staticmethod
    def _to_domain(row: ProductRow) -> MapProduct:
        return MapProduct(
            id=row.id,
            name=row.name,
            description=row.description,
            price=Money(row.price, row.currency),
            category=row.category,
            is_template=row.is_template,
            configuration=ProductConfiguration(
                location=Location(
                    name=row.location.name,
                    latitude=row.location.latitude,
                    longitude=row.location.longitude,
                    zoom_level=row.location.zoom_level,
                ),
                frame=FrameStyle(
                    style=row.frame.style,
                    material_id=row.frame.material_id,
                    color=row.frame.color,
                ),
                size=Size(width=row.size.width, height=row.size.height),
                layers=tuple(
                    Layer(depth=layer.depth, material_id=layer.material_id, color=layer.color)
                    for layer in row.layers
                ),
                map_style=MapStyle(row.map_style),
                custom_text=row.custom_text,
            ),
        )
