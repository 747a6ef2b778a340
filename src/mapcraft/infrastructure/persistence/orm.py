"""SQLAlchemy table mappings.

Rows are persistence shapes only; repositories translate them to and from
domain objects. Inventory invariants are repeated as CHECK constraints so
the database refuses a negative or over-reserved row even if a bug slips
past the ledger.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class MaterialRow(Base):
    __tablename__ = "materials"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    kind: Mapped[str] = mapped_column(String(20))
    unit: Mapped[str] = mapped_column(String(20), default="sheet")
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    currency: Mapped[str] = mapped_column(String(3), default="USD")


class InventoryRow(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("on_hand >= 0", name="ck_inventory_on_hand"),
        CheckConstraint("reserved >= 0", name="ck_inventory_reserved"),
        CheckConstraint("reserved <= on_hand", name="ck_inventory_reserved_le_on_hand"),
    )

    material_id: Mapped[str] = mapped_column(
        ForeignKey("materials.id"), primary_key=True
    )
    on_hand: Mapped[int] = mapped_column(Integer)
    reserved: Mapped[int] = mapped_column(Integer, default=0)
    low_threshold: Mapped[int] = mapped_column(Integer, default=0)
    low_stock_flagged: Mapped[bool] = mapped_column(Boolean, default=False)


class ProductRow(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    category: Mapped[str] = mapped_column(String(100), index=True)
    is_template: Mapped[bool] = mapped_column(Boolean, default=True)
    map_style: Mapped[str] = mapped_column(String(20))
    custom_text: Mapped[str | None] = mapped_column(String(200), nullable=True)

    location: Mapped[LocationRow] = relationship(
        cascade="all, delete-orphan", uselist=False
    )
    frame: Mapped[FrameStyleRow] = relationship(
        cascade="all, delete-orphan", uselist=False
    )
    size: Mapped[SizeRow] = relationship(cascade="all, delete-orphan", uselist=False)
    layers: Mapped[list[LayerRow]] = relationship(
        cascade="all, delete-orphan", order_by="LayerRow.depth"
    )


class LocationRow(Base):
    __tablename__ = "locations"

    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    zoom_level: Mapped[int] = mapped_column(Integer)


class FrameStyleRow(Base):
    __tablename__ = "frame_styles"

    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), primary_key=True)
    style: Mapped[str] = mapped_column(String(100))
    material_id: Mapped[str] = mapped_column(String(64))
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)


class SizeRow(Base):
    __tablename__ = "sizes"

    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), primary_key=True)
    width: Mapped[int] = mapped_column(Integer)
    height: Mapped[int] = mapped_column(Integer)


class LayerRow(Base):
    __tablename__ = "layers"
    __table_args__ = (UniqueConstraint("product_id", "depth", name="uq_layer_depth"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), index=True)
    depth: Mapped[int] = mapped_column(Integer)
    material_id: Mapped[str] = mapped_column(String(64))
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)


class ReservationRow(Base):
    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quantity: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), index=True)
    release_reason: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Snapshot of the configuration as ordered; never joined to products.
    configuration: Mapped[dict] = mapped_column(JSON)
    requirements: Mapped[dict] = mapped_column(JSON)
    rejection: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class ReturnRow(Base):
    __tablename__ = "returns"
    __table_args__ = (
        UniqueConstraint("reservation_id", name="uq_return_reservation"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reservation_id: Mapped[int] = mapped_column(
        ForeignKey("reservations.id"), index=True
    )
    quantities: Mapped[dict] = mapped_column(JSON)
    reason: Mapped[str] = mapped_column(String(200))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
