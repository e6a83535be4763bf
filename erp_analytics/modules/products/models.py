"""
SQLAlchemy models for the catalogue and warehouse side of the ERP

- Products with stock counters, reorder thresholds and unit cost/price
- Storage locations (zone > rack > shelf > bin)
- Batches with expiry and quality status
- Stock movements between locations

These tables are written by the inventory CRUD layer; the reports module
only reads them.
"""

from erp_analytics.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from erp_analytics.common.mixins import IdMixin, TimestampMixin
import enum


class LocationType(enum.Enum):
    ZONE = "ZONE"
    RACK = "RACK"
    SHELF = "SHELF"
    BIN = "BIN"


class MovementType(enum.Enum):
    IN = "IN"
    OUT = "OUT"
    TRANSFER = "TRANSFER"


class QualityStatus(enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    QUARANTINE = "QUARANTINE"


class Product(Base, IdMixin, TimestampMixin):
    __tablename__ = "products"

    sku = Column(String(50), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False)
    current_stock = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=0)  # Alert threshold, inclusive
    max_stock = Column(Integer, nullable=False, default=0)
    cost = Column(Numeric(12, 2), nullable=False, default=0)
    price = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    batches = relationship("Batch", back_populates="product")
    movements = relationship("StockMovement", back_populates="product")
    suppliers = relationship("ProductSupplier", back_populates="product")


class Location(Base, IdMixin, TimestampMixin):
    __tablename__ = "locations"

    code = Column(String(50), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    type = Column(Enum(LocationType, name="location_type"), nullable=False, default=LocationType.ZONE)
    parent_id = Column(String(36), ForeignKey("locations.id"), nullable=True)

    # Relationships
    parent = relationship("Location", remote_side="Location.id")


class Batch(Base, IdMixin, TimestampMixin):
    __tablename__ = "batches"

    batch_number = Column(String(50), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    location_id = Column(String(36), ForeignKey("locations.id"), nullable=True)
    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=True)
    initial_qty = Column(Integer, nullable=False, default=0)
    current_qty = Column(Integer, nullable=False, default=0)
    manufacture_date = Column(DateTime(timezone=True), nullable=True)
    expiry_date = Column(DateTime(timezone=True), nullable=True)
    quality_status = Column(Enum(QualityStatus, name="quality_status"), nullable=False, default=QualityStatus.PENDING)

    # Relationships
    product = relationship("Product", back_populates="batches")
    location = relationship("Location")
    supplier = relationship("Supplier")


class StockMovement(Base, IdMixin, TimestampMixin):
    __tablename__ = "stock_movements"

    type = Column(Enum(MovementType, name="movement_type"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    from_location_id = Column(String(36), ForeignKey("locations.id"), nullable=True)
    to_location_id = Column(String(36), ForeignKey("locations.id"), nullable=True)
    quantity = Column(Integer, nullable=False)
    reference = Column(String(100), nullable=True)  # Order, invoice, etc.
    notes = Column(Text, nullable=True)

    # Relationships
    product = relationship("Product", back_populates="movements")
    from_location = relationship("Location", foreign_keys=[from_location_id])
    to_location = relationship("Location", foreign_keys=[to_location_id])
