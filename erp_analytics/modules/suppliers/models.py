"""
SQLAlchemy models for the purchasing side

- Suppliers and the products they supply (ProductSupplier)
- Purchase orders with expected delivery date; `updated_at` is stamped when
  the order is received, which is what lead-time statistics read.
"""

from erp_analytics.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum
from sqlalchemy.orm import relationship
from erp_analytics.common.mixins import IdMixin, TimestampMixin
import enum


class PurchaseOrderStatus(enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    CONFIRMED = "CONFIRMED"
    PARTIAL = "PARTIAL"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


class Supplier(Base, IdMixin, TimestampMixin):
    __tablename__ = "suppliers"

    code = Column(String(50), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)

    # Relationships
    purchase_orders = relationship("PurchaseOrder", back_populates="supplier")
    products = relationship("ProductSupplier", back_populates="supplier")


class ProductSupplier(Base, IdMixin, TimestampMixin):
    __tablename__ = "product_suppliers"

    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    unit_cost = Column(Numeric(12, 2), nullable=True)

    # Relationships
    supplier = relationship("Supplier", back_populates="products")
    product = relationship("Product", back_populates="suppliers")


class PurchaseOrder(Base, IdMixin, TimestampMixin):
    __tablename__ = "purchase_orders"

    order_number = Column(String(50), nullable=False, unique=True)
    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=True)
    status = Column(Enum(PurchaseOrderStatus, name="purchase_order_status"), nullable=False, default=PurchaseOrderStatus.DRAFT)
    order_date = Column(DateTime(timezone=True), nullable=False)
    expected_date = Column(DateTime(timezone=True), nullable=True)

    # Totals
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    supplier = relationship("Supplier", back_populates="purchase_orders")
    items = relationship("PurchaseOrderItem", back_populates="order", cascade="all, delete-orphan")


class PurchaseOrderItem(Base, IdMixin):
    __tablename__ = "purchase_order_items"

    order_id = Column(String(36), ForeignKey("purchase_orders.id"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)

    # Relationships
    order = relationship("PurchaseOrder", back_populates="items")
    product = relationship("Product")
