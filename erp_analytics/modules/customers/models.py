"""
SQLAlchemy models for the sales side: customers and their sales orders.
"""

from erp_analytics.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from erp_analytics.common.mixins import IdMixin, TimestampMixin
import enum


class SalesOrderStatus(enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Customer(Base, IdMixin, TimestampMixin):
    __tablename__ = "customers"

    code = Column(String(50), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)

    # Relationships
    sales_orders = relationship("SalesOrder", back_populates="customer")


class SalesOrder(Base, IdMixin, TimestampMixin):
    __tablename__ = "sales_orders"

    order_number = Column(String(50), nullable=False, unique=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True)
    status = Column(Enum(SalesOrderStatus, name="sales_order_status"), nullable=False, default=SalesOrderStatus.DRAFT)
    order_date = Column(DateTime(timezone=True), nullable=False)
    shipping_address = Column(Text, nullable=True)

    # Totals
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    customer = relationship("Customer", back_populates="sales_orders")
    items = relationship("SalesOrderItem", back_populates="order", cascade="all, delete-orphan")


class SalesOrderItem(Base, IdMixin):
    __tablename__ = "sales_order_items"

    order_id = Column(String(36), ForeignKey("sales_orders.id"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)  # quantity * unit_price

    # Relationships
    order = relationship("SalesOrder", back_populates="items")
    product = relationship("Product")
