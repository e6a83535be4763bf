from erp_analytics.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from erp_analytics.common.mixins import IdMixin, TimestampMixin
import enum


class InvoiceType(enum.Enum):
    SALES = "SALES"              # Issued to a customer
    PURCHASE = "PURCHASE"        # Received from a supplier
    CREDIT_NOTE = "CREDIT_NOTE"
    DEBIT_NOTE = "DEBIT_NOTE"


class InvoiceStatus(enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class Invoice(Base, IdMixin, TimestampMixin):
    __tablename__ = "invoices"

    invoice_number = Column(String(50), nullable=False, unique=True)
    type = Column(Enum(InvoiceType, name="invoice_type"), nullable=False, default=InvoiceType.SALES)
    status = Column(Enum(InvoiceStatus, name="invoice_status"), nullable=False, default=InvoiceStatus.DRAFT)

    # Counterparty: customer for SALES, supplier otherwise
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True)
    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=True)

    # Dates
    invoice_date = Column(DateTime(timezone=True), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)

    notes = Column(Text, nullable=True)

    # Amounts
    total = Column(Numeric(12, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(12, 2), nullable=False, default=0)
    amount_due = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    customer = relationship("Customer")
    supplier = relationship("Supplier")
    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan")


class InvoiceItem(Base, IdMixin):
    __tablename__ = "invoice_items"

    invoice_id = Column(String(36), ForeignKey("invoices.id"), nullable=False)
    # Free-text lines (services, fees) carry no product
    product_id = Column(String(36), ForeignKey("products.id"), nullable=True)
    description = Column(String(255), nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)  # Line total, taxes included

    # Relationships
    invoice = relationship("Invoice", back_populates="items")
    product = relationship("Product")
