"""
Fixtures for the Reports module tests

Runs against an in-memory SQLite database. The environment is configured
before anything from erp_analytics is imported, since settings and the
engine are built at import time.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

from datetime import datetime, timedelta
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient

from erp_analytics.database.database import Base, SessionLocal, get_db, sync_engine
from erp_analytics.main import app
from erp_analytics.modules.customers.models import Customer, SalesOrder, SalesOrderItem, SalesOrderStatus
from erp_analytics.modules.invoices.models import Invoice, InvoiceItem, InvoiceStatus, InvoiceType
from erp_analytics.modules.products.models import (
    Batch, Location, LocationType, MovementType, Product, StockMovement
)
from erp_analytics.modules.suppliers.models import (
    ProductSupplier, PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus, Supplier
)


# Fixed reference clock for service-level tests (naive UTC)
NOW = datetime(2024, 6, 15, 12, 0, 0)

_sequence = count(1)


def _next() -> int:
    return next(_sequence)


# ===== DATABASE =====

@pytest.fixture
def db_session():
    """Fresh schema per test"""
    Base.metadata.create_all(bind=sync_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def now():
    return NOW


# ===== FACTORIES =====

@pytest.fixture
def make_product(db_session):
    def _make(**overrides):
        n = _next()
        values = {
            "sku": f"SKU-{n:04d}",
            "name": f"Product {n}",
            "category": "General",
            "current_stock": 50,
            "reorder_point": 10,
            "max_stock": 100,
            "cost": Decimal("10.00"),
            "price": Decimal("15.00"),
        }
        values.update(overrides)
        product = Product(**values)
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture
def make_location(db_session):
    def _make(**overrides):
        n = _next()
        values = {"code": f"LOC-{n:03d}", "name": f"Zone {n}", "type": LocationType.ZONE}
        values.update(overrides)
        location = Location(**values)
        db_session.add(location)
        db_session.commit()
        return location
    return _make


@pytest.fixture
def make_customer(db_session):
    def _make(**overrides):
        n = _next()
        values = {
            "code": f"CUS-{n:04d}",
            "name": f"Customer {n}",
            "email": f"customer{n}@example.com",
            "phone": "+90 212 555 0000",
        }
        values.update(overrides)
        customer = Customer(**values)
        db_session.add(customer)
        db_session.commit()
        return customer
    return _make


@pytest.fixture
def make_supplier(db_session):
    def _make(**overrides):
        n = _next()
        values = {
            "code": f"SUP-{n:04d}",
            "name": f"Supplier {n}",
            "email": f"supplier{n}@example.com",
            "phone": "+90 216 555 0000",
        }
        values.update(overrides)
        supplier = Supplier(**values)
        db_session.add(supplier)
        db_session.commit()
        return supplier
    return _make


@pytest.fixture
def make_sales_order(db_session):
    def _make(customer=None, items=(), **overrides):
        """items: (product, quantity, unit_price) tuples"""
        n = _next()
        values = {
            "order_number": f"SO-{n:05d}",
            "customer": customer,
            "status": SalesOrderStatus.CONFIRMED,
            "order_date": NOW,
            "created_at": NOW,
            "subtotal": Decimal("0"),
            "tax": Decimal("0"),
            "total": Decimal("0"),
        }
        values.update(overrides)
        order = SalesOrder(**values)
        for product, quantity, unit_price in items:
            order.items.append(SalesOrderItem(
                product=product,
                quantity=quantity,
                unit_price=Decimal(unit_price),
                total=Decimal(unit_price) * quantity
            ))
        db_session.add(order)
        db_session.commit()
        return order
    return _make


@pytest.fixture
def make_purchase_order(db_session):
    def _make(supplier=None, items=(), **overrides):
        """items: (product, quantity, unit_price) tuples"""
        n = _next()
        values = {
            "order_number": f"PO-{n:05d}",
            "supplier": supplier,
            "status": PurchaseOrderStatus.SENT,
            "order_date": NOW,
            "created_at": NOW,
            "updated_at": NOW,
            "subtotal": Decimal("0"),
            "tax": Decimal("0"),
            "total": Decimal("0"),
        }
        values.update(overrides)
        order = PurchaseOrder(**values)
        for product, quantity, unit_price in items:
            order.items.append(PurchaseOrderItem(
                product=product,
                quantity=quantity,
                unit_price=Decimal(unit_price),
                total=Decimal(unit_price) * quantity
            ))
        db_session.add(order)
        db_session.commit()
        return order
    return _make


@pytest.fixture
def link_supplier_product(db_session):
    def _link(supplier, product, unit_cost="0"):
        link = ProductSupplier(supplier=supplier, product=product, unit_cost=Decimal(unit_cost))
        db_session.add(link)
        db_session.commit()
        return link
    return _link


@pytest.fixture
def make_invoice(db_session):
    def _make(items=(), **overrides):
        """items: (product or None, quantity, line_total) tuples"""
        n = _next()
        values = {
            "invoice_number": f"INV-{n:05d}",
            "type": InvoiceType.SALES,
            "status": InvoiceStatus.SENT,
            "invoice_date": NOW - timedelta(days=30),
            "due_date": NOW,
            "created_at": NOW,
            "total": Decimal("0"),
            "amount_paid": Decimal("0"),
            "amount_due": Decimal("0"),
        }
        values.update(overrides)
        invoice = Invoice(**values)
        for product, quantity, line_total in items:
            invoice.items.append(InvoiceItem(
                product=product,
                description=None if product else "Service fee",
                quantity=quantity,
                unit_price=Decimal(line_total) / quantity,
                total=Decimal(line_total)
            ))
        db_session.add(invoice)
        db_session.commit()
        return invoice
    return _make


@pytest.fixture
def make_batch(db_session):
    def _make(product, **overrides):
        n = _next()
        values = {
            "batch_number": f"LOT-{n:05d}",
            "product": product,
            "initial_qty": 100,
            "current_qty": 100,
            "expiry_date": NOW + timedelta(days=10),
        }
        values.update(overrides)
        batch = Batch(**values)
        db_session.add(batch)
        db_session.commit()
        return batch
    return _make


@pytest.fixture
def make_movement(db_session):
    def _make(product, **overrides):
        values = {
            "type": MovementType.IN,
            "product": product,
            "quantity": 10,
            "created_at": NOW,
        }
        values.update(overrides)
        movement = StockMovement(**values)
        db_session.add(movement)
        db_session.commit()
        return movement
    return _make
