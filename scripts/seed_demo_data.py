"""
Seed script: Populate the ERP read models with realistic demo data so every
report endpoint has something to aggregate.

What it creates:
- Locations: one warehouse zone with racks.
- Products: >= N (default 200) with unique SKUs, cost/price and a stock mix
  (in stock, low, out of stock, overstocked).
- Customers (~40) and suppliers (~12), each supplier linked to some products.
- Sales orders across all statuses, with line items.
- Purchase orders across all statuses; received ones get a received date
  around their expected date so lead times vary.
- Invoices: sales and purchase, open/paid/overdue mix with amounts due.
- Batches with expiry dates spread over the next 90 days.
- Stock movements (IN/OUT/TRANSFER).

Run with the project root on PYTHONPATH:
    python scripts/seed_demo_data.py --products 200 --orders 300 --invoices 250

Note: This is intended for development environments only.
"""

# Add project root to sys.path so `erp_analytics.*` imports work even if CWD changes
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from erp_analytics.database.database import Base, SessionLocal, sync_engine
from erp_analytics.modules.customers.models import Customer, SalesOrder, SalesOrderItem, SalesOrderStatus
from erp_analytics.modules.invoices.models import Invoice, InvoiceItem, InvoiceStatus, InvoiceType
from erp_analytics.modules.products.models import (
    Batch, Location, LocationType, MovementType, Product, QualityStatus, StockMovement
)
from erp_analytics.modules.suppliers.models import (
    ProductSupplier, PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus, Supplier
)


CATEGORIES = ["Dairy", "Bakery", "Beverages", "Produce", "Pantry", "Frozen", "Cleaning"]
ADJECTIVES = ["Organic", "Classic", "Family", "Premium", "Light", "Fresh"]
NOUNS = ["Milk", "Bread", "Juice", "Apples", "Rice", "Peas", "Soap", "Coffee", "Pasta", "Yogurt"]


def pick(seq):
    return random.choice(seq)


def now_utc():
    return datetime.now(timezone.utc)


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


def create_locations(db):
    zone = Location(code="WH-A", name="Main Warehouse", type=LocationType.ZONE)
    db.add(zone)
    db.flush()
    racks = [
        Location(code=f"WH-A-R{i}", name=f"Rack {i}", type=LocationType.RACK, parent_id=zone.id)
        for i in range(1, 5)
    ]
    db.add_all(racks)
    db.commit()
    return [zone] + racks


def create_products(db, product_count: int):
    products = []
    for i in range(product_count):
        cost = money(random.uniform(0.5, 40))
        reorder_point = random.randint(5, 30)
        max_stock = reorder_point * random.randint(3, 6)
        roll = random.random()
        if roll < 0.08:
            stock = 0
        elif roll < 0.25:
            stock = random.randint(1, reorder_point)
        elif roll < 0.32:
            stock = max_stock + random.randint(1, 50)
        else:
            stock = random.randint(reorder_point + 1, max_stock)
        products.append(Product(
            sku=f"SKU-{i:05d}",
            name=f"{pick(ADJECTIVES)} {pick(NOUNS)} {random.randint(100, 999)}",
            category=pick(CATEGORIES),
            current_stock=stock,
            reorder_point=reorder_point,
            max_stock=max_stock,
            cost=cost,
            price=money(cost * Decimal(str(random.uniform(1.1, 1.8)))),
        ))
    db.add_all(products)
    db.commit()
    return products


def create_parties(db, products):
    customers = [
        Customer(
            code=f"C-{i:04d}",
            name=f"Customer {i:04d}",
            email=f"customer{i}@example.com" if random.random() < 0.8 else None,
            phone=f"555{random.randint(1000000, 9999999)}" if random.random() < 0.7 else None,
        )
        for i in range(40)
    ]
    suppliers = [
        Supplier(
            code=f"S-{i:03d}",
            name=f"Supplier {i:03d}",
            email=f"supplier{i}@example.com",
            phone=f"555{random.randint(1000000, 9999999)}" if random.random() < 0.7 else None,
        )
        for i in range(12)
    ]
    db.add_all(customers + suppliers)
    db.flush()

    for supplier in suppliers:
        for product in random.sample(products, k=min(len(products), random.randint(5, 25))):
            db.add(ProductSupplier(supplier_id=supplier.id, product_id=product.id, unit_cost=product.cost))
    db.commit()
    return customers, suppliers


def create_sales_orders(db, customers, products, orders_count: int):
    statuses = list(SalesOrderStatus)
    for i in range(orders_count):
        created = now_utc() - timedelta(days=random.randint(0, 90), hours=random.randint(0, 23))
        order = SalesOrder(
            order_number=f"SO-{i:06d}",
            customer_id=pick(customers).id if random.random() < 0.95 else None,
            status=pick(statuses),
            order_date=created,
            shipping_address=f"{random.randint(1, 200)} Market Street" if random.random() < 0.6 else None,
            created_at=created,
            updated_at=created,
        )
        subtotal = Decimal("0")
        for _ in range(random.randint(1, 5)):
            product = pick(products)
            qty = random.randint(1, 10)
            line_total = product.price * qty
            subtotal += line_total
            order.items.append(SalesOrderItem(
                product_id=product.id, quantity=qty, unit_price=product.price, total=line_total
            ))
        order.subtotal = subtotal
        order.tax = money(subtotal * Decimal("0.18"))
        order.total = order.subtotal + order.tax
        db.add(order)
        if (i + 1) % 100 == 0:
            db.commit()
            print(f"  Sales orders created: {i + 1}")
    db.commit()


def create_purchase_orders(db, suppliers, products, orders_count: int):
    statuses = list(PurchaseOrderStatus)
    for i in range(orders_count):
        created = now_utc() - timedelta(days=random.randint(10, 120))
        expected = created + timedelta(days=random.randint(3, 14)) if random.random() < 0.9 else None
        status = pick(statuses)
        updated = created
        if status == PurchaseOrderStatus.RECEIVED:
            base = expected or created + timedelta(days=7)
            updated = base + timedelta(days=random.randint(-3, 5), hours=random.randint(0, 23))
        order = PurchaseOrder(
            order_number=f"PO-{i:06d}",
            supplier_id=pick(suppliers).id,
            status=status,
            order_date=created,
            expected_date=expected,
            created_at=created,
            updated_at=updated,
        )
        subtotal = Decimal("0")
        for _ in range(random.randint(1, 6)):
            product = pick(products)
            qty = random.randint(10, 100)
            line_total = product.cost * qty
            subtotal += line_total
            order.items.append(PurchaseOrderItem(
                product_id=product.id, quantity=qty, unit_price=product.cost, total=line_total
            ))
        order.subtotal = subtotal
        order.total = subtotal
        db.add(order)
    db.commit()


def create_invoices(db, customers, suppliers, products, invoices_count: int):
    for i in range(invoices_count):
        issued = now_utc() - timedelta(days=random.randint(0, 150))
        invoice_type = InvoiceType.SALES if random.random() < 0.7 else InvoiceType.PURCHASE
        invoice = Invoice(
            invoice_number=f"INV-{i:06d}",
            type=invoice_type,
            status=pick([InvoiceStatus.SENT, InvoiceStatus.PAID, InvoiceStatus.PARTIAL,
                         InvoiceStatus.OVERDUE, InvoiceStatus.DRAFT]),
            customer_id=pick(customers).id if invoice_type == InvoiceType.SALES else None,
            supplier_id=pick(suppliers).id if invoice_type == InvoiceType.PURCHASE else None,
            invoice_date=issued,
            due_date=issued + timedelta(days=random.choice([15, 30, 60])),
            created_at=issued,
            updated_at=issued,
        )
        total = Decimal("0")
        for _ in range(random.randint(1, 4)):
            product = pick(products)
            qty = random.randint(1, 8)
            line_total = product.price * qty
            total += line_total
            invoice.items.append(InvoiceItem(
                product_id=product.id, quantity=qty, unit_price=product.price, total=line_total
            ))
        if random.random() < 0.1:
            invoice.items.append(InvoiceItem(description="Delivery fee", quantity=1,
                                             unit_price=Decimal("5.00"), total=Decimal("5.00")))
            total += Decimal("5.00")

        invoice.total = total
        if invoice.status == InvoiceStatus.PAID:
            invoice.amount_paid = total
        elif invoice.status == InvoiceStatus.PARTIAL:
            invoice.amount_paid = money(total * Decimal(str(random.uniform(0.2, 0.8))))
        else:
            invoice.amount_paid = Decimal("0")
        invoice.amount_due = total - invoice.amount_paid
        db.add(invoice)
    db.commit()


def create_batches_and_movements(db, products, suppliers, locations):
    racks = locations[1:]
    for i, product in enumerate(random.sample(products, k=min(len(products), 60))):
        initial = random.randint(20, 200)
        db.add(Batch(
            batch_number=f"B-{i:05d}",
            product_id=product.id,
            location_id=pick(racks).id,
            supplier_id=pick(suppliers).id,
            initial_qty=initial,
            current_qty=random.randint(0, initial),
            manufacture_date=now_utc() - timedelta(days=random.randint(30, 180)),
            expiry_date=now_utc() + timedelta(days=random.randint(-5, 90)),
            quality_status=pick(list(QualityStatus)),
        ))

    for i in range(300):
        movement_type = pick(list(MovementType))
        created = now_utc() - timedelta(days=random.randint(0, 60), minutes=random.randint(0, 1440))
        db.add(StockMovement(
            type=movement_type,
            product_id=pick(products).id,
            from_location_id=pick(racks).id if movement_type != MovementType.IN else None,
            to_location_id=pick(racks).id if movement_type != MovementType.OUT else None,
            quantity=random.randint(1, 50),
            reference=f"SO-{random.randint(0, 999):06d}" if movement_type == MovementType.OUT else None,
            notes="Cycle count adjustment" if random.random() < 0.05 else None,
            created_at=created,
            updated_at=created,
        ))
    db.commit()


def main():
    parser = argparse.ArgumentParser(description="Seed ERP demo data for the reports API")
    parser.add_argument("--products", type=int, default=200)
    parser.add_argument("--orders", type=int, default=300)
    parser.add_argument("--invoices", type=int, default=250)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    Base.metadata.create_all(bind=sync_engine)

    db = SessionLocal()
    try:
        print("Creating locations...")
        locations = create_locations(db)

        print("Creating products...")
        products = create_products(db, args.products)
        print(f"Products created: {len(products)}")

        print("Creating customers and suppliers...")
        customers, suppliers = create_parties(db, products)
        print(f"Customers: {len(customers)}, Suppliers: {len(suppliers)}")

        print("Creating sales orders...")
        create_sales_orders(db, customers, products, args.orders)

        print("Creating purchase orders...")
        create_purchase_orders(db, suppliers, products, args.orders // 2)

        print("Creating invoices...")
        create_invoices(db, customers, suppliers, products, args.invoices)

        print("Creating batches and stock movements...")
        create_batches_and_movements(db, products, suppliers, locations)

        print("\nSeed completed.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
