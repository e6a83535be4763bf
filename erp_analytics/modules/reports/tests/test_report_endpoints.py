"""
Endpoint tests for the Reports module

Covers the HTTP contract: camelCase JSON envelopes, the csv format switch,
CSV headers, download filenames and content types, and the error shape.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from erp_analytics.modules.customers.models import SalesOrderStatus
from erp_analytics.modules.invoices.models import InvoiceStatus
from erp_analytics.modules.reports.exceptions import DataUnavailable
from erp_analytics.modules.reports.services.inventory import InventoryReportService
from erp_analytics.modules.reports.utils import CSV_HEADERS, REPORT_EXPORTS
from erp_analytics.modules.reports.utils.calculations import utc_now


ENDPOINTS = {
    "customer_analysis": "/api/reports/customer-analysis",
    "expiring_batches": "/api/reports/expiring-batches",
    "inventory_valuation": "/api/reports/inventory-valuation",
    "invoice_aging": "/api/reports/invoice-aging",
    "low_stock": "/api/reports/low-stock",
    "purchase_summary": "/api/reports/purchase-summary",
    "revenue": "/api/reports/revenue",
    "sales_summary": "/api/reports/sales-summary",
    "stock_movement": "/api/reports/stock-movement",
    "supplier_performance": "/api/reports/supplier-performance",
    "stock_levels": "/api/reports/stock-levels",
    "sales": "/api/reports/sales",
    "purchase": "/api/reports/purchase",
}

TURKISH_REPORTS = {
    "customer_analysis", "expiring_batches", "purchase_summary",
    "revenue", "sales_summary", "supplier_performance", "stock_levels",
}


def csv_lines(response):
    return response.text.split("\n")


# ===== AMBIENT ENDPOINTS =====

class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "ERP Analytics API is running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# ===== FORMAT SWITCH =====

class TestCsvExports:

    @pytest.mark.parametrize("report_key", sorted(ENDPOINTS))
    def test_csv_headers_filename_and_content_type(self, client, report_key):
        response = client.get(ENDPOINTS[report_key], params={"format": "csv"})

        assert response.status_code == 200
        expected_type = "text/csv; charset=utf-8" if report_key in TURKISH_REPORTS else "text/csv"
        assert response.headers["content-type"] == expected_type
        assert response.headers["content-disposition"] == (
            f"attachment; filename={REPORT_EXPORTS[report_key]['filename']}"
        )
        assert csv_lines(response) == [",".join(CSV_HEADERS[report_key].values())]

    @pytest.mark.parametrize("value", ["json", "CSV", "xml", ""])
    def test_anything_but_csv_is_json(self, client, value):
        response = client.get(ENDPOINTS["low_stock"], params={"format": value})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert set(response.json()) == {"data", "totals"}

    def test_localized_headers(self, client):
        turkish = client.get(ENDPOINTS["customer_analysis"], params={"format": "csv"})
        english = client.get(ENDPOINTS["inventory_valuation"], params={"format": "csv"})

        assert csv_lines(turkish)[0].startswith("Müşteri ID,Müşteri Adı,E-posta")
        assert csv_lines(english)[0] == (
            "SKU,Name,Category,Stock,Unit Cost,Unit Price,Cost Value,Retail Value,Potential Profit"
        )


# ===== JSON ENVELOPES =====

class TestJsonEnvelopes:

    @pytest.mark.parametrize("report_key,keys", [
        ("customer_analysis", {"data", "summary"}),
        ("expiring_batches", {"data", "summary"}),
        ("inventory_valuation", {"data", "totals"}),
        ("invoice_aging", {"data", "agingSummary", "receivables", "payables"}),
        ("low_stock", {"data", "totals"}),
        ("purchase_summary", {"data", "summary"}),
        ("revenue", {"data", "summary"}),
        ("sales_summary", {"data", "summary"}),
        ("stock_movement", {"data", "summary"}),
        ("supplier_performance", {"data", "summary"}),
        ("stock_levels", {"data", "summary"}),
        ("sales", {"data", "summary", "topCustomers"}),
        ("purchase", {"data", "summary", "topSuppliers"}),
    ])
    def test_envelope_keys(self, client, report_key, keys):
        response = client.get(ENDPOINTS[report_key])

        assert response.status_code == 200
        assert set(response.json()) == keys

    def test_low_stock_example(self, client, make_product):
        make_product(sku="OIL-5L", name="Olive Oil 5L", current_stock=0, reorder_point=20, cost=Decimal("150"))

        body = client.get(ENDPOINTS["low_stock"]).json()

        assert body["data"][0] == {
            "sku": "OIL-5L",
            "name": "Olive Oil 5L",
            "category": "General",
            "currentStock": 0,
            "reorderPoint": 20,
            "deficit": 20,
            "status": "OUT_OF_STOCK",
            "estimatedReorderCost": 3000.0,
        }
        assert body["totals"] == {
            "totalLowStock": 0,
            "totalOutOfStock": 1,
            "totalDeficitUnits": 20,
            "estimatedReorderTotal": 3000.0,
        }

    def test_invoice_aging_example(self, client, make_customer, make_invoice):
        make_invoice(customer=make_customer(name="Acme"), status=InvoiceStatus.SENT,
                     due_date=utc_now() - timedelta(days=45, hours=1),
                     total=Decimal("500.00"), amount_due=Decimal("500.00"))

        body = client.get(ENDPOINTS["invoice_aging"]).json()

        assert body["data"][0]["agingBucket"] == "31-60 days"
        assert body["data"][0]["daysOverdue"] == 45
        assert body["agingSummary"] == {
            "current": 0.0,
            "days1to30": 0.0,
            "days31to60": 500.0,
            "days61to90": 0.0,
            "days90plus": 0.0,
            "totalOutstanding": 500.0,
        }
        assert body["receivables"] == {"count": 1, "total": 500.0}
        assert body["payables"] == {"count": 0, "total": 0.0}

    def test_empty_ratios_are_zero(self, client, make_customer, make_supplier):
        make_customer()
        make_supplier()

        customers = client.get(ENDPOINTS["customer_analysis"]).json()
        suppliers = client.get(ENDPOINTS["supplier_performance"]).json()

        assert customers["data"][0]["averageOrderValue"] == 0
        assert suppliers["data"][0]["onTimeDeliveryRate"] == 0
        assert suppliers["data"][0]["averageLeadTimeDays"] == 0


# ===== QUERY PARAMETERS =====

class TestQueryParameters:

    def test_expiring_batches_window(self, client, make_product, make_batch):
        product = make_product()
        make_batch(product, batch_number="SOON", expiry_date=utc_now() + timedelta(days=5))
        make_batch(product, batch_number="LATER", expiry_date=utc_now() + timedelta(days=45))

        default_window = client.get(ENDPOINTS["expiring_batches"]).json()
        wide_window = client.get(ENDPOINTS["expiring_batches"], params={"days": 60}).json()

        assert [row["batchNumber"] for row in default_window["data"]] == ["SOON"]
        assert [row["batchNumber"] for row in wide_window["data"]] == ["SOON", "LATER"]
        assert wide_window["summary"]["critical"] == 1

    def test_non_integer_days_is_rejected(self, client):
        response = client.get(ENDPOINTS["expiring_batches"], params={"days": "soon"})
        assert response.status_code == 422

    def test_sales_end_date_covers_whole_day(self, client, make_sales_order):
        late_evening = utc_now().replace(hour=22, minute=45, second=0, microsecond=0) - timedelta(days=1)
        make_sales_order(order_date=late_evening, status=SalesOrderStatus.DELIVERED)

        day = late_evening.date().isoformat()
        response = client.get(ENDPOINTS["sales"], params={"startDate": day, "endDate": day})

        assert response.json()["summary"]["totalOrders"] == 1

    def test_summary_to_bound_is_used_as_given(self, client, make_sales_order):
        late_evening = utc_now().replace(hour=22, minute=45, second=0, microsecond=0) - timedelta(days=1)
        make_sales_order(created_at=late_evening)

        day = late_evening.date().isoformat()
        response = client.get(ENDPOINTS["sales_summary"], params={"from": day, "to": day})

        assert response.json()["summary"]["totalOrders"] == 0

    def test_stock_movement_filters(self, client, make_product, make_location, make_movement):
        product = make_product()
        dock = make_location()
        make_movement(product, to_location=dock, created_at=utc_now())
        make_movement(make_product(), created_at=utc_now())

        by_product = client.get(ENDPOINTS["stock_movement"], params={"productId": product.id}).json()
        by_warehouse = client.get(ENDPOINTS["stock_movement"], params={"warehouseId": dock.id}).json()
        bad_type = client.get(ENDPOINTS["stock_movement"], params={"type": "LOST"}).json()

        assert by_product["summary"]["totalMovements"] == 1
        assert by_warehouse["summary"]["totalMovements"] == 1
        assert bad_type["summary"]["totalMovements"] == 2


# ===== CSV / JSON PARITY =====

class TestCsvJsonParity:

    def test_low_stock_rows_match(self, client, make_product):
        make_product(sku="A-1", name="Flour", current_stock=0, reorder_point=20, cost=Decimal("150"))
        make_product(sku="B-2", name="Sugar", current_stock=4, reorder_point=10, cost=Decimal("2.25"))
        make_product(sku="C-3", name="Salt", current_stock=40, reorder_point=10)

        body = client.get(ENDPOINTS["low_stock"]).json()
        lines = csv_lines(client.get(ENDPOINTS["low_stock"], params={"format": "csv"}))

        assert len(lines) - 1 == len(body["data"]) == 2
        assert lines[1] == 'A-1,"Flour",General,0,20,20,OUT_OF_STOCK,3000.00'
        cells = lines[2].split(",")
        assert cells[0] == body["data"][1]["sku"]
        assert cells[5] == str(body["data"][1]["deficit"])
        assert cells[7] == f"{body['data'][1]['estimatedReorderCost']:.2f}"

    def test_revenue_profit_margin_column(self, client, make_product, make_invoice):
        product = make_product(sku="TEA", name="Black Tea", category="Drinks", cost=Decimal("3.00"))
        make_invoice(status=InvoiceStatus.PAID, created_at=utc_now(), items=[(product, 4, "20.00")])

        body = client.get(ENDPOINTS["revenue"]).json()
        lines = csv_lines(client.get(ENDPOINTS["revenue"], params={"format": "csv"}))

        assert body["data"][0]["profit"] == 8.0
        assert lines[1] == f'{product.id},"Black Tea",TEA,Drinks,4,20.00,12.00,8.00,40.0'

    def test_stock_movement_absent_values(self, client, make_product, make_movement):
        product = make_product(sku="W-1", name="Widget")
        moved_at = utc_now()
        make_movement(product, quantity=7, created_at=moved_at)

        lines = csv_lines(client.get(ENDPOINTS["stock_movement"], params={"format": "csv"}))

        assert lines[1] == f'{moved_at.date().isoformat()},IN,"Widget",W-1,,,7,,""'

    def test_naive_quoting_is_kept(self, client, make_product):
        make_product(sku="Q-1", name='Bolt 3/8" zinc', current_stock=0, reorder_point=1, cost=Decimal("1"))

        lines = csv_lines(client.get(ENDPOINTS["low_stock"], params={"format": "csv"}))

        assert lines[1] == 'Q-1,"Bolt 3/8" zinc",General,0,1,1,OUT_OF_STOCK,1.00'

    def test_stock_levels_reorder_flag(self, client, make_product):
        make_product(sku="S-1", name="Rice", category="Dry", current_stock=2, reorder_point=5, max_stock=50)

        lines = csv_lines(client.get(ENDPOINTS["stock_levels"], params={"format": "csv"}))

        assert lines[1] == 'S-1,"Rice",Dry,2,5,50,Düşük Stok,Evet,0'


# ===== ERRORS =====

class TestReportErrors:

    def test_store_failure_uses_english_message(self, client, monkeypatch):
        def unavailable(self):
            raise DataUnavailable("products")

        monkeypatch.setattr(InventoryReportService, "get_low_stock", unavailable)

        response = client.get(ENDPOINTS["low_stock"])

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate report"}

    def test_store_failure_uses_turkish_message(self, client, db_session, monkeypatch):
        def broken_query(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(db_session, "query", broken_query)

        response = client.get(ENDPOINTS["stock_levels"], params={"format": "csv"})

        assert response.status_code == 500
        assert response.json() == {"error": "Rapor oluşturulamadı"}

    def test_malformed_date_fails_the_request(self, client):
        response = client.get(ENDPOINTS["revenue"], params={"from": "not-a-date"})

        assert response.status_code == 500
        assert response.json() == {"error": "Rapor oluşturulamadı"}
