"""
Tests for the sales reports: customer analysis, sales summary and the
detailed sales order report
"""

from datetime import timedelta
from decimal import Decimal

from erp_analytics.modules.customers.models import SalesOrderStatus
from erp_analytics.modules.reports.schemas import ReportFilter
from erp_analytics.modules.reports.services.sales import SalesReportService, top_parties


# ===== CUSTOMER ANALYSIS =====

class TestCustomerAnalysis:

    def test_per_customer_metrics(self, db_session, now, make_customer, make_sales_order):
        customer = make_customer(name="Acme")
        make_sales_order(customer, status=SalesOrderStatus.DELIVERED, total=Decimal("100.00"),
                         created_at=now - timedelta(days=10))
        make_sales_order(customer, status=SalesOrderStatus.CONFIRMED, total=Decimal("50.00"),
                         created_at=now - timedelta(days=2))
        make_sales_order(customer, status=SalesOrderStatus.DELIVERED, total=Decimal("30.00"),
                         created_at=now - timedelta(days=5))

        report = SalesReportService(db_session, now=now).get_customer_analysis()

        row = report["data"][0]
        assert row["customer_name"] == "Acme"
        assert row["total_orders"] == 3
        assert row["completed_orders"] == 2
        assert row["total_revenue"] == Decimal("180.00")
        assert row["average_order_value"] == Decimal("60")
        assert row["last_order_date"] == (now - timedelta(days=2)).date().isoformat()

    def test_customer_without_orders(self, db_session, now, make_customer):
        make_customer(name="Quiet", phone=None)

        row = SalesReportService(db_session, now=now).get_customer_analysis()["data"][0]

        assert row["total_orders"] == 0
        assert row["average_order_value"] == 0
        assert row["last_order_date"] == "-"
        assert row["phone"] == "-"

    def test_summary(self, db_session, now, make_customer, make_sales_order):
        busy = make_customer(name="Busy")
        make_customer(name="Idle")
        make_sales_order(busy, total=Decimal("90.00"))
        make_sales_order(busy, total=Decimal("30.00"))

        report = SalesReportService(db_session, now=now).get_customer_analysis()

        assert [row["customer_name"] for row in report["data"]] == ["Busy", "Idle"]
        assert report["summary"] == {
            "total_customers": 2,
            "active_customers": 1,
            "total_revenue": Decimal("120.00"),
            "average_revenue_per_customer": Decimal("60"),
        }

    def test_no_customers(self, db_session, now):
        summary = SalesReportService(db_session, now=now).get_customer_analysis()["summary"]
        assert summary["average_revenue_per_customer"] == 0


# ===== SALES SUMMARY =====

class TestSalesSummary:

    def test_rows_and_status_counts(self, db_session, now, make_customer, make_product, make_sales_order):
        customer = make_customer(name="Acme")
        product = make_product()
        make_sales_order(customer, items=[(product, 2, "5.00"), (product, 1, "5.00")],
                         status=SalesOrderStatus.SHIPPED, total=Decimal("15.00"),
                         created_at=now - timedelta(days=1))
        make_sales_order(None, status=SalesOrderStatus.CANCELLED, total=Decimal("5.00"), created_at=now)
        make_sales_order(customer, status=SalesOrderStatus.PENDING, total=Decimal("10.00"),
                         created_at=now - timedelta(days=3))

        report = SalesReportService(db_session, now=now).get_sales_summary()

        newest, shipped, pending = report["data"]
        assert newest["customer_name"] == "-"
        assert shipped["item_count"] == 2
        assert shipped["status"] == "SHIPPED"
        assert pending["created_at"] == (now - timedelta(days=3)).date().isoformat()

        summary = report["summary"]
        assert summary["total_orders"] == 3
        assert summary["total_revenue"] == Decimal("30.00")
        assert summary["average_order_value"] == Decimal("10")
        assert summary["by_status"] == {
            "draft": 0,
            "confirmed": 0,
            "shipped": 1,
            "delivered": 0,
            "cancelled": 1,
        }

    def test_created_at_range_is_inclusive(self, db_session, now, make_sales_order):
        make_sales_order(created_at=now - timedelta(days=10))
        make_sales_order(created_at=now - timedelta(days=5))
        make_sales_order(created_at=now)

        report = SalesReportService(db_session, now=now).get_sales_summary(
            ReportFilter(date_from=now - timedelta(days=5), date_to=now)
        )

        assert report["summary"]["total_orders"] == 2


# ===== SALES REPORT =====

class TestSalesReport:

    def test_rows_summary_and_top_customers(self, db_session, now, make_customer, make_product, make_sales_order):
        acme = make_customer(code="ACME", name="Acme")
        zeta = make_customer(code="ZETA", name="Zeta")
        product = make_product()
        make_sales_order(acme, items=[(product, 3, "10.00"), (product, 2, "10.00")],
                         status=SalesOrderStatus.DELIVERED, subtotal=Decimal("50.00"),
                         tax=Decimal("9.00"), total=Decimal("59.00"), order_date=now - timedelta(days=2))
        make_sales_order(zeta, status=SalesOrderStatus.PENDING, total=Decimal("100.00"),
                         order_date=now - timedelta(days=1), shipping_address="Istanbul")
        make_sales_order(acme, status=SalesOrderStatus.CONFIRMED, total=Decimal("60.00"), order_date=now)
        make_sales_order(None, status=SalesOrderStatus.CANCELLED, total=Decimal("0.00"),
                         order_date=now - timedelta(days=3))

        report = SalesReportService(db_session, now=now).get_sales_report()

        assert [row["order_date"] for row in report["data"]] == sorted(
            (row["order_date"] for row in report["data"]), reverse=True
        )
        delivered = report["data"][2]
        assert delivered["item_count"] == 5
        assert delivered["tax"] == Decimal("9.00")
        assert report["data"][1]["shipping_address"] == "Istanbul"
        orphan = report["data"][3]
        assert orphan["customer_name"] == "Unknown"
        assert orphan["customer_code"] == ""

        summary = report["summary"]
        assert summary["total_orders"] == 4
        assert summary["total_revenue"] == Decimal("219.00")
        assert summary["completed_orders"] == 1
        assert summary["completed_revenue"] == Decimal("59.00")
        assert summary["pending_orders"] == 2
        assert summary["pending_value"] == Decimal("160.00")
        assert summary["cancelled_orders"] == 1

        assert report["top_customers"][0] == {
            "code": "ACME", "name": "Acme", "total": Decimal("119.00"), "orders": 2
        }
        assert report["top_customers"][1]["code"] == "ZETA"

    def test_filters(self, db_session, now, make_customer, make_sales_order):
        acme = make_customer()
        other = make_customer()
        make_sales_order(acme, status=SalesOrderStatus.DELIVERED, order_date=now.replace(hour=23, minute=30))
        make_sales_order(acme, status=SalesOrderStatus.PENDING, order_date=now - timedelta(days=5))
        make_sales_order(other, status=SalesOrderStatus.DELIVERED, order_date=now)

        service = SalesReportService(db_session, now=now)

        by_customer = service.get_sales_report(ReportFilter(id_equals=acme.id))
        assert by_customer["summary"]["total_orders"] == 2

        by_status = service.get_sales_report(ReportFilter(status_in=["DELIVERED"]))
        assert by_status["summary"]["total_orders"] == 2

        ignored_status = service.get_sales_report(ReportFilter(status_in=["LOST"]))
        assert ignored_status["summary"]["total_orders"] == 3

        end_of_today = now.replace(hour=23, minute=59, second=59, microsecond=999000)
        today = service.get_sales_report(
            ReportFilter(date_from=now.replace(hour=0), date_to=end_of_today)
        )
        assert today["summary"]["total_orders"] == 2


class TestTopParties:

    def test_limit_and_first_seen_name(self):
        rows = [
            {"code": "A", "name": "Alpha", "total": Decimal("5")},
            {"code": "B", "name": "Beta", "total": Decimal("50")},
            {"code": "A", "name": "Alpha (renamed)", "total": Decimal("10")},
            {"code": "C", "name": "Gamma", "total": Decimal("1")},
        ]

        top = top_parties(rows, "code", "name", limit=2)

        assert top == [
            {"code": "B", "name": "Beta", "total": Decimal("50"), "orders": 1},
            {"code": "A", "name": "Alpha", "total": Decimal("15"), "orders": 2},
        ]
