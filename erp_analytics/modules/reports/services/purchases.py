"""
Purchase Reports Service

Handles purchasing reports: the purchase summary, supplier performance
(spend, lead time and on-time delivery) and the detailed purchase order
report with top suppliers.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload, selectinload

from .base import BaseReportService
from .sales import top_parties
from ..schemas import ReportFilter
from ..utils.calculations import (
    count_by, days_ceil, iso_day, round_half_up, safe_divide, sum_field, to_decimal
)
from erp_analytics.core.config import settings
from erp_analytics.modules.suppliers.models import (
    PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus, Supplier
)

logger = logging.getLogger(__name__)

PENDING_PURCHASE_STATUSES = (
    PurchaseOrderStatus.SENT,
    PurchaseOrderStatus.CONFIRMED,
    PurchaseOrderStatus.PARTIAL,
)


def lead_times(orders: List[PurchaseOrder]) -> List[int]:
    """
    Days between expected and actual receipt for received orders.

    The last update of a RECEIVED order stands in for its receipt time.
    Negative values mean early delivery.
    """
    return [
        days_ceil(order.updated_at, order.expected_date)
        for order in orders
        if order.status == PurchaseOrderStatus.RECEIVED
        and order.expected_date is not None
        and order.updated_at is not None
    ]


class PurchaseReportService(BaseReportService):
    """Service for generating purchase reports"""

    def get_purchase_summary(self, report_filter: Optional[ReportFilter] = None) -> Dict:
        """
        Generate purchase summary report.

        Purchase orders created within the optional range, newest first,
        with spend and counts by status.
        """
        orders = self._fetch(
            PurchaseOrder,
            report_filter,
            date_field=PurchaseOrder.created_at,
            includes=[
                joinedload(PurchaseOrder.supplier),
                selectinload(PurchaseOrder.items).joinedload(PurchaseOrderItem.product)
            ],
            order_by=[PurchaseOrder.created_at.desc()]
        )

        data = [
            {
                "order_number": order.order_number,
                "supplier_name": order.supplier.name if order.supplier else "-",
                "status": order.status.value,
                "total_amount": to_decimal(order.total),
                "item_count": len(order.items),
                "created_at": iso_day(order.created_at),
                "expected_date": iso_day(order.expected_date) or "-"
            }
            for order in orders
        ]

        by_status = count_by(data, lambda row: row["status"])
        total_spent = sum_field(data, "total_amount")
        summary = {
            "total_orders": len(data),
            "total_spent": total_spent,
            "by_status": {
                status.value.lower(): by_status.get(status.value, 0)
                for status in PurchaseOrderStatus
            },
            "average_order_value": safe_divide(total_spent, len(data))
        }

        return {"data": data, "summary": summary}

    def get_supplier_performance(self) -> Dict:
        """
        Generate supplier performance report.

        Spend, received orders, products supplied, average lead time and
        on-time delivery rate per supplier, ordered by name.
        """
        suppliers = self._fetch(
            Supplier,
            includes=[
                selectinload(Supplier.purchase_orders).selectinload(PurchaseOrder.items),
                selectinload(Supplier.products)
            ],
            order_by=[Supplier.name.asc()]
        )

        data = [self._supplier_row(supplier) for supplier in suppliers]

        summary = {
            "total_suppliers": len(data),
            "active_suppliers": sum(1 for row in data if row["total_orders"] > 0),
            "total_spent": sum_field(data, "total_spent"),
            "average_lead_time": round_half_up(
                safe_divide(sum_field(data, "average_lead_time_days", 0), len(data))
            )
        }

        logger.debug(f"Supplier performance: {len(data)} suppliers")
        return {"data": data, "summary": summary}

    def _supplier_row(self, supplier: Supplier) -> Dict[str, Any]:
        orders = supplier.purchase_orders
        total_spent = sum((to_decimal(order.total) for order in orders), to_decimal(0))
        delays = lead_times(orders)
        on_time = sum(1 for delay in delays if delay <= 0)

        return {
            "supplier_id": supplier.id,
            "supplier_name": supplier.name,
            "email": supplier.email,
            "phone": supplier.phone or "-",
            "total_orders": len(orders),
            "received_orders": sum(1 for order in orders if order.status == PurchaseOrderStatus.RECEIVED),
            "total_spent": total_spent,
            "average_order_value": safe_divide(total_spent, len(orders)),
            "products_supplied": len(supplier.products),
            "average_lead_time_days": round_half_up(safe_divide(sum(delays), len(delays))),
            "on_time_delivery_rate": round_half_up(safe_divide(on_time, len(delays)) * 100)
        }

    def get_purchase_report(self, report_filter: Optional[ReportFilter] = None) -> Dict:
        """
        Generate the detailed purchase order report.

        Orders by order date (newest first), filtered by date range, status
        and supplier. Unknown status values are ignored.
        """
        report_filter = report_filter or ReportFilter()
        report_filter = report_filter.model_copy(
            update={"status_in": self._known_statuses(PurchaseOrderStatus, report_filter.status_in)}
        )

        orders = self._fetch(
            PurchaseOrder,
            report_filter,
            date_field=PurchaseOrder.order_date,
            status_field=PurchaseOrder.status,
            id_field=PurchaseOrder.supplier_id,
            includes=[joinedload(PurchaseOrder.supplier), selectinload(PurchaseOrder.items)],
            order_by=[PurchaseOrder.order_date.desc()]
        )

        data = [
            {
                "order_number": order.order_number,
                "supplier_name": order.supplier.name if order.supplier else "Unknown",
                "supplier_code": order.supplier.code if order.supplier else "",
                "order_date": iso_day(order.order_date),
                "expected_date": iso_day(order.expected_date),
                "status": order.status.value,
                "item_count": sum(item.quantity for item in order.items),
                "subtotal": to_decimal(order.subtotal),
                "tax": to_decimal(order.tax),
                "total": to_decimal(order.total)
            }
            for order in orders
        ]

        received = [row for row in data if row["status"] == PurchaseOrderStatus.RECEIVED.value]
        pending = [
            row for row in data
            if row["status"] in {status.value for status in PENDING_PURCHASE_STATUSES}
        ]
        total_spend = sum_field(data, "total")
        summary = {
            "total_orders": len(data),
            "total_spend": total_spend,
            "received_orders": len(received),
            "received_value": sum_field(received, "total"),
            "pending_orders": len(pending),
            "pending_value": sum_field(pending, "total"),
            "average_order_value": safe_divide(total_spend, len(data)),
            "cancelled_orders": sum(1 for row in data if row["status"] == PurchaseOrderStatus.CANCELLED.value)
        }

        return {
            "data": data,
            "summary": summary,
            "top_suppliers": top_parties(data, "supplier_code", "supplier_name", settings.TOP_PARTIES_LIMIT)
        }
