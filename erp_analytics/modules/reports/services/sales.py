"""
Sales Reports Service

Handles all sales-related reports: customer analysis, the sales summary
and the detailed sales order report with top customers.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload, selectinload

from .base import BaseReportService
from ..schemas import ReportFilter
from ..utils.calculations import (
    count_by, group_and_reduce, iso_day, safe_divide, sum_field, to_decimal
)
from erp_analytics.core.config import settings
from erp_analytics.modules.customers.models import (
    Customer, SalesOrder, SalesOrderItem, SalesOrderStatus
)

logger = logging.getLogger(__name__)

PENDING_SALES_STATUSES = (SalesOrderStatus.PENDING, SalesOrderStatus.CONFIRMED)


def top_parties(rows: List[Dict[str, Any]], code_field: str, name_field: str, limit: int) -> List[Dict[str, Any]]:
    """
    Group order rows by counterparty code and rank them by order total.

    The first row seen for a code supplies its display name. Ties keep
    first-seen order.
    """
    totals = group_and_reduce(
        rows,
        key=lambda row: row[code_field],
        initial=lambda row: {"code": row[code_field], "name": row[name_field], "total": to_decimal(0), "orders": 0},
        accumulate=lambda party, row: {**party, "total": party["total"] + row["total"], "orders": party["orders"] + 1}
    )
    return sorted(totals.values(), key=lambda party: party["total"], reverse=True)[:limit]


class SalesReportService(BaseReportService):
    """Service for generating sales reports"""

    def get_customer_analysis(self) -> Dict:
        """
        Generate customer analysis report.

        One row per customer (by name) with order counts, revenue and the
        date of the most recent order.
        """
        customers = self._fetch(
            Customer,
            includes=[selectinload(Customer.sales_orders)],
            order_by=[Customer.name.asc()]
        )

        data = [self._customer_row(customer) for customer in customers]

        total_revenue = sum_field(data, "total_revenue")
        summary = {
            "total_customers": len(data),
            "active_customers": sum(1 for row in data if row["total_orders"] > 0),
            "total_revenue": total_revenue,
            "average_revenue_per_customer": safe_divide(total_revenue, len(data))
        }

        logger.debug(f"Customer analysis: {len(data)} customers, revenue {total_revenue}")
        return {"data": data, "summary": summary}

    def _customer_row(self, customer: Customer) -> Dict[str, Any]:
        orders = customer.sales_orders
        total_revenue = sum((to_decimal(order.total) for order in orders), to_decimal(0))
        latest = max(orders, key=lambda order: order.created_at, default=None)

        return {
            "customer_id": customer.id,
            "customer_name": customer.name,
            "email": customer.email,
            "phone": customer.phone or "-",
            "total_orders": len(orders),
            "completed_orders": sum(1 for order in orders if order.status == SalesOrderStatus.DELIVERED),
            "total_revenue": total_revenue,
            "average_order_value": safe_divide(total_revenue, len(orders)),
            "last_order_date": iso_day(latest.created_at) if latest is not None else "-"
        }

    def get_sales_summary(self, report_filter: Optional[ReportFilter] = None) -> Dict:
        """
        Generate sales summary report.

        Sales orders created within the optional range, newest first, with
        totals and counts by status.
        """
        orders = self._fetch(
            SalesOrder,
            report_filter,
            date_field=SalesOrder.created_at,
            includes=[
                joinedload(SalesOrder.customer),
                selectinload(SalesOrder.items).joinedload(SalesOrderItem.product)
            ],
            order_by=[SalesOrder.created_at.desc()]
        )

        data = [
            {
                "order_number": order.order_number,
                "customer_name": order.customer.name if order.customer else "-",
                "status": order.status.value,
                "total_amount": to_decimal(order.total),
                "item_count": len(order.items),
                "created_at": iso_day(order.created_at)
            }
            for order in orders
        ]

        by_status = count_by(data, lambda row: row["status"])
        total_revenue = sum_field(data, "total_amount")
        summary = {
            "total_orders": len(data),
            "total_revenue": total_revenue,
            "by_status": {
                "draft": by_status.get(SalesOrderStatus.DRAFT.value, 0),
                "confirmed": by_status.get(SalesOrderStatus.CONFIRMED.value, 0),
                "shipped": by_status.get(SalesOrderStatus.SHIPPED.value, 0),
                "delivered": by_status.get(SalesOrderStatus.DELIVERED.value, 0),
                "cancelled": by_status.get(SalesOrderStatus.CANCELLED.value, 0)
            },
            "average_order_value": safe_divide(total_revenue, len(data))
        }

        return {"data": data, "summary": summary}

    def get_sales_report(self, report_filter: Optional[ReportFilter] = None) -> Dict:
        """
        Generate the detailed sales order report.

        Orders by order date (newest first), filtered by date range, status
        and customer. Unknown status values are ignored.
        """
        report_filter = report_filter or ReportFilter()
        report_filter = report_filter.model_copy(
            update={"status_in": self._known_statuses(SalesOrderStatus, report_filter.status_in)}
        )

        orders = self._fetch(
            SalesOrder,
            report_filter,
            date_field=SalesOrder.order_date,
            status_field=SalesOrder.status,
            id_field=SalesOrder.customer_id,
            includes=[joinedload(SalesOrder.customer), selectinload(SalesOrder.items)],
            order_by=[SalesOrder.order_date.desc()]
        )

        data = [
            {
                "order_number": order.order_number,
                "customer_name": order.customer.name if order.customer else "Unknown",
                "customer_code": order.customer.code if order.customer else "",
                "order_date": iso_day(order.order_date),
                "status": order.status.value,
                "item_count": sum(item.quantity for item in order.items),
                "subtotal": to_decimal(order.subtotal),
                "tax": to_decimal(order.tax),
                "total": to_decimal(order.total),
                "shipping_address": order.shipping_address
            }
            for order in orders
        ]

        completed = [row for row in data if row["status"] == SalesOrderStatus.DELIVERED.value]
        pending = [
            row for row in data
            if row["status"] in {status.value for status in PENDING_SALES_STATUSES}
        ]
        total_revenue = sum_field(data, "total")
        summary = {
            "total_orders": len(data),
            "total_revenue": total_revenue,
            "completed_orders": len(completed),
            "completed_revenue": sum_field(completed, "total"),
            "pending_orders": len(pending),
            "pending_value": sum_field(pending, "total"),
            "average_order_value": safe_divide(total_revenue, len(data)),
            "cancelled_orders": sum(1 for row in data if row["status"] == SalesOrderStatus.CANCELLED.value)
        }

        return {
            "data": data,
            "summary": summary,
            "top_customers": top_parties(data, "customer_code", "customer_name", settings.TOP_PARTIES_LIMIT)
        }
