"""
Financial Reports Service

Handles invoice-based reports: receivables/payables aging and revenue,
cost and profit by product.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import joinedload, selectinload

from .base import BaseReportService
from ..schemas import ReportFilter
from ..utils.calculations import (
    days_floor, group_and_reduce, iso_day, safe_divide, sum_by, sum_field, to_decimal, ZERO
)
from erp_analytics.modules.invoices.models import Invoice, InvoiceItem, InvoiceStatus, InvoiceType

logger = logging.getLogger(__name__)

OPEN_INVOICE_STATUSES = [InvoiceStatus.SENT, InvoiceStatus.PARTIAL, InvoiceStatus.OVERDUE]
SETTLED_INVOICE_STATUSES = [InvoiceStatus.PAID, InvoiceStatus.PARTIAL]

CURRENT = "Current"
DAYS_1_30 = "1-30 days"
DAYS_31_60 = "31-60 days"
DAYS_61_90 = "61-90 days"
DAYS_90_PLUS = "90+ days"


def classify_aging_bucket(days_overdue: int) -> str:
    if days_overdue <= 0:
        return CURRENT
    if days_overdue <= 30:
        return DAYS_1_30
    if days_overdue <= 60:
        return DAYS_31_60
    if days_overdue <= 90:
        return DAYS_61_90
    return DAYS_90_PLUS


def resolve_party(invoice: Invoice):
    """Counterparty name and code: the customer on SALES invoices, else the supplier"""
    party = invoice.customer if invoice.type == InvoiceType.SALES else invoice.supplier
    if party is None:
        return "Unknown", ""
    return party.name, party.code or ""


class FinancialReportService(BaseReportService):
    """Service for generating financial reports"""

    def get_invoice_aging(self) -> Dict:
        """
        Generate invoice aging report.

        Open invoices with an outstanding balance, earliest due first,
        bucketed by whole days past due (rounded down).
        """
        invoices = self._fetch(
            Invoice,
            ReportFilter(status_in=OPEN_INVOICE_STATUSES),
            status_field=Invoice.status,
            criteria=[Invoice.amount_due > 0],
            includes=[joinedload(Invoice.customer), joinedload(Invoice.supplier)],
            order_by=[Invoice.due_date.asc()]
        )

        data = [self._aging_row(invoice) for invoice in invoices]

        by_bucket = sum_by(data, lambda row: row["aging_bucket"], lambda row: row["amount_due"])
        aging_summary = {
            "current": by_bucket.get(CURRENT, ZERO),
            "days1to30": by_bucket.get(DAYS_1_30, ZERO),
            "days31to60": by_bucket.get(DAYS_31_60, ZERO),
            "days61to90": by_bucket.get(DAYS_61_90, ZERO),
            "days90plus": by_bucket.get(DAYS_90_PLUS, ZERO),
            "total_outstanding": sum_field(data, "amount_due")
        }

        receivables = [row for row in data if row["type"] == InvoiceType.SALES.value]
        payables = [row for row in data if row["type"] == InvoiceType.PURCHASE.value]

        logger.debug(f"Invoice aging: {len(data)} open invoices")
        return {
            "data": data,
            "aging_summary": aging_summary,
            "receivables": {"count": len(receivables), "total": sum_field(receivables, "amount_due")},
            "payables": {"count": len(payables), "total": sum_field(payables, "amount_due")}
        }

    def _aging_row(self, invoice: Invoice) -> Dict[str, Any]:
        days_overdue = days_floor(self.now, invoice.due_date)
        party, party_code = resolve_party(invoice)

        return {
            "invoice_number": invoice.invoice_number,
            "type": invoice.type.value,
            "party": party,
            "party_code": party_code,
            "invoice_date": iso_day(invoice.invoice_date),
            "due_date": iso_day(invoice.due_date),
            "total": to_decimal(invoice.total),
            "amount_paid": to_decimal(invoice.amount_paid),
            "amount_due": to_decimal(invoice.amount_due),
            "days_overdue": max(0, days_overdue),
            "aging_bucket": classify_aging_bucket(days_overdue)
        }

    def get_revenue_by_product(self, report_filter: Optional[ReportFilter] = None) -> Dict:
        """
        Generate revenue by product report.

        Rolls up the line items of paid and partially paid SALES invoices
        (created within the optional range) per product. Profit is derived
        once the roll-up is complete. Lines without a product are skipped.
        """
        report_filter = report_filter or ReportFilter()
        invoices = self._fetch(
            Invoice,
            report_filter.model_copy(update={"status_in": SETTLED_INVOICE_STATUSES}),
            date_field=Invoice.created_at,
            status_field=Invoice.status,
            criteria=[Invoice.type == InvoiceType.SALES],
            includes=[selectinload(Invoice.items).joinedload(InvoiceItem.product)],
            order_by=[Invoice.created_at.desc()]
        )

        line_items = [item for invoice in invoices for item in invoice.items]
        rollup = group_and_reduce(
            line_items,
            key=lambda item: item.product_id if item.product is not None else None,
            initial=self._empty_revenue_row,
            accumulate=self._accumulate_revenue
        )

        data = list(rollup.values())
        for row in data:
            row["profit"] = row["revenue"] - row["cost"]
        data.sort(key=lambda row: row["revenue"], reverse=True)

        total_revenue = sum_field(data, "revenue")
        total_profit = sum_field(data, "profit")
        summary = {
            "total_revenue": total_revenue,
            "total_cost": sum_field(data, "cost"),
            "total_profit": total_profit,
            "profit_margin": safe_divide(total_profit, total_revenue) * 100,
            "total_units_sold": sum_field(data, "units_sold", 0),
            "unique_products": len(data)
        }

        return {"data": data, "summary": summary}

    @staticmethod
    def _empty_revenue_row(item: InvoiceItem) -> Dict[str, Any]:
        return {
            "product_id": item.product_id,
            "product_name": item.product.name,
            "sku": item.product.sku,
            "category": item.product.category,
            "units_sold": 0,
            "revenue": ZERO,
            "cost": ZERO,
            "profit": ZERO
        }

    @staticmethod
    def _accumulate_revenue(row: Dict[str, Any], item: InvoiceItem) -> Dict[str, Any]:
        row["units_sold"] += item.quantity
        row["revenue"] += to_decimal(item.total)
        row["cost"] += item.quantity * to_decimal(item.product.cost)
        return row
