"""
Financial Reports Router

FastAPI router for invoice aging and revenue report endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from erp_analytics.database.database import get_db
from ..exceptions import ReportGenerationError
from ..services.financial import FinancialReportService
from ..schemas import InvoiceAgingResponse, ReportFilter, RevenueResponse
from ..utils import create_csv_response, prepare_invoice_aging_csv, prepare_revenue_csv
from ..utils.calculations import parse_iso_datetime


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/invoice-aging", response_model=None)
def get_invoice_aging(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    db: Session = Depends(get_db)
):
    """Open receivables and payables bucketed by days past due."""
    try:
        service = FinancialReportService(db)
        report_data = service.get_invoice_aging()

        if output_format == "csv":
            return create_csv_response(prepare_invoice_aging_csv(report_data), "invoice_aging")

        return InvoiceAgingResponse(**report_data)

    except Exception as e:
        logger.exception("Invoice aging report failed")
        raise ReportGenerationError("invoice_aging") from e


@router.get("/revenue", response_model=None)
def get_revenue(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    date_from: Optional[str] = Query(None, alias="from", description="Invoices created on or after (ISO date)"),
    date_to: Optional[str] = Query(None, alias="to", description="Invoices created on or before (ISO date)"),
    db: Session = Depends(get_db)
):
    """Revenue, cost and profit per product from settled sales invoices."""
    try:
        report_filter = ReportFilter(
            date_from=parse_iso_datetime(date_from),
            date_to=parse_iso_datetime(date_to)
        )

        service = FinancialReportService(db)
        report_data = service.get_revenue_by_product(report_filter)

        if output_format == "csv":
            return create_csv_response(prepare_revenue_csv(report_data), "revenue")

        return RevenueResponse(**report_data)

    except Exception as e:
        logger.exception("Revenue report failed")
        raise ReportGenerationError("revenue") from e
