"""
Purchase Reports Router

FastAPI router for purchasing report endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from erp_analytics.database.database import get_db
from ..exceptions import ReportGenerationError
from ..services.purchases import PurchaseReportService
from ..schemas import (
    PurchaseReportResponse,
    PurchaseSummaryResponse,
    ReportFilter,
    SupplierPerformanceResponse
)
from ..utils import (
    create_csv_response,
    prepare_purchase_csv,
    prepare_purchase_summary_csv,
    prepare_supplier_performance_csv
)
from ..utils.calculations import parse_end_of_day, parse_iso_datetime


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/purchase-summary", response_model=None)
def get_purchase_summary(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    date_from: Optional[str] = Query(None, alias="from", description="Created on or after (ISO date)"),
    date_to: Optional[str] = Query(None, alias="to", description="Created on or before (ISO date)"),
    db: Session = Depends(get_db)
):
    """Purchase orders with spend and counts by status."""
    try:
        report_filter = ReportFilter(
            date_from=parse_iso_datetime(date_from),
            date_to=parse_iso_datetime(date_to)
        )

        service = PurchaseReportService(db)
        report_data = service.get_purchase_summary(report_filter)

        if output_format == "csv":
            return create_csv_response(prepare_purchase_summary_csv(report_data), "purchase_summary")

        return PurchaseSummaryResponse(**report_data)

    except Exception as e:
        logger.exception("Purchase summary report failed")
        raise ReportGenerationError("purchase_summary") from e


@router.get("/supplier-performance", response_model=None)
def get_supplier_performance(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    db: Session = Depends(get_db)
):
    """Spend, lead time and on-time delivery rate per supplier."""
    try:
        service = PurchaseReportService(db)
        report_data = service.get_supplier_performance()

        if output_format == "csv":
            return create_csv_response(prepare_supplier_performance_csv(report_data), "supplier_performance")

        return SupplierPerformanceResponse(**report_data)

    except Exception as e:
        logger.exception("Supplier performance report failed")
        raise ReportGenerationError("supplier_performance") from e


@router.get("/purchase", response_model=None)
def get_purchase_report(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Order date from (ISO date)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Order date to, whole day included"),
    status: Optional[str] = Query(None, description="Purchase order status"),
    supplier_id: Optional[str] = Query(None, alias="supplierId", description="Filter by supplier"),
    db: Session = Depends(get_db)
):
    """Detailed purchase orders with summary and top suppliers."""
    try:
        report_filter = ReportFilter(
            date_from=parse_iso_datetime(start_date),
            date_to=parse_end_of_day(end_date),
            status_in=[status] if status else None,
            id_equals=supplier_id
        )

        service = PurchaseReportService(db)
        report_data = service.get_purchase_report(report_filter)

        if output_format == "csv":
            return create_csv_response(prepare_purchase_csv(report_data), "purchase")

        return PurchaseReportResponse(**report_data)

    except Exception as e:
        logger.exception("Purchase report failed")
        raise ReportGenerationError("purchase") from e
