"""
Sales Reports Router

FastAPI router for sales-related report endpoints: customer analysis,
sales summary and the detailed sales order report.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from erp_analytics.database.database import get_db
from ..exceptions import ReportGenerationError
from ..services.sales import SalesReportService
from ..schemas import (
    CustomerAnalysisResponse,
    ReportFilter,
    SalesReportResponse,
    SalesSummaryResponse
)
from ..utils import (
    create_csv_response,
    prepare_customer_analysis_csv,
    prepare_sales_csv,
    prepare_sales_summary_csv
)
from ..utils.calculations import parse_end_of_day, parse_iso_datetime


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/customer-analysis", response_model=None)
def get_customer_analysis(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    db: Session = Depends(get_db)
):
    """Per-customer order counts, revenue and last order date."""
    try:
        service = SalesReportService(db)
        report_data = service.get_customer_analysis()

        if output_format == "csv":
            return create_csv_response(prepare_customer_analysis_csv(report_data), "customer_analysis")

        return CustomerAnalysisResponse(**report_data)

    except Exception as e:
        logger.exception("Customer analysis report failed")
        raise ReportGenerationError("customer_analysis") from e


@router.get("/sales-summary", response_model=None)
def get_sales_summary(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    date_from: Optional[str] = Query(None, alias="from", description="Created on or after (ISO date)"),
    date_to: Optional[str] = Query(None, alias="to", description="Created on or before (ISO date)"),
    db: Session = Depends(get_db)
):
    """Sales orders with totals and counts by status."""
    try:
        report_filter = ReportFilter(
            date_from=parse_iso_datetime(date_from),
            date_to=parse_iso_datetime(date_to)
        )

        service = SalesReportService(db)
        report_data = service.get_sales_summary(report_filter)

        if output_format == "csv":
            return create_csv_response(prepare_sales_summary_csv(report_data), "sales_summary")

        return SalesSummaryResponse(**report_data)

    except Exception as e:
        logger.exception("Sales summary report failed")
        raise ReportGenerationError("sales_summary") from e


@router.get("/sales", response_model=None)
def get_sales_report(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Order date from (ISO date)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Order date to, whole day included"),
    status: Optional[str] = Query(None, description="Sales order status"),
    customer_id: Optional[str] = Query(None, alias="customerId", description="Filter by customer"),
    db: Session = Depends(get_db)
):
    """Detailed sales orders with summary and top customers."""
    try:
        report_filter = ReportFilter(
            date_from=parse_iso_datetime(start_date),
            date_to=parse_end_of_day(end_date),
            status_in=[status] if status else None,
            id_equals=customer_id
        )

        service = SalesReportService(db)
        report_data = service.get_sales_report(report_filter)

        if output_format == "csv":
            return create_csv_response(prepare_sales_csv(report_data), "sales")

        return SalesReportResponse(**report_data)

    except Exception as e:
        logger.exception("Sales report failed")
        raise ReportGenerationError("sales") from e
