"""
Inventory Reports Router

FastAPI router for all inventory-related report endpoints.
Includes valuation, low stock, expiring batches, stock movements
and stock levels.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from erp_analytics.core.config import settings
from erp_analytics.database.database import get_db
from ..exceptions import ReportGenerationError
from ..services.inventory import InventoryReportService
from ..schemas import (
    ExpiringBatchesResponse,
    InventoryValuationResponse,
    LowStockResponse,
    ReportFilter,
    StockLevelsResponse,
    StockMovementResponse
)
from ..utils import (
    create_csv_response,
    prepare_expiring_batches_csv,
    prepare_inventory_valuation_csv,
    prepare_low_stock_csv,
    prepare_stock_levels_csv,
    prepare_stock_movement_csv
)
from ..utils.calculations import parse_end_of_day, parse_iso_datetime


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/inventory-valuation", response_model=None)
def get_inventory_valuation(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    db: Session = Depends(get_db)
):
    """Stock on hand valued at cost and retail price."""
    try:
        service = InventoryReportService(db)
        report_data = service.get_inventory_valuation()

        if output_format == "csv":
            return create_csv_response(prepare_inventory_valuation_csv(report_data), "inventory_valuation")

        return InventoryValuationResponse(**report_data)

    except Exception as e:
        logger.exception("Inventory valuation report failed")
        raise ReportGenerationError("inventory_valuation") from e


@router.get("/low-stock", response_model=None)
def get_low_stock(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    db: Session = Depends(get_db)
):
    """Products at or below their reorder point."""
    try:
        service = InventoryReportService(db)
        report_data = service.get_low_stock()

        if output_format == "csv":
            return create_csv_response(prepare_low_stock_csv(report_data), "low_stock")

        return LowStockResponse(**report_data)

    except Exception as e:
        logger.exception("Low stock report failed")
        raise ReportGenerationError("low_stock") from e


@router.get("/expiring-batches", response_model=None)
def get_expiring_batches(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    days: int = Query(settings.EXPIRY_WINDOW_DAYS, description="Look-ahead window in days"),
    db: Session = Depends(get_db)
):
    """Batches expiring within the look-ahead window, by urgency."""
    try:
        service = InventoryReportService(db)
        report_data = service.get_expiring_batches(days)

        if output_format == "csv":
            return create_csv_response(prepare_expiring_batches_csv(report_data), "expiring_batches")

        return ExpiringBatchesResponse(**report_data)

    except Exception as e:
        logger.exception("Expiring batches report failed")
        raise ReportGenerationError("expiring_batches") from e


@router.get("/stock-movement", response_model=None)
def get_stock_movement(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Movements from (ISO date)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Movements to, whole day included"),
    product_id: Optional[str] = Query(None, alias="productId", description="Filter by product"),
    warehouse_id: Optional[str] = Query(None, alias="warehouseId", description="Source or destination location"),
    movement_type: Optional[str] = Query(None, alias="type", description="IN, OUT or TRANSFER"),
    db: Session = Depends(get_db)
):
    """Most recent stock movements with counts by type."""
    try:
        report_filter = ReportFilter(
            date_from=parse_iso_datetime(start_date),
            date_to=parse_end_of_day(end_date),
            status_in=[movement_type] if movement_type else None,
            id_equals=product_id,
            location_equals=warehouse_id
        )

        service = InventoryReportService(db)
        report_data = service.get_stock_movements(report_filter)

        if output_format == "csv":
            return create_csv_response(prepare_stock_movement_csv(report_data), "stock_movement")

        return StockMovementResponse(**report_data)

    except Exception as e:
        logger.exception("Stock movement report failed")
        raise ReportGenerationError("stock_movement") from e


@router.get("/stock-levels", response_model=None)
def get_stock_levels(
    output_format: str = Query("json", alias="format", description="Output format: json or csv"),
    db: Session = Depends(get_db)
):
    """Stock status of every product."""
    try:
        service = InventoryReportService(db)
        report_data = service.get_stock_levels()

        if output_format == "csv":
            return create_csv_response(prepare_stock_levels_csv(report_data), "stock_levels")

        return StockLevelsResponse(**report_data)

    except Exception as e:
        logger.exception("Stock levels report failed")
        raise ReportGenerationError("stock_levels") from e
