"""
Inventory Reports Service

Handles all inventory-related reports including valuation, low stock
alerts, expiring batches, stock movements and stock levels.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy.orm import joinedload

from .base import BaseReportService
from ..schemas import ReportFilter
from ..utils.calculations import (
    count_by, days_ceil, iso_day, sum_field, to_decimal
)
from erp_analytics.core.config import settings
from erp_analytics.modules.products.models import Batch, MovementType, Product, StockMovement

logger = logging.getLogger(__name__)

OUT_OF_STOCK = "OUT_OF_STOCK"
LOW_STOCK = "LOW_STOCK"

# Stock level labels
IN_STOCK_LABEL = "Stokta"
NO_STOCK_LABEL = "Stok Yok"
LOW_STOCK_LABEL = "Düşük Stok"
OVERSTOCK_LABEL = "Fazla Stok"

# Expiry urgency labels, most urgent first
CRITICAL = "Kritik"
HIGH = "Yüksek"
MEDIUM = "Orta"
NORMAL = "Normal"


def classify_expiry_urgency(days_until_expiry: int) -> str:
    if days_until_expiry <= 7:
        return CRITICAL
    if days_until_expiry <= 14:
        return HIGH
    if days_until_expiry <= 30:
        return MEDIUM
    return NORMAL


def classify_stock_level(product: Product) -> str:
    """Out of stock wins over low stock, which wins over overstock"""
    if product.current_stock == 0:
        return NO_STOCK_LABEL
    if product.current_stock <= product.reorder_point:
        return LOW_STOCK_LABEL
    if product.current_stock > product.max_stock:
        return OVERSTOCK_LABEL
    return IN_STOCK_LABEL


class InventoryReportService(BaseReportService):
    """Service for generating inventory reports"""

    def get_inventory_valuation(self) -> Dict:
        """
        Generate inventory valuation report.

        Stock on hand valued at cost and at retail price, per product by name.
        """
        products = self._fetch(Product, order_by=[Product.name.asc()])

        data = []
        for product in products:
            cost = to_decimal(product.cost)
            price = to_decimal(product.price)
            data.append({
                "sku": product.sku,
                "name": product.name,
                "category": product.category,
                "current_stock": product.current_stock,
                "cost": cost,
                "price": price,
                "cost_value": product.current_stock * cost,
                "retail_value": product.current_stock * price,
                "potential_profit": product.current_stock * (price - cost)
            })

        totals = {
            "total_products": len(data),
            "total_units": sum_field(data, "current_stock", 0),
            "total_cost_value": sum_field(data, "cost_value"),
            "total_retail_value": sum_field(data, "retail_value"),
            "total_potential_profit": sum_field(data, "potential_profit")
        }

        return {"data": data, "totals": totals}

    def get_low_stock(self) -> Dict:
        """
        Generate low stock alert report.

        Products at or below their reorder point, lowest stock first.
        One unfiltered fetch; the stock/reorder point comparison runs here.
        """
        products = self._fetch(Product, order_by=[Product.current_stock.asc()])

        data = []
        for product in products:
            if product.current_stock > product.reorder_point:
                continue
            deficit = product.reorder_point - product.current_stock
            data.append({
                "sku": product.sku,
                "name": product.name,
                "category": product.category,
                "current_stock": product.current_stock,
                "reorder_point": product.reorder_point,
                "deficit": deficit,
                "status": OUT_OF_STOCK if product.current_stock == 0 else LOW_STOCK,
                "estimated_reorder_cost": deficit * to_decimal(product.cost)
            })

        by_status = count_by(data, lambda row: row["status"])
        totals = {
            "total_low_stock": by_status.get(LOW_STOCK, 0),
            "total_out_of_stock": by_status.get(OUT_OF_STOCK, 0),
            "total_deficit_units": sum(max(0, row["deficit"]) for row in data),
            "estimated_reorder_total": sum(
                (max(to_decimal(0), row["estimated_reorder_cost"]) for row in data),
                to_decimal(0)
            )
        }

        logger.debug(f"Low stock: {len(data)} of {len(products)} products at or below reorder point")
        return {"data": data, "totals": totals}

    def get_expiring_batches(self, days: int = settings.EXPIRY_WINDOW_DAYS) -> Dict:
        """
        Generate expiring batches report.

        Batches whose expiry date falls between now and `days` days from
        now, soonest first, classified by urgency.
        """
        window = ReportFilter(date_from=self.now, date_to=self.now + timedelta(days=days))
        batches = self._fetch(
            Batch,
            window,
            date_field=Batch.expiry_date,
            includes=[joinedload(Batch.product)],
            order_by=[Batch.expiry_date.asc()]
        )

        data = []
        for batch in batches:
            days_until_expiry = days_ceil(batch.expiry_date, self.now)
            data.append({
                "batch_number": batch.batch_number,
                "product_sku": batch.product.sku,
                "product_name": batch.product.name,
                "quantity": batch.current_qty,
                "expiry_date": iso_day(batch.expiry_date),
                "days_until_expiry": days_until_expiry,
                "urgency": classify_expiry_urgency(days_until_expiry),
                "cost_value": batch.current_qty * to_decimal(batch.product.cost)
            })

        by_urgency = count_by(data, lambda row: row["urgency"])
        summary = {
            "total_batches": len(data),
            "critical": by_urgency.get(CRITICAL, 0),
            "high": by_urgency.get(HIGH, 0),
            "medium": by_urgency.get(MEDIUM, 0),
            "total_value_at_risk": sum_field(data, "cost_value")
        }

        return {"data": data, "summary": summary}

    def get_stock_movements(self, report_filter: Optional[ReportFilter] = None) -> Dict:
        """
        Generate stock movement report.

        Most recent movements first, capped at STOCK_MOVEMENT_LIMIT rows.
        The location filter matches either side of a movement; unknown
        movement types are ignored.
        """
        report_filter = report_filter or ReportFilter()
        report_filter = report_filter.model_copy(
            update={"status_in": self._known_statuses(MovementType, report_filter.status_in)}
        )

        movements = self._fetch(
            StockMovement,
            report_filter,
            date_field=StockMovement.created_at,
            status_field=StockMovement.type,
            id_field=StockMovement.product_id,
            location_fields=[StockMovement.from_location_id, StockMovement.to_location_id],
            includes=[
                joinedload(StockMovement.product),
                joinedload(StockMovement.from_location),
                joinedload(StockMovement.to_location)
            ],
            order_by=[StockMovement.created_at.desc()],
            limit=settings.STOCK_MOVEMENT_LIMIT
        )

        data = [self._movement_row(movement) for movement in movements]

        by_type = count_by(data, lambda row: row["type"])
        summary = {
            "inbound": by_type.get(MovementType.IN.value, 0),
            "outbound": by_type.get(MovementType.OUT.value, 0),
            "transfer": by_type.get(MovementType.TRANSFER.value, 0),
            "total_movements": len(data),
            "total_quantity_moved": sum_field(data, "quantity", 0)
        }

        return {"data": data, "summary": summary}

    def _movement_row(self, movement: StockMovement) -> Dict[str, Any]:
        return {
            "id": movement.id,
            "type": movement.type.value,
            "product_name": movement.product.name,
            "product_sku": movement.product.sku,
            "from_location": movement.from_location.name if movement.from_location else None,
            "to_location": movement.to_location.name if movement.to_location else None,
            "quantity": movement.quantity,
            "reference": movement.reference,
            "notes": movement.notes,
            "created_at": iso_day(movement.created_at)
        }

    def get_stock_levels(self) -> Dict:
        """Generate stock levels report for every product, by name"""
        products = self._fetch(Product, order_by=[Product.name.asc()])

        data = [
            {
                "sku": product.sku,
                "name": product.name,
                "category": product.category,
                "current_stock": product.current_stock,
                "reorder_point": product.reorder_point,
                "max_stock": product.max_stock,
                "status": classify_stock_level(product),
                "needs_reorder": product.current_stock <= product.reorder_point,
                "excess_stock": max(0, product.current_stock - product.max_stock)
            }
            for product in products
        ]

        by_status = count_by(data, lambda row: row["status"])
        summary = {
            "total_products": len(data),
            "in_stock": by_status.get(IN_STOCK_LABEL, 0),
            "low_stock": by_status.get(LOW_STOCK_LABEL, 0),
            "out_of_stock": by_status.get(NO_STOCK_LABEL, 0),
            "overstocked": by_status.get(OVERSTOCK_LABEL, 0)
        }

        return {"data": data, "summary": summary}
