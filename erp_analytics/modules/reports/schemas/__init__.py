"""
Pydantic schemas for Reports module

Defines the query filter and the JSON response models for all report
endpoints. Fields are snake_case in Python and camelCase on the wire;
monetary values travel as Decimal internally and serialize as JSON numbers.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated


Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ReportModel(BaseModel):
    """Base for response models: camelCase aliases, snake_case construction"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Query stage filter
class ReportFilter(BaseModel):
    """
    Declarative filter for report queries.

    Absent options impose no constraint. Which column each option applies to
    is decided by the report that issues the query.
    """
    date_from: Optional[datetime] = Field(None, description="Inclusive lower bound")
    date_to: Optional[datetime] = Field(None, description="Inclusive upper bound")
    status_in: Optional[List[Any]] = Field(None, description="Allowed status values")
    id_equals: Optional[str] = Field(None, description="Exact id match")
    location_equals: Optional[str] = Field(None, description="Location on either side of a movement")


# Customer analysis
class CustomerAnalysisItem(ReportModel):
    customer_id: str
    customer_name: str
    email: Optional[str]
    phone: str
    total_orders: int
    completed_orders: int
    total_revenue: Money
    average_order_value: Money
    last_order_date: str


class CustomerAnalysisSummary(ReportModel):
    total_customers: int
    active_customers: int
    total_revenue: Money
    average_revenue_per_customer: Money


class CustomerAnalysisResponse(ReportModel):
    data: List[CustomerAnalysisItem]
    summary: CustomerAnalysisSummary


# Expiring batches
class ExpiringBatchItem(ReportModel):
    batch_number: str
    product_sku: str
    product_name: str
    quantity: int
    expiry_date: Optional[str]
    days_until_expiry: int
    urgency: str
    cost_value: Money


class ExpiringBatchesSummary(ReportModel):
    total_batches: int
    critical: int
    high: int
    medium: int
    total_value_at_risk: Money


class ExpiringBatchesResponse(ReportModel):
    data: List[ExpiringBatchItem]
    summary: ExpiringBatchesSummary


# Inventory valuation
class InventoryValuationItem(ReportModel):
    sku: str
    name: str
    category: str
    current_stock: int
    cost: Money
    price: Money
    cost_value: Money
    retail_value: Money
    potential_profit: Money


class InventoryValuationTotals(ReportModel):
    total_products: int
    total_units: int
    total_cost_value: Money
    total_retail_value: Money
    total_potential_profit: Money


class InventoryValuationResponse(ReportModel):
    data: List[InventoryValuationItem]
    totals: InventoryValuationTotals


# Invoice aging
class InvoiceAgingItem(ReportModel):
    invoice_number: str
    type: str
    party: str
    party_code: str
    invoice_date: str
    due_date: str
    total: Money
    amount_paid: Money
    amount_due: Money
    days_overdue: int
    aging_bucket: str


class AgingSummary(ReportModel):
    current: Money
    days1to30: Money = Field(alias="days1to30")
    days31to60: Money = Field(alias="days31to60")
    days61to90: Money = Field(alias="days61to90")
    days90plus: Money = Field(alias="days90plus")
    total_outstanding: Money


class PartyBalance(ReportModel):
    count: int
    total: Money


class InvoiceAgingResponse(ReportModel):
    data: List[InvoiceAgingItem]
    aging_summary: AgingSummary
    receivables: PartyBalance
    payables: PartyBalance


# Low stock
class LowStockItem(ReportModel):
    sku: str
    name: str
    category: str
    current_stock: int
    reorder_point: int
    deficit: int
    status: str
    estimated_reorder_cost: Money


class LowStockTotals(ReportModel):
    total_low_stock: int
    total_out_of_stock: int
    total_deficit_units: int
    estimated_reorder_total: Money


class LowStockResponse(ReportModel):
    data: List[LowStockItem]
    totals: LowStockTotals


# Purchase summary
class PurchaseSummaryItem(ReportModel):
    order_number: str
    supplier_name: str
    status: str
    total_amount: Money
    item_count: int
    created_at: str
    expected_date: str


class PurchaseStatusCounts(ReportModel):
    draft: int
    sent: int
    confirmed: int
    partial: int
    received: int
    cancelled: int


class PurchaseSummary(ReportModel):
    total_orders: int
    total_spent: Money
    by_status: PurchaseStatusCounts
    average_order_value: Money


class PurchaseSummaryResponse(ReportModel):
    data: List[PurchaseSummaryItem]
    summary: PurchaseSummary


# Revenue by product
class RevenueItem(ReportModel):
    product_id: str
    product_name: str
    sku: str
    category: str
    units_sold: int
    revenue: Money
    cost: Money
    profit: Money


class RevenueSummary(ReportModel):
    total_revenue: Money
    total_cost: Money
    total_profit: Money
    profit_margin: Money
    total_units_sold: int
    unique_products: int


class RevenueResponse(ReportModel):
    data: List[RevenueItem]
    summary: RevenueSummary


# Sales summary
class SalesSummaryItem(ReportModel):
    order_number: str
    customer_name: str
    status: str
    total_amount: Money
    item_count: int
    created_at: str


class SalesStatusCounts(ReportModel):
    draft: int
    confirmed: int
    shipped: int
    delivered: int
    cancelled: int


class SalesSummary(ReportModel):
    total_orders: int
    total_revenue: Money
    by_status: SalesStatusCounts
    average_order_value: Money


class SalesSummaryResponse(ReportModel):
    data: List[SalesSummaryItem]
    summary: SalesSummary


# Stock movements
class StockMovementItem(ReportModel):
    id: str
    type: str
    product_name: str
    product_sku: str
    from_location: Optional[str]
    to_location: Optional[str]
    quantity: int
    reference: Optional[str]
    notes: Optional[str]
    created_at: str


class StockMovementSummary(ReportModel):
    inbound: int
    outbound: int
    transfer: int
    total_movements: int
    total_quantity_moved: int


class StockMovementResponse(ReportModel):
    data: List[StockMovementItem]
    summary: StockMovementSummary


# Supplier performance
class SupplierPerformanceItem(ReportModel):
    supplier_id: str
    supplier_name: str
    email: Optional[str]
    phone: str
    total_orders: int
    received_orders: int
    total_spent: Money
    average_order_value: Money
    products_supplied: int
    average_lead_time_days: int
    on_time_delivery_rate: int


class SupplierPerformanceSummary(ReportModel):
    total_suppliers: int
    active_suppliers: int
    total_spent: Money
    average_lead_time: int


class SupplierPerformanceResponse(ReportModel):
    data: List[SupplierPerformanceItem]
    summary: SupplierPerformanceSummary


# Stock levels
class StockLevelItem(ReportModel):
    sku: str
    name: str
    category: str
    current_stock: int
    reorder_point: int
    max_stock: int
    status: str
    needs_reorder: bool
    excess_stock: int


class StockLevelsSummary(ReportModel):
    total_products: int
    in_stock: int
    low_stock: int
    out_of_stock: int
    overstocked: int


class StockLevelsResponse(ReportModel):
    data: List[StockLevelItem]
    summary: StockLevelsSummary


# Sales and purchase order reports
class TopParty(ReportModel):
    code: str
    name: str
    total: Money
    orders: int


class SalesReportItem(ReportModel):
    order_number: str
    customer_name: str
    customer_code: str
    order_date: str
    status: str
    item_count: int
    subtotal: Money
    tax: Money
    total: Money
    shipping_address: Optional[str]


class SalesReportSummary(ReportModel):
    total_orders: int
    total_revenue: Money
    completed_orders: int
    completed_revenue: Money
    pending_orders: int
    pending_value: Money
    average_order_value: Money
    cancelled_orders: int


class SalesReportResponse(ReportModel):
    data: List[SalesReportItem]
    summary: SalesReportSummary
    top_customers: List[TopParty]


class PurchaseReportItem(ReportModel):
    order_number: str
    supplier_name: str
    supplier_code: str
    order_date: str
    expected_date: Optional[str]
    status: str
    item_count: int
    subtotal: Money
    tax: Money
    total: Money


class PurchaseReportSummary(ReportModel):
    total_orders: int
    total_spend: Money
    received_orders: int
    received_value: Money
    pending_orders: int
    pending_value: Money
    average_order_value: Money
    cancelled_orders: int


class PurchaseReportResponse(ReportModel):
    data: List[PurchaseReportItem]
    summary: PurchaseReportSummary
    top_suppliers: List[TopParty]
