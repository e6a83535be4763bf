"""
Reports Module - ERP Analytics

Read-only report aggregation over the ERP tables: sales, purchasing,
inventory and financial reports, each available as JSON or as a CSV
download.

This module does NOT create tables. Every report runs the same pipeline
over the models of the other modules:

- Query: fetch entities with eager associations through a ReportFilter
- Aggregate: one derived row per customer, product, order, invoice or batch
- Summarize: totals, counts by bucket and rates folded over the rows
- Project: a camelCase JSON envelope or a CSV document

Architecture Pattern: Service Layer
- routers/ -> FastAPI endpoints, format switch and error boundary
- services/ -> Query, aggregation and summary logic
- schemas/ -> Pydantic filter and response models
- utils/ -> CSV export tables and numeric/date helpers
"""

from .routers import (
    sales_router,
    purchases_router,
    inventory_router,
    financial_router
)

__all__ = [
    "sales_router",
    "purchases_router",
    "inventory_router",
    "financial_router"
]
