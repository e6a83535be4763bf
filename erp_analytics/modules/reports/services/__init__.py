"""
Services package for Reports module

Exports all report service classes for easy importing.
"""

from .sales import SalesReportService
from .purchases import PurchaseReportService
from .inventory import InventoryReportService
from .financial import FinancialReportService

__all__ = [
    "SalesReportService",
    "PurchaseReportService",
    "InventoryReportService",
    "FinancialReportService"
]
