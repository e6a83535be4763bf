"""
Invoices module - ERP Analytics

Read models for sales and purchase invoices. The reports use them for
receivables/payables aging and for revenue by product.

Tables:
- invoices: Sales, purchase, credit and debit notes
- invoice_items: Invoice lines, optionally tied to a product
"""

from .models import Invoice, InvoiceItem, InvoiceStatus, InvoiceType

__all__ = ["Invoice", "InvoiceItem", "InvoiceStatus", "InvoiceType"]
