"""
Utilities for Reports module

Provides CSV export functionality and the per-report export tables
(column headers, download filename, content type, error message).

CSV cells are joined with commas. Free-text cells are wrapped in double
quotes; embedded quotes are NOT escaped (no RFC 4180 quoting).
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List

from fastapi import Response

from .calculations import quantize, safe_divide, to_decimal


TURKISH = {
    "content_type": "text/csv; charset=utf-8",
    "error_message": "Rapor oluşturulamadı",
}

ENGLISH = {
    "content_type": "text/csv",
    "error_message": "Failed to generate report",
}

# Download filename and locale per report
REPORT_EXPORTS = {
    "customer_analysis": {"filename": "customer-analysis.csv", **TURKISH},
    "expiring_batches": {"filename": "expiring-batches.csv", **TURKISH},
    "inventory_valuation": {"filename": "inventory-valuation.csv", **ENGLISH},
    "invoice_aging": {"filename": "invoice-aging.csv", **ENGLISH},
    "low_stock": {"filename": "low-stock-alert.csv", **ENGLISH},
    "purchase_summary": {"filename": "purchase-summary.csv", **TURKISH},
    "revenue": {"filename": "revenue-report.csv", **TURKISH},
    "sales_summary": {"filename": "sales-summary.csv", **TURKISH},
    "stock_movement": {"filename": "stock-movements.csv", **ENGLISH},
    "supplier_performance": {"filename": "supplier-performance.csv", **TURKISH},
    "stock_levels": {"filename": "stock-levels.csv", **TURKISH},
    "sales": {"filename": "sales-report.csv", **ENGLISH},
    "purchase": {"filename": "purchase-report.csv", **ENGLISH},
}


def render_csv(rows: List[Dict[str, str]], headers: Dict[str, str]) -> str:
    """
    Render pre-formatted rows as a CSV document.

    Args:
        rows: Dictionaries of already formatted cell strings
        headers: Ordered mapping of field names to CSV header labels

    Returns:
        Header line plus one line per row, joined with newlines
    """
    fieldnames = list(headers.keys())
    lines = [",".join(headers.values())]
    for row in rows:
        lines.append(",".join(row.get(field, "") for field in fieldnames))
    return "\n".join(lines)


def create_csv_response(rows: List[Dict[str, str]], report_key: str) -> Response:
    """
    Create a CSV attachment response for a report.

    Args:
        rows: Output of the report's prepare_*_csv function
        report_key: Key into REPORT_EXPORTS and CSV_HEADERS

    Returns:
        FastAPI Response with CSV content
    """
    export = REPORT_EXPORTS[report_key]
    csv_content = render_csv(rows, CSV_HEADERS[report_key])

    # Explicit Content-Type keeps Starlette from appending a charset
    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={export['filename']}",
            "Content-Type": export["content_type"]
        }
    )


def format_csv_value(value: Any) -> str:
    """
    Format a value for CSV export.

    None renders as an empty cell, enums as their value, dates as ISO strings.
    """
    if value is None:
        return ""
    elif isinstance(value, Enum):
        return str(value.value)
    elif isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def format_money(value: Any) -> str:
    """Exactly two fraction digits."""
    return str(quantize(value, 2))


def format_percent(part: Any, whole: Any) -> str:
    """part/whole as a percentage with one decimal, "0" on an empty whole."""
    if to_decimal(whole) <= 0:
        return "0"
    return str(quantize(safe_divide(part, whole) * 100, 1))


def quote(value: Any) -> str:
    return f'"{format_csv_value(value)}"'


def prepare_customer_analysis_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare customer analysis data for CSV export"""
    csv_data = []
    for customer in report_data["data"]:
        csv_data.append({
            "customer_id": format_csv_value(customer["customer_id"]),
            "customer_name": quote(customer["customer_name"]),
            "email": format_csv_value(customer["email"]),
            "phone": format_csv_value(customer["phone"]),
            "total_orders": format_csv_value(customer["total_orders"]),
            "completed_orders": format_csv_value(customer["completed_orders"]),
            "total_revenue": format_money(customer["total_revenue"]),
            "average_order_value": format_money(customer["average_order_value"]),
            "last_order_date": format_csv_value(customer["last_order_date"])
        })
    return csv_data


def prepare_expiring_batches_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare expiring batches data for CSV export"""
    csv_data = []
    for batch in report_data["data"]:
        csv_data.append({
            "batch_number": format_csv_value(batch["batch_number"]),
            "product_sku": format_csv_value(batch["product_sku"]),
            "product_name": quote(batch["product_name"]),
            "quantity": format_csv_value(batch["quantity"]),
            "expiry_date": format_csv_value(batch["expiry_date"]),
            "days_until_expiry": format_csv_value(batch["days_until_expiry"]),
            "urgency": batch["urgency"],
            "cost_value": format_money(batch["cost_value"])
        })
    return csv_data


def prepare_inventory_valuation_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare inventory valuation data for CSV export"""
    csv_data = []
    for product in report_data["data"]:
        csv_data.append({
            "sku": format_csv_value(product["sku"]),
            "name": quote(product["name"]),
            "category": format_csv_value(product["category"]),
            "current_stock": format_csv_value(product["current_stock"]),
            "cost": format_money(product["cost"]),
            "price": format_money(product["price"]),
            "cost_value": format_money(product["cost_value"]),
            "retail_value": format_money(product["retail_value"]),
            "potential_profit": format_money(product["potential_profit"])
        })
    return csv_data


def prepare_invoice_aging_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare invoice aging data for CSV export"""
    csv_data = []
    for invoice in report_data["data"]:
        csv_data.append({
            "invoice_number": format_csv_value(invoice["invoice_number"]),
            "type": format_csv_value(invoice["type"]),
            "party": quote(invoice["party"]),
            "party_code": format_csv_value(invoice["party_code"]),
            "invoice_date": format_csv_value(invoice["invoice_date"]),
            "due_date": format_csv_value(invoice["due_date"]),
            "total": format_money(invoice["total"]),
            "amount_paid": format_money(invoice["amount_paid"]),
            "amount_due": format_money(invoice["amount_due"]),
            "days_overdue": format_csv_value(invoice["days_overdue"]),
            "aging_bucket": invoice["aging_bucket"]
        })
    return csv_data


def prepare_low_stock_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare low stock alert data for CSV export"""
    csv_data = []
    for product in report_data["data"]:
        csv_data.append({
            "sku": format_csv_value(product["sku"]),
            "name": quote(product["name"]),
            "category": format_csv_value(product["category"]),
            "current_stock": format_csv_value(product["current_stock"]),
            "reorder_point": format_csv_value(product["reorder_point"]),
            "deficit": format_csv_value(product["deficit"]),
            "status": product["status"],
            "estimated_reorder_cost": format_money(product["estimated_reorder_cost"])
        })
    return csv_data


def prepare_purchase_summary_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare purchase summary data for CSV export"""
    csv_data = []
    for order in report_data["data"]:
        csv_data.append({
            "order_number": format_csv_value(order["order_number"]),
            "supplier_name": quote(order["supplier_name"]),
            "status": format_csv_value(order["status"]),
            "total_amount": format_money(order["total_amount"]),
            "item_count": format_csv_value(order["item_count"]),
            "created_at": format_csv_value(order["created_at"]),
            "expected_date": format_csv_value(order["expected_date"])
        })
    return csv_data


def prepare_revenue_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare revenue by product data for CSV export"""
    csv_data = []
    for product in report_data["data"]:
        csv_data.append({
            "product_id": format_csv_value(product["product_id"]),
            "product_name": quote(product["product_name"]),
            "sku": format_csv_value(product["sku"]),
            "category": format_csv_value(product["category"]),
            "units_sold": format_csv_value(product["units_sold"]),
            "revenue": format_money(product["revenue"]),
            "cost": format_money(product["cost"]),
            "profit": format_money(product["profit"]),
            "profit_margin": format_percent(product["profit"], product["revenue"])
        })
    return csv_data


def prepare_sales_summary_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare sales summary data for CSV export"""
    csv_data = []
    for order in report_data["data"]:
        csv_data.append({
            "order_number": format_csv_value(order["order_number"]),
            "customer_name": quote(order["customer_name"]),
            "status": format_csv_value(order["status"]),
            "total_amount": format_money(order["total_amount"]),
            "item_count": format_csv_value(order["item_count"]),
            "created_at": format_csv_value(order["created_at"])
        })
    return csv_data


def prepare_stock_movement_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare stock movement data for CSV export"""
    csv_data = []
    for movement in report_data["data"]:
        csv_data.append({
            "created_at": format_csv_value(movement["created_at"]),
            "type": format_csv_value(movement["type"]),
            "product_name": quote(movement["product_name"]),
            "product_sku": format_csv_value(movement["product_sku"]),
            "from_location": format_csv_value(movement["from_location"]),
            "to_location": format_csv_value(movement["to_location"]),
            "quantity": format_csv_value(movement["quantity"]),
            "reference": format_csv_value(movement["reference"]),
            "notes": quote(movement["notes"])
        })
    return csv_data


def prepare_supplier_performance_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare supplier performance data for CSV export"""
    csv_data = []
    for supplier in report_data["data"]:
        csv_data.append({
            "supplier_id": format_csv_value(supplier["supplier_id"]),
            "supplier_name": quote(supplier["supplier_name"]),
            "email": format_csv_value(supplier["email"]),
            "phone": format_csv_value(supplier["phone"]),
            "total_orders": format_csv_value(supplier["total_orders"]),
            "received_orders": format_csv_value(supplier["received_orders"]),
            "total_spent": format_money(supplier["total_spent"]),
            "average_order_value": format_money(supplier["average_order_value"]),
            "products_supplied": format_csv_value(supplier["products_supplied"]),
            "average_lead_time_days": format_csv_value(supplier["average_lead_time_days"]),
            "on_time_delivery_rate": format_csv_value(supplier["on_time_delivery_rate"])
        })
    return csv_data


def prepare_stock_levels_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare stock levels data for CSV export"""
    csv_data = []
    for product in report_data["data"]:
        csv_data.append({
            "sku": format_csv_value(product["sku"]),
            "name": quote(product["name"]),
            "category": format_csv_value(product["category"]),
            "current_stock": format_csv_value(product["current_stock"]),
            "reorder_point": format_csv_value(product["reorder_point"]),
            "max_stock": format_csv_value(product["max_stock"]),
            "status": product["status"],
            "needs_reorder": "Evet" if product["needs_reorder"] else "Hayır",
            "excess_stock": format_csv_value(product["excess_stock"])
        })
    return csv_data


def prepare_sales_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare sales order data for CSV export"""
    csv_data = []
    for order in report_data["data"]:
        csv_data.append({
            "order_number": format_csv_value(order["order_number"]),
            "customer_name": quote(order["customer_name"]),
            "customer_code": format_csv_value(order["customer_code"]),
            "order_date": format_csv_value(order["order_date"]),
            "status": format_csv_value(order["status"]),
            "item_count": format_csv_value(order["item_count"]),
            "subtotal": format_money(order["subtotal"]),
            "tax": format_money(order["tax"]),
            "total": format_money(order["total"])
        })
    return csv_data


def prepare_purchase_csv(report_data: Dict[str, Any]) -> List[Dict[str, str]]:
    """Prepare purchase order data for CSV export"""
    csv_data = []
    for order in report_data["data"]:
        csv_data.append({
            "order_number": format_csv_value(order["order_number"]),
            "supplier_name": quote(order["supplier_name"]),
            "supplier_code": format_csv_value(order["supplier_code"]),
            "order_date": format_csv_value(order["order_date"]),
            "expected_date": format_csv_value(order["expected_date"]),
            "status": format_csv_value(order["status"]),
            "item_count": format_csv_value(order["item_count"]),
            "subtotal": format_money(order["subtotal"]),
            "tax": format_money(order["tax"]),
            "total": format_money(order["total"])
        })
    return csv_data


# CSV header labels per report. Turkish and English reports are kept as-is;
# consumers match on these exact strings.
CSV_HEADERS = {
    "customer_analysis": {
        "customer_id": "Müşteri ID",
        "customer_name": "Müşteri Adı",
        "email": "E-posta",
        "phone": "Telefon",
        "total_orders": "Toplam Sipariş",
        "completed_orders": "Tamamlanan Sipariş",
        "total_revenue": "Toplam Gelir",
        "average_order_value": "Ortalama Sipariş Değeri",
        "last_order_date": "Son Sipariş Tarihi"
    },
    "expiring_batches": {
        "batch_number": "Parti No",
        "product_sku": "Ürün SKU",
        "product_name": "Ürün Adı",
        "quantity": "Miktar",
        "expiry_date": "Son Kullanma Tarihi",
        "days_until_expiry": "Kalan Gün",
        "urgency": "Aciliyet",
        "cost_value": "Maliyet Değeri"
    },
    "inventory_valuation": {
        "sku": "SKU",
        "name": "Name",
        "category": "Category",
        "current_stock": "Stock",
        "cost": "Unit Cost",
        "price": "Unit Price",
        "cost_value": "Cost Value",
        "retail_value": "Retail Value",
        "potential_profit": "Potential Profit"
    },
    "invoice_aging": {
        "invoice_number": "Invoice #",
        "type": "Type",
        "party": "Customer/Supplier",
        "party_code": "Code",
        "invoice_date": "Invoice Date",
        "due_date": "Due Date",
        "total": "Total",
        "amount_paid": "Paid",
        "amount_due": "Due",
        "days_overdue": "Days Overdue",
        "aging_bucket": "Aging Bucket"
    },
    "low_stock": {
        "sku": "SKU",
        "name": "Name",
        "category": "Category",
        "current_stock": "Current Stock",
        "reorder_point": "Reorder Point",
        "deficit": "Deficit",
        "status": "Status",
        "estimated_reorder_cost": "Est. Reorder Cost"
    },
    "purchase_summary": {
        "order_number": "Sipariş No",
        "supplier_name": "Tedarikçi",
        "status": "Durum",
        "total_amount": "Toplam Tutar",
        "item_count": "Kalem Sayısı",
        "created_at": "Tarih",
        "expected_date": "Beklenen Tarih"
    },
    "revenue": {
        "product_id": "Ürün ID",
        "product_name": "Ürün Adı",
        "sku": "SKU",
        "category": "Kategori",
        "units_sold": "Satılan Adet",
        "revenue": "Gelir",
        "cost": "Maliyet",
        "profit": "Kâr",
        "profit_margin": "Kâr Marjı (%)"
    },
    "sales_summary": {
        "order_number": "Sipariş No",
        "customer_name": "Müşteri",
        "status": "Durum",
        "total_amount": "Toplam Tutar",
        "item_count": "Kalem Sayısı",
        "created_at": "Tarih"
    },
    "stock_movement": {
        "created_at": "Date",
        "type": "Type",
        "product_name": "Product",
        "product_sku": "SKU",
        "from_location": "From Location",
        "to_location": "To Location",
        "quantity": "Quantity",
        "reference": "Reference",
        "notes": "Notes"
    },
    "supplier_performance": {
        "supplier_id": "Tedarikçi ID",
        "supplier_name": "Tedarikçi Adı",
        "email": "E-posta",
        "phone": "Telefon",
        "total_orders": "Toplam Sipariş",
        "received_orders": "Teslim Alınan",
        "total_spent": "Toplam Harcama",
        "average_order_value": "Ortalama Sipariş Değeri",
        "products_supplied": "Ürün Sayısı",
        "average_lead_time_days": "Ort. Teslimat Süresi (Gün)",
        "on_time_delivery_rate": "Zamanında Teslimat (%)"
    },
    "stock_levels": {
        "sku": "SKU",
        "name": "Ürün Adı",
        "category": "Kategori",
        "current_stock": "Mevcut Stok",
        "reorder_point": "Yeniden Sipariş Noktası",
        "max_stock": "Maksimum Stok",
        "status": "Durum",
        "needs_reorder": "Sipariş Gerekli",
        "excess_stock": "Fazla Stok"
    },
    "sales": {
        "order_number": "Order #",
        "customer_name": "Customer",
        "customer_code": "Customer Code",
        "order_date": "Order Date",
        "status": "Status",
        "item_count": "Items",
        "subtotal": "Subtotal",
        "tax": "Tax",
        "total": "Total"
    },
    "purchase": {
        "order_number": "Order #",
        "supplier_name": "Supplier",
        "supplier_code": "Supplier Code",
        "order_date": "Order Date",
        "expected_date": "Expected Date",
        "status": "Status",
        "item_count": "Items",
        "subtotal": "Subtotal",
        "tax": "Tax",
        "total": "Total"
    }
}
