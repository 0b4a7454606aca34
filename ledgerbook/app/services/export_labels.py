"""Labels and table layouts shared by the PDF and Excel exports."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, NamedTuple

from pydantic import BaseModel

from ledgerbook.app.schemas.reports import ProfitLossSummary
from ledgerbook.app.services.formatting import (
    format_date,
    format_inr,
    format_number,
    format_quantity,
)

LABELS: dict[str, str] = {
    # Common
    "period": "Period",
    "date": "Date",
    "details": "Details",
    "debit": "Debit(-)",
    "credit": "Credit(+)",
    "balance": "Balance",
    "total": "Total",
    "phone": "Phone",
    "generated_by": "Report generated by",

    # Statement
    "statement": "Account Statement",
    "opening_balance": "Opening Balance",
    "total_debit": "Total Debit(-)",
    "total_credit": "Total Credit(+)",
    "net_balance": "Net Balance",

    # Item reports
    "item_by_party": "Item Report by Party",
    "item_sale_summary": "Item Sale Summary",
    "party": "Party",
    "product": "Product",
    "quantity": "Quantity",
    "unit": "Unit",
    "amount": "Amount",

    # Monthly business summary
    "monthly_business_summary": "Monthly Business Summary",
    "month": "Month",
    "sales": "Sales",
    "collections": "Collections",

    # Customer-wise summary
    "customer_wise_summary": "Customer-wise Summary",
    "name": "Name",
    "category": "Category",
    "total_sales": "Total Sales",
    "total_payments": "Total Payments",

    # Account balance summary
    "account_balance_summary": "Account Balance Summary",
    "account": "Account",

    # Transaction report
    "transactions": "Transaction Report",
    "notes": "Notes",
    "type": "Type",
    "bags": "Bags",
    "sub_category": "Item",
    "location": "Location",

    # Customer activity
    "customer_activity": "Customer Activity",
    "last_transaction": "Last Transaction",
    "days_since": "Days Since",
    "status": "Status",
    "recent_transactions": "Recent",
    "total_transactions": "Total Txns",
    "active": "Active",
    "inactive": "Inactive",

    # Profit & loss
    "profit_loss": "Profit & Loss",
    "metric": "Metric",
    "value": "Value",
    "total_sales_bags": "Total Sales Bags",
    "total_sales_revenue": "Total Sales Revenue",
    "avg_selling_price": "Avg Selling Price / Bag",
    "total_purchase_bags": "Total Purchase Bags",
    "total_purchase_cost": "Total Purchase Cost",
    "avg_cost_price": "Avg Cost Price / Bag",
    "profit_per_bag": "Profit / Bag",
    "profit_margin_percent": "Profit Margin %",
    "total_profit": "Total Profit",
}


def t(key: str) -> str:
    """Display label for ``key``; unknown keys are returned as-is."""
    return LABELS.get(key, key)


# ── Report layouts ───────────────────────────────────────────────────────────


class Column(NamedTuple):
    label: str  # key into LABELS
    field: str
    kind: str = "text"  # text | money | number | date | status | metric
    width: int = 30  # PDF width in mm


class ReportLayout(NamedTuple):
    title: str  # key into LABELS
    columns: tuple[Column, ...]


REPORTS: dict[str, ReportLayout] = {
    "item-by-party": ReportLayout("item_by_party", (
        Column("party", "party", width=60),
        Column("product", "product", width=50),
        Column("quantity", "quantity", "number", 25),
        Column("unit", "unit", width=20),
        Column("amount", "amount", "money", 35),
    )),
    "item-sale-summary": ReportLayout("item_sale_summary", (
        Column("product", "product", width=90),
        Column("quantity", "quantity", "number", 50),
        Column("unit", "unit", width=50),
    )),
    "monthly-business-summary": ReportLayout("monthly_business_summary", (
        Column("month", "month", width=70),
        Column("sales", "sales", "money", 60),
        Column("collections", "collections", "money", 60),
    )),
    "customer-wise-summary": ReportLayout("customer_wise_summary", (
        Column("name", "name", width=50),
        Column("phone", "phone", width=30),
        Column("category", "category", width=25),
        Column("total_sales", "total_sales", "money", 28),
        Column("total_payments", "total_payments", "money", 28),
        Column("balance", "balance", "money", 29),
    )),
    "account-balance-summary": ReportLayout("account_balance_summary", (
        Column("account", "account", width=110),
        Column("collections", "balance", "money", 80),
    )),
    "transactions": ReportLayout("transactions", (
        Column("date", "date", "date", 24),
        Column("name", "name", width=38),
        Column("type", "type", width=18),
        Column("sub_category", "sub_category", width=28),
        Column("bags", "bags", "number", 14),
        Column("location", "location", width=24),
        Column("notes", "notes", width=22),
        Column("amount", "amount", "money", 22),
    )),
    "customer-activity": ReportLayout("customer_activity", (
        Column("name", "name", width=38),
        Column("phone", "phone", width=24),
        Column("category", "category", width=20),
        Column("balance", "balance", "money", 22),
        Column("last_transaction", "last_transaction_date", "date", 24),
        Column("days_since", "days_since_last_transaction", "number", 16),
        Column("status", "is_active", "status", 16),
        Column("recent_transactions", "recent_transactions", "number", 14),
        Column("total_transactions", "total_transactions", "number", 16),
    )),
    "profit-loss": ReportLayout("profit_loss", (
        Column("metric", "metric", width=110),
        Column("value", "value", "metric", 80),
    )),
}


def get_layout(report: str) -> ReportLayout:
    layout = REPORTS.get(report)
    if layout is None:
        raise ValueError(f"Unknown report '{report}'")
    return layout


def raw_value(row: BaseModel | dict[str, Any], column: Column) -> Any:
    """Cell value for a spreadsheet: numbers stay numeric, dates stay dates."""
    value = row[column.field] if isinstance(row, dict) else getattr(row, column.field)
    if value is None:
        return None
    if column.kind == "status":
        return t("active") if value else t("inactive")
    if column.kind in ("money", "metric"):
        return float(value)
    if column.kind == "number" and isinstance(value, Decimal):
        return float(value)
    return value


def display_value(row: BaseModel | dict[str, Any], column: Column) -> str:
    """Cell text for a PDF table."""
    value = raw_value(row, column)
    if value is None:
        return ""
    if column.kind == "money":
        return format_inr(Decimal(str(value)))
    if column.kind == "metric" and isinstance(row, dict):
        return _format_metric(row["value"], row["kind"])
    if column.kind == "date" and isinstance(value, date):
        return format_date(value)
    return str(value)


PROFIT_LOSS_METRICS = (
    ("total_sales_bags", "bags"),
    ("total_sales_revenue", "money"),
    ("avg_selling_price", "price"),
    ("total_purchase_bags", "bags"),
    ("total_purchase_cost", "money"),
    ("avg_cost_price", "price"),
    ("profit_per_bag", "price"),
    ("profit_margin_percent", "percent"),
    ("total_profit", "money"),
)


def _format_metric(value: Decimal, kind: str) -> str:
    if kind == "bags":
        return format_quantity(value)
    if kind == "price":
        return format_number(value, 2)
    if kind == "percent":
        return f"{format_number(value, 2)}%"
    return format_inr(value)


def profit_loss_rows(summary: ProfitLossSummary) -> list[dict[str, Any]]:
    """Flatten the profit/loss summary into metric/value table rows."""
    return [
        {"metric": t(key), "value": getattr(summary, key), "kind": kind}
        for key, kind in PROFIT_LOSS_METRICS
    ]
