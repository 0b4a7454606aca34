"""Pydantic response schemas for the business reports."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from ledgerbook.app.schemas.ledger import PurchaseRecord, SaleRecord


# ── Item reports ─────────────────────────────────────────────────────────────

class PartyItemRow(BaseModel):
    party: str
    product: str
    quantity: int
    amount: Decimal
    unit: str


class ItemSaleRow(BaseModel):
    product: str
    quantity: int
    unit: str


# ── Monthly business summary ─────────────────────────────────────────────────

class MonthlySummaryRow(BaseModel):
    month_key: str
    month: str
    sales: Decimal
    collections: Decimal


# ── Customer-wise summary ────────────────────────────────────────────────────

class CustomerSummaryRow(BaseModel):
    name: str
    phone: str
    category: str
    total_sales: Decimal
    total_payments: Decimal
    balance: Decimal


# ── Account balance summary ──────────────────────────────────────────────────

class AccountBalanceRow(BaseModel):
    account: str
    balance: Decimal


# ── Transaction report ───────────────────────────────────────────────────────

class TransactionReportRow(BaseModel):
    id: str
    date: date
    name: str
    notes: str
    type: str
    amount: Decimal
    bags: int | None
    sub_category: str | None
    location: str | None


# ── Customer activity ────────────────────────────────────────────────────────

class CustomerActivityRow(BaseModel):
    name: str
    phone: str
    category: str
    balance: Decimal
    last_transaction_date: date | None
    days_since_last_transaction: int | None
    is_active: bool
    recent_transactions: int
    total_transactions: int


# ── Profit & loss ────────────────────────────────────────────────────────────

class ProfitLossSummary(BaseModel):
    total_sales_bags: Decimal
    total_sales_revenue: Decimal
    avg_selling_price: Decimal
    total_purchase_bags: Decimal
    total_purchase_cost: Decimal
    avg_cost_price: Decimal
    profit_per_bag: Decimal
    profit_margin_percent: Decimal
    total_profit: Decimal
    filtered_sales: list[SaleRecord]
    filtered_purchases: list[PurchaseRecord]
