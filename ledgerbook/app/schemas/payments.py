"""Request and response bodies for the write path: sales, payments, accounts."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_validator


def _positive(v: Decimal) -> Decimal:
    if v <= 0:
        raise ValueError("Amount must be greater than 0")
    return v


# ─── Sales & purchases ────────────────────────────────────────────────────────


class SaleCreate(BaseModel):
    customer_id: UUID
    product_id: UUID | None = None
    quantity: Decimal
    unit: str = "BAG"
    price_per_unit: Decimal
    sub_category: str | None = None
    location: str | None = None
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("quantity", "price_per_unit")
    @classmethod
    def must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class SaleOut(BaseModel):
    id: str
    customer_id: str
    transaction_id: str | None
    quantity: str
    price_per_unit: str
    total_amount: str
    date: str


class SaleUpdate(BaseModel):
    quantity: Decimal | None = None
    price_per_unit: Decimal | None = None
    sub_category: str | None = None
    location: str | None = None
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("quantity", "price_per_unit")
    @classmethod
    def must_be_positive(cls, v: Decimal | None) -> Decimal | None:
        return _positive(v) if v is not None else v


class PurchaseCreate(BaseModel):
    product_id: UUID | None = None
    quantity: Decimal
    unit: str = "BAG"
    price_per_unit: Decimal
    original_price: Decimal | None = None
    category: str | None = None
    account_id: UUID | None = None
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("quantity", "price_per_unit")
    @classmethod
    def must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class PurchaseOut(BaseModel):
    id: str
    quantity: str
    price_per_unit: str
    original_price: str | None
    total_amount: str
    date: str


class PurchaseUpdate(BaseModel):
    quantity: Decimal | None = None
    price_per_unit: Decimal | None = None
    original_price: Decimal | None = None
    category: str | None = None
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("quantity", "price_per_unit", "original_price")
    @classmethod
    def must_be_positive(cls, v: Decimal | None) -> Decimal | None:
        return _positive(v) if v is not None else v


# ─── Customer payments & discounts ────────────────────────────────────────────


class CustomerPaymentCreate(BaseModel):
    customer_id: UUID
    account_id: UUID
    amount: Decimal
    method: str = "Cash"
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class DiscountCreate(BaseModel):
    customer_id: UUID
    amount: Decimal
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class CustomerTransactionOut(BaseModel):
    id: str
    customer_id: str
    type: str
    amount: str
    notes: str | None
    date: str
    customer_balance: str


# ─── Accounts ─────────────────────────────────────────────────────────────────


class AccountCreate(BaseModel):
    name: str
    opening_balance: Decimal = Decimal("0")

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()


class AccountOut(BaseModel):
    id: str
    name: str
    balance: str


class FundsChange(BaseModel):
    amount: Decimal
    description: str | None = None
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class ExpenseUpdate(BaseModel):
    amount: Decimal | None = None
    description: str | None = None
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Decimal | None) -> Decimal | None:
        return _positive(v) if v is not None else v


class TransferCreate(BaseModel):
    from_account_id: UUID
    to_account_id: UUID
    amount: Decimal
    notes: str | None = None
    date: dt.date | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class AccountTransactionOut(BaseModel):
    id: str
    account_id: str
    type: str
    amount: str
    description: str
    date: str
    account_balance: str


class TransferOut(BaseModel):
    transfer_out: AccountTransactionOut
    transfer_in: AccountTransactionOut
