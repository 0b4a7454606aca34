"""In-memory snapshot records handed to the statement builder and reports.

These are validated at ingestion: a record that reaches the report code
always has a real calendar date and numeric amounts.
"""
from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ledgerbook.app.models.account import AccountTransactionType
from ledgerbook.app.models.customer import TransactionType

ZERO = Decimal("0")


def _to_calendar_date(value: Any) -> Any:
    """Accept ISO timestamps as well as ISO dates; keep only the date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


def _zero_if_missing(value: Any) -> Any:
    return ZERO if value is None else value


# ── Tagged amount ───────────────────────────────────────────────────────────


class EntryKind(str, enum.Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class LedgerAmount(BaseModel):
    """An amount that knows which side of the ledger it sits on."""

    model_config = ConfigDict(frozen=True)

    kind: EntryKind
    magnitude: Decimal = Field(ge=0)

    @classmethod
    def debit_of(cls, amount: Decimal) -> LedgerAmount:
        return cls(kind=EntryKind.DEBIT, magnitude=amount)

    @classmethod
    def credit_of(cls, amount: Decimal) -> LedgerAmount:
        return cls(kind=EntryKind.CREDIT, magnitude=abs(amount))

    @property
    def debit(self) -> Decimal:
        return self.magnitude if self.kind is EntryKind.DEBIT else ZERO

    @property
    def credit(self) -> Decimal:
        return self.magnitude if self.kind is EntryKind.CREDIT else ZERO

    @property
    def signed(self) -> Decimal:
        """Amount as stored: debits positive, credits negative."""
        return self.magnitude if self.kind is EntryKind.DEBIT else -self.magnitude


def entry_for(txn_type: TransactionType, amount: Decimal) -> LedgerAmount:
    """Sales are debits; payments and discounts are credits."""
    if txn_type is TransactionType.SALE:
        return LedgerAmount.debit_of(amount)
    return LedgerAmount.credit_of(amount)


# ── Date range ──────────────────────────────────────────────────────────────


class DateRange(BaseModel):
    """Inclusive range of calendar days."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def start_not_after_end(self) -> DateRange:
        if self.start > self.end:
            raise ValueError("from_date must not be after to_date")
        return self

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


# ── Customer ledger ─────────────────────────────────────────────────────────


class LedgerTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: TransactionType
    date: date
    amount: Decimal = ZERO
    bags: int | None = None
    location: str | None = None
    sub_category: str | None = None
    notes: str | None = None
    description: str = ""
    account_id: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def date_to_calendar_day(cls, v: Any) -> Any:
        return _to_calendar_date(v)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_defaults_to_zero(cls, v: Any) -> Any:
        return _zero_if_missing(v)

    @model_validator(mode="after")
    def sale_amount_not_negative(self) -> LedgerTransaction:
        if self.type is TransactionType.SALE and self.amount < ZERO:
            raise ValueError("sale amount must not be negative")
        return self

    @property
    def entry(self) -> LedgerAmount:
        return entry_for(self.type, self.amount)

    @property
    def details(self) -> str:
        return self.notes or self.description


class CustomerLedger(BaseModel):
    id: str
    name: str
    phone: str | None = None
    category: str | None = None
    balance: Decimal = ZERO
    transactions: list[LedgerTransaction] = Field(default_factory=list)

    @field_validator("balance", mode="before")
    @classmethod
    def balance_defaults_to_zero(cls, v: Any) -> Any:
        return _zero_if_missing(v)


# ── Sales & purchases ──────────────────────────────────────────────────────


class SaleRecord(BaseModel):
    id: str
    customer_id: str | None = None
    quantity: Decimal = ZERO
    unit: str = "BAG"
    price_per_unit: Decimal = ZERO
    total_amount: Decimal = ZERO
    sub_category: str | None = None
    date: date

    @field_validator("date", mode="before")
    @classmethod
    def date_to_calendar_day(cls, v: Any) -> Any:
        return _to_calendar_date(v)

    @field_validator("quantity", "price_per_unit", "total_amount", mode="before")
    @classmethod
    def numbers_default_to_zero(cls, v: Any) -> Any:
        return _zero_if_missing(v)


class PurchaseRecord(BaseModel):
    id: str
    quantity: Decimal = ZERO
    unit: str = "BAG"
    price_per_unit: Decimal = ZERO
    original_price: Decimal | None = None
    total_amount: Decimal = ZERO
    date: date

    @field_validator("date", mode="before")
    @classmethod
    def date_to_calendar_day(cls, v: Any) -> Any:
        return _to_calendar_date(v)

    @field_validator("quantity", "price_per_unit", "total_amount", mode="before")
    @classmethod
    def numbers_default_to_zero(cls, v: Any) -> Any:
        return _zero_if_missing(v)

    @property
    def cost_basis(self) -> Decimal:
        """Per-unit cost: the original price when recorded, else the invoiced price."""
        return self.original_price or self.price_per_unit


# ── Accounts ────────────────────────────────────────────────────────────────


class AccountTransactionRecord(BaseModel):
    id: str
    account_id: str
    type: AccountTransactionType
    amount: Decimal = ZERO
    description: str = ""
    notes: str | None = None
    related_account_id: str | None = None
    date: date

    @field_validator("date", mode="before")
    @classmethod
    def date_to_calendar_day(cls, v: Any) -> Any:
        return _to_calendar_date(v)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_defaults_to_zero(cls, v: Any) -> Any:
        return _zero_if_missing(v)


class AccountLedger(BaseModel):
    id: str
    name: str
    balance: Decimal = ZERO
    transactions: list[AccountTransactionRecord] = Field(default_factory=list)
