"""Customer statement records. Built fresh on every call, never stored."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ledgerbook.app.schemas.ledger import DateRange

ZERO = Decimal("0")


class StatementRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_id: str
    date: date
    details: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal
    balance_sign: str


class MonthGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    month_key: str  # YYYY-MM
    label: str
    rows: tuple[StatementRow, ...]
    debit_total: Decimal
    credit_total: Decimal
    closing_balance: Decimal


class Statement(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_name: str
    phone: str
    date_range: DateRange | None
    opening_balance: Decimal = ZERO
    groups: tuple[MonthGroup, ...]
    total_debit: Decimal
    total_credit: Decimal
    net_balance: Decimal
    net_balance_sign: str

    @property
    def rows(self) -> list[StatementRow]:
        """All transaction rows in statement order."""
        return [row for group in self.groups for row in group.rows]


LineKind = Literal["opening", "month_header", "transaction", "month_total"]


class StatementLine(BaseModel):
    """One printable table line: Date | Details | Debit(-) | Credit(+) | Balance."""

    model_config = ConfigDict(frozen=True)

    kind: LineKind
    date: str = ""
    details: str = ""
    debit: str = ""
    credit: str = ""
    balance: str = ""
    balance_sign: str | None = None
    shaded: bool = False
