"""Customer account statement: running balance grouped by calendar month.

The statement always opens at zero. It is computed over the transactions in
the requested window only, so its net balance may legitimately differ from
the balance stored on the customer.
"""
from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ledgerbook.app.schemas.ledger import CustomerLedger, DateRange, LedgerTransaction
from ledgerbook.app.schemas.statement import (
    MonthGroup,
    Statement,
    StatementLine,
    StatementRow,
)
from ledgerbook.app.services.formatting import (
    balance_sign,
    format_balance,
    format_date,
    format_inr,
    month_key,
    month_label,
)

ZERO = Decimal("0")
OPENING_BALANCE = ZERO


def _close_month(
    key: str, rows: list[StatementRow], debit: Decimal, credit: Decimal,
) -> MonthGroup:
    return MonthGroup(
        month_key=key,
        label=month_label(key),
        rows=tuple(rows),
        debit_total=debit,
        credit_total=credit,
        closing_balance=rows[-1].running_balance,
    )


def build_statement(
    transactions: Iterable[LedgerTransaction],
    date_range: DateRange | None = None,
    *,
    customer_name: str = "",
    phone: str = "",
) -> Statement:
    """Fold transactions into month groups carrying a running balance.

    Transactions are ordered by date; transactions on the same date keep the
    order they were passed in.
    """
    selected = [
        t for t in transactions if date_range is None or date_range.contains(t.date)
    ]
    ordered = sorted(selected, key=lambda t: t.date)

    running = OPENING_BALANCE
    total_debit = ZERO
    total_credit = ZERO
    groups: list[MonthGroup] = []

    current_key: str | None = None
    month_rows: list[StatementRow] = []
    month_debit = ZERO
    month_credit = ZERO

    for txn in ordered:
        key = month_key(txn.date)
        if key != current_key:
            if current_key is not None:
                groups.append(_close_month(current_key, month_rows, month_debit, month_credit))
            current_key = key
            month_rows = []
            month_debit = ZERO
            month_credit = ZERO

        entry = txn.entry
        running += entry.debit
        running -= entry.credit
        month_debit += entry.debit
        month_credit += entry.credit
        total_debit += entry.debit
        total_credit += entry.credit

        month_rows.append(StatementRow(
            transaction_id=txn.id,
            date=txn.date,
            details=txn.details,
            debit=entry.debit,
            credit=entry.credit,
            running_balance=running,
            balance_sign=balance_sign(running),
        ))

    if current_key is not None:
        groups.append(_close_month(current_key, month_rows, month_debit, month_credit))

    net_balance = OPENING_BALANCE + total_debit - total_credit

    return Statement(
        customer_name=customer_name,
        phone=phone,
        date_range=date_range,
        opening_balance=OPENING_BALANCE,
        groups=tuple(groups),
        total_debit=total_debit,
        total_credit=total_credit,
        net_balance=net_balance,
        net_balance_sign=balance_sign(net_balance),
    )


def build_customer_statement(
    customer: CustomerLedger, date_range: DateRange | None = None,
) -> Statement:
    return build_statement(
        customer.transactions,
        date_range,
        customer_name=customer.name,
        phone=customer.phone or "",
    )


def statement_lines(statement: Statement) -> list[StatementLine]:
    """Lay the statement out as table lines for the PDF and Excel exports.

    Opening row first, then for each month a header, its transactions with
    alternating shading, and a month-total row.
    """
    opening = statement.opening_balance
    lines = [
        StatementLine(
            kind="opening",
            details="Opening Balance",
            balance=format_balance(opening, blank_zero=True),
            balance_sign=balance_sign(opening) if opening != ZERO else None,
            shaded=True,
        )
    ]

    for group in statement.groups:
        lines.append(StatementLine(kind="month_header", details=group.label))
        for idx, row in enumerate(group.rows):
            lines.append(StatementLine(
                kind="transaction",
                date=format_date(row.date),
                details=row.details,
                debit=format_inr(row.debit) if row.debit else "",
                credit=format_inr(row.credit) if row.credit else "",
                balance=format_balance(row.running_balance),
                balance_sign=row.balance_sign,
                shaded=idx % 2 == 0,
            ))
        lines.append(StatementLine(
            kind="month_total",
            details=f"{group.label} Total",
            debit=format_inr(group.debit_total),
            credit=format_inr(group.credit_total),
        ))

    return lines
