"""Read ORM rows into the snapshot records the statement and reports consume."""
from __future__ import annotations

import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy.orm import Session

from ledgerbook.app.models.account import Account, AccountTransaction
from ledgerbook.app.models.customer import Customer, CustomerTransaction, TransactionType
from ledgerbook.app.models.inventory import Purchase, Sale
from ledgerbook.app.schemas.ledger import (
    AccountLedger,
    AccountTransactionRecord,
    CustomerLedger,
    LedgerTransaction,
    PurchaseRecord,
    SaleRecord,
)

logger = logging.getLogger(__name__)


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


def _describe(t: CustomerTransaction) -> str:
    """Fallback Details text for a ledger line recorded without notes."""
    if t.type is TransactionType.SALE:
        parts = ["Sale"]
        if t.bags:
            parts.append(f"{t.bags} bags")
        if t.sub_category:
            parts.append(t.sub_category)
        return " - ".join(parts)
    return t.type.value.capitalize()


def _ledger_transaction(t: CustomerTransaction) -> LedgerTransaction:
    return LedgerTransaction(
        id=str(t.id),
        type=t.type,
        date=t.date,
        amount=t.amount,
        bags=t.bags,
        location=t.location,
        sub_category=t.sub_category,
        notes=t.notes,
        description=_describe(t),
        account_id=_str_or_none(t.account_id),
    )


def _customer_ledger(
    c: Customer, transactions: list[CustomerTransaction],
) -> CustomerLedger:
    return CustomerLedger(
        id=str(c.id),
        name=c.name,
        phone=c.phone,
        category=c.category,
        balance=c.balance,
        transactions=[_ledger_transaction(t) for t in transactions],
    )


def _ordered_transactions(db: Session, customer_id: UUID | None = None):
    # Same-day entries resolve by insertion time
    query = db.query(CustomerTransaction)
    if customer_id is not None:
        query = query.filter(CustomerTransaction.customer_id == customer_id)
    return query.order_by(
        CustomerTransaction.date,
        CustomerTransaction.created_at,
        CustomerTransaction.id,
    ).all()


# ── Customers ────────────────────────────────────────────────────────────────


def load_customer_ledgers(db: Session) -> list[CustomerLedger]:
    """Every customer with their transactions, customers ordered by name."""
    by_customer: dict[UUID, list[CustomerTransaction]] = defaultdict(list)
    for t in _ordered_transactions(db):
        by_customer[t.customer_id].append(t)

    customers = db.query(Customer).order_by(Customer.name).all()
    ledgers = [_customer_ledger(c, by_customer.get(c.id, [])) for c in customers]
    logger.debug(
        "Loaded %d customers with %d transactions",
        len(ledgers), sum(len(v) for v in by_customer.values()),
    )
    return ledgers


def load_customer_ledger(db: Session, customer_id: UUID) -> CustomerLedger:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        logger.warning("Customer %s not found", customer_id)
        raise ValueError("Customer not found")
    return _customer_ledger(customer, _ordered_transactions(db, customer.id))


# ── Accounts ─────────────────────────────────────────────────────────────────


def load_account_ledgers(db: Session) -> list[AccountLedger]:
    by_account: dict[UUID, list[AccountTransactionRecord]] = defaultdict(list)
    rows = (
        db.query(AccountTransaction)
        .order_by(AccountTransaction.date, AccountTransaction.created_at, AccountTransaction.id)
        .all()
    )
    for t in rows:
        by_account[t.account_id].append(AccountTransactionRecord(
            id=str(t.id),
            account_id=str(t.account_id),
            type=t.type,
            amount=t.amount,
            description=t.description,
            notes=t.notes,
            related_account_id=_str_or_none(t.related_account_id),
            date=t.date,
        ))

    accounts = db.query(Account).order_by(Account.name).all()
    logger.debug("Loaded %d accounts with %d transactions", len(accounts), len(rows))
    return [
        AccountLedger(
            id=str(a.id),
            name=a.name,
            balance=a.balance,
            transactions=by_account.get(a.id, []),
        )
        for a in accounts
    ]


# ── Sales & purchases ────────────────────────────────────────────────────────


def load_sales(db: Session) -> list[SaleRecord]:
    sales = db.query(Sale).order_by(Sale.date, Sale.created_at).all()
    logger.debug("Loaded %d sales", len(sales))
    return [
        SaleRecord(
            id=str(s.id),
            customer_id=str(s.customer_id),
            quantity=s.quantity,
            unit=s.unit,
            price_per_unit=s.price_per_unit,
            total_amount=s.total_amount,
            sub_category=s.sub_category,
            date=s.date,
        )
        for s in sales
    ]


def load_purchases(db: Session) -> list[PurchaseRecord]:
    purchases = db.query(Purchase).order_by(Purchase.date, Purchase.created_at).all()
    logger.debug("Loaded %d purchases", len(purchases))
    return [
        PurchaseRecord(
            id=str(p.id),
            quantity=p.quantity,
            unit=p.unit,
            price_per_unit=p.price_per_unit,
            original_price=p.original_price,
            total_amount=p.total_amount,
            date=p.date,
        )
        for p in purchases
    ]
