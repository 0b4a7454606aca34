from __future__ import annotations

import datetime as dt
import enum
import uuid
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerbook.app.core.database import Base


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class AccountTransactionType(str, enum.Enum):
    ADD_FUNDS = "add-funds"
    REMOVE_FUNDS = "remove-funds"
    TRANSFER_IN = "transfer-in"
    TRANSFER_OUT = "transfer-out"
    EXPENSE = "expense"
    PAYMENT = "payment"


class Account(Base):
    """A cash or bank account that money is received into and paid out of."""

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=4), nullable=False, default=Decimal("0")
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    transactions: Mapped[list[AccountTransaction]] = relationship(
        back_populates="account",
        foreign_keys="AccountTransaction.account_id",
        cascade="all, delete-orphan",
    )


class AccountTransaction(Base):
    """A movement of funds on an account.

    Transfers are written as two rows, ``transfer-out`` (negative) on the
    source and ``transfer-in`` (positive) on the destination, each pointing
    at the other account through ``related_account_id``.
    """

    __tablename__ = "account_transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[AccountTransactionType] = mapped_column(
        Enum(
            AccountTransactionType,
            name="accounttransactiontype",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    related_account_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, default=dt.date.today)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    account: Mapped[Account] = relationship(
        back_populates="transactions", foreign_keys=[account_id]
    )

    __table_args__ = (
        Index("ix_account_transactions_account", "account_id"),
        Index("ix_account_transactions_date", "date"),
    )
