"""Import every model module so ``Base.metadata`` knows all tables."""

from ledgerbook.app.core.database import Base
from ledgerbook.app.models.account import Account, AccountTransaction, AccountTransactionType
from ledgerbook.app.models.customer import Customer, CustomerTransaction, TransactionType
from ledgerbook.app.models.inventory import (
    Product,
    Purchase,
    Sale,
    Stock,
    StockEvent,
    StockEventType,
)

metadata = Base.metadata

__all__ = [
    "Account",
    "AccountTransaction",
    "AccountTransactionType",
    "Customer",
    "CustomerTransaction",
    "Product",
    "Purchase",
    "Sale",
    "Stock",
    "StockEvent",
    "StockEventType",
    "TransactionType",
    "metadata",
]
