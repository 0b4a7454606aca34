"""Write path for sales, purchases, customer payments and account movements.

Amounts are passed in positive. The stored sign follows the ledger
convention: sales positive, payments and discounts negative on the
customer's ledger; withdrawals, outgoing transfers and expenses negative on
an account. Customer and account balances are kept in step on every write.
"""
from __future__ import annotations

import logging
from datetime import date as date_type
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from sqlalchemy.orm import Session

from ledgerbook.app.models.account import Account, AccountTransaction, AccountTransactionType
from ledgerbook.app.models.customer import Customer, CustomerTransaction, TransactionType
from ledgerbook.app.models.inventory import Product, Purchase, Sale
from ledgerbook.app.schemas.ledger import LedgerAmount

logger = logging.getLogger(__name__)

Q = Decimal("0.0001")
ZERO = Decimal("0")


# ── Helpers ──────────────────────────────────────────────────────────────────


def _amount(value: Decimal | int | str, label: str = "Amount") -> Decimal:
    amt = Decimal(str(value)).quantize(Q, rounding=ROUND_HALF_UP)
    if amt <= ZERO:
        raise ValueError(f"{label} must be greater than 0")
    return amt


def _bag_count(qty: Decimal) -> int:
    if qty != qty.to_integral_value():
        raise ValueError("Quantity must be a whole number of bags")
    return int(qty)


def _get_customer(db: Session, customer_id: UUID) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise ValueError("Customer not found")
    return customer


def _get_account(db: Session, account_id: UUID, label: str = "Account") -> Account:
    account = db.query(Account).filter(Account.id == account_id).first()
    if not account:
        raise ValueError(f"{label} not found")
    return account


def _customer_txn_out(txn: CustomerTransaction, customer: Customer) -> dict:
    return {
        "id": str(txn.id),
        "customer_id": str(customer.id),
        "type": txn.type.value,
        "amount": str(txn.amount),
        "notes": txn.notes,
        "date": txn.date.isoformat(),
        "customer_balance": str(customer.balance),
    }


def _account_txn_out(txn: AccountTransaction, account: Account) -> dict:
    return {
        "id": str(txn.id),
        "account_id": str(account.id),
        "type": txn.type.value,
        "amount": str(txn.amount),
        "description": txn.description,
        "date": txn.date.isoformat(),
        "account_balance": str(account.balance),
    }


def _sale_out(sale: Sale, txn: CustomerTransaction | None) -> dict:
    return {
        "id": str(sale.id),
        "customer_id": str(sale.customer_id),
        "transaction_id": str(txn.id) if txn is not None else None,
        "quantity": str(sale.quantity),
        "price_per_unit": str(sale.price_per_unit),
        "total_amount": str(sale.total_amount),
        "date": sale.date.isoformat(),
    }


def _purchase_out(purchase: Purchase) -> dict:
    return {
        "id": str(purchase.id),
        "quantity": str(purchase.quantity),
        "price_per_unit": str(purchase.price_per_unit),
        "original_price": (
            str(purchase.original_price) if purchase.original_price is not None else None
        ),
        "total_amount": str(purchase.total_amount),
        "date": purchase.date.isoformat(),
    }


def _post_account(
    db: Session,
    account: Account,
    txn_type: AccountTransactionType,
    signed_amount: Decimal,
    description: str,
    *,
    notes: str | None = None,
    related_account_id: UUID | None = None,
    on_date: date_type | None = None,
) -> AccountTransaction:
    txn = AccountTransaction(
        account_id=account.id,
        type=txn_type,
        amount=signed_amount,
        description=description,
        notes=notes,
        related_account_id=related_account_id,
        date=on_date or date_type.today(),
    )
    db.add(txn)
    account.balance = account.balance + signed_amount
    return txn


# ── Sales & purchases ────────────────────────────────────────────────────────


def record_sale(
    db: Session,
    *,
    customer_id: UUID,
    quantity: Decimal,
    price_per_unit: Decimal,
    product_id: UUID | None = None,
    unit: str = "BAG",
    sub_category: str | None = None,
    location: str | None = None,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    """Record a sale and its matching debit on the customer's ledger.

    The ledger line carries the sold quantity as its bag count and points
    back at the sale row.
    """
    qty = _amount(quantity, "Quantity")
    bags = _bag_count(qty)
    price = _amount(price_per_unit, "Price per unit")
    customer = _get_customer(db, customer_id)

    if product_id is not None:
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ValueError("Product not found")
        if sub_category is None:
            sub_category = product.name

    total = (qty * price).quantize(Q, rounding=ROUND_HALF_UP)
    sale_date = on_date or date_type.today()

    sale = Sale(
        customer_id=customer.id,
        product_id=product_id,
        quantity=qty,
        unit=unit,
        price_per_unit=price,
        total_amount=total,
        sub_category=sub_category,
        location=location,
        notes=notes,
        date=sale_date,
    )
    db.add(sale)
    db.flush()

    entry = LedgerAmount.debit_of(total)
    txn = CustomerTransaction(
        customer_id=customer.id,
        type=TransactionType.SALE,
        amount=entry.signed,
        bags=bags,
        location=location,
        sub_category=sub_category,
        notes=notes,
        related_sale_id=sale.id,
        date=sale_date,
    )
    db.add(txn)
    customer.balance = customer.balance + entry.signed

    db.commit()
    db.refresh(sale)
    db.refresh(txn)
    logger.info("Recorded sale %s for customer %s: %s", sale.id, customer.id, total)
    return _sale_out(sale, txn)


def record_purchase(
    db: Session,
    *,
    quantity: Decimal,
    price_per_unit: Decimal,
    product_id: UUID | None = None,
    unit: str = "BAG",
    original_price: Decimal | None = None,
    category: str | None = None,
    account_id: UUID | None = None,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    qty = _amount(quantity, "Quantity")
    price = _amount(price_per_unit, "Price per unit")
    if original_price is not None:
        original_price = _amount(original_price, "Original price")
    if account_id is not None:
        _get_account(db, account_id)

    purchase = Purchase(
        product_id=product_id,
        quantity=qty,
        unit=unit,
        price_per_unit=price,
        original_price=original_price,
        total_amount=(qty * price).quantize(Q, rounding=ROUND_HALF_UP),
        category=category,
        account_id=account_id,
        notes=notes,
        date=on_date or date_type.today(),
    )
    db.add(purchase)
    db.commit()
    db.refresh(purchase)
    logger.info("Recorded purchase %s: %s", purchase.id, purchase.total_amount)
    return _purchase_out(purchase)


def _get_sale(db: Session, sale_id: UUID) -> Sale:
    sale = db.query(Sale).filter(Sale.id == sale_id).first()
    if not sale:
        raise ValueError("Sale not found")
    return sale


def _sale_ledger_lines(db: Session, sale: Sale) -> list[CustomerTransaction]:
    return (
        db.query(CustomerTransaction)
        .filter(CustomerTransaction.related_sale_id == sale.id)
        .all()
    )


def update_sale(
    db: Session,
    sale_id: UUID,
    *,
    quantity: Decimal | None = None,
    price_per_unit: Decimal | None = None,
    sub_category: str | None = None,
    location: str | None = None,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    """Edit a sale; its ledger line and the customer balance follow the new total."""
    sale = _get_sale(db, sale_id)
    customer = _get_customer(db, sale.customer_id)

    qty = _amount(quantity, "Quantity") if quantity is not None else sale.quantity
    bags = _bag_count(qty)
    price = (
        _amount(price_per_unit, "Price per unit")
        if price_per_unit is not None
        else sale.price_per_unit
    )

    sale.quantity = qty
    sale.price_per_unit = price
    if sub_category is not None:
        sale.sub_category = sub_category
    if location is not None:
        sale.location = location
    if notes is not None:
        sale.notes = notes
    if on_date is not None:
        sale.date = on_date

    old_total = sale.total_amount
    sale.total_amount = (sale.quantity * sale.price_per_unit).quantize(Q, rounding=ROUND_HALF_UP)

    lines = _sale_ledger_lines(db, sale)
    for txn in lines:
        txn.amount = LedgerAmount.debit_of(sale.total_amount).signed
        txn.bags = bags
        txn.sub_category = sale.sub_category
        txn.location = sale.location
        txn.notes = sale.notes
        txn.date = sale.date
    if lines:
        customer.balance = customer.balance + (sale.total_amount - old_total)

    db.commit()
    db.refresh(sale)
    logger.info("Updated sale %s: %s -> %s", sale.id, old_total, sale.total_amount)
    return _sale_out(sale, lines[0] if lines else None)


def delete_sale(db: Session, sale_id: UUID) -> None:
    """Delete a sale with its ledger line, reversing it on the customer balance."""
    sale = _get_sale(db, sale_id)
    customer = _get_customer(db, sale.customer_id)

    for txn in _sale_ledger_lines(db, sale):
        customer.balance = customer.balance - txn.amount
        db.delete(txn)
    db.delete(sale)
    db.commit()
    logger.info("Deleted sale %s for customer %s", sale_id, customer.id)


def _get_purchase(db: Session, purchase_id: UUID) -> Purchase:
    purchase = db.query(Purchase).filter(Purchase.id == purchase_id).first()
    if not purchase:
        raise ValueError("Purchase not found")
    return purchase


def update_purchase(
    db: Session,
    purchase_id: UUID,
    *,
    quantity: Decimal | None = None,
    price_per_unit: Decimal | None = None,
    original_price: Decimal | None = None,
    category: str | None = None,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    purchase = _get_purchase(db, purchase_id)
    qty = _amount(quantity, "Quantity") if quantity is not None else purchase.quantity
    price = (
        _amount(price_per_unit, "Price per unit")
        if price_per_unit is not None
        else purchase.price_per_unit
    )
    if original_price is not None:
        original_price = _amount(original_price, "Original price")

    purchase.quantity = qty
    purchase.price_per_unit = price
    if original_price is not None:
        purchase.original_price = original_price
    if category is not None:
        purchase.category = category
    if notes is not None:
        purchase.notes = notes
    if on_date is not None:
        purchase.date = on_date
    purchase.total_amount = (
        purchase.quantity * purchase.price_per_unit
    ).quantize(Q, rounding=ROUND_HALF_UP)

    db.commit()
    db.refresh(purchase)
    logger.info("Updated purchase %s: %s", purchase.id, purchase.total_amount)
    return _purchase_out(purchase)


def delete_purchase(db: Session, purchase_id: UUID) -> None:
    purchase = _get_purchase(db, purchase_id)
    db.delete(purchase)
    db.commit()
    logger.info("Deleted purchase %s", purchase_id)


# ── Customer payments & discounts ────────────────────────────────────────────


def record_customer_payment(
    db: Session,
    *,
    customer_id: UUID,
    amount: Decimal,
    account_id: UUID,
    method: str = "Cash",
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    """Credit the customer's ledger and deposit the money into an account.

    CUSTOMER  payment  -amount  (balance owed goes down)
    ACCOUNT   payment  +amount  (cash/bank goes up)
    """
    amt = _amount(amount)
    customer = _get_customer(db, customer_id)
    account = _get_account(db, account_id)
    payment_date = on_date or date_type.today()
    note = notes or f"Payment received - {method}"

    entry = LedgerAmount.credit_of(amt)
    txn = CustomerTransaction(
        customer_id=customer.id,
        type=TransactionType.PAYMENT,
        amount=entry.signed,
        notes=note,
        account_id=account.id,
        date=payment_date,
    )
    db.add(txn)
    customer.balance = customer.balance + entry.signed

    _post_account(
        db,
        account,
        AccountTransactionType.PAYMENT,
        amt,
        f"Payment from {customer.name}",
        notes=note,
        on_date=payment_date,
    )

    db.commit()
    db.refresh(txn)
    db.refresh(customer)
    logger.info(
        "Recorded payment of %s from customer %s into account %s",
        amt, customer.id, account.id,
    )
    return _customer_txn_out(txn, customer)


def record_discount(
    db: Session,
    *,
    customer_id: UUID,
    amount: Decimal,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    amt = _amount(amount)
    customer = _get_customer(db, customer_id)

    entry = LedgerAmount.credit_of(amt)
    txn = CustomerTransaction(
        customer_id=customer.id,
        type=TransactionType.DISCOUNT,
        amount=entry.signed,
        notes=notes or "Discount",
        date=on_date or date_type.today(),
    )
    db.add(txn)
    customer.balance = customer.balance + entry.signed

    db.commit()
    db.refresh(txn)
    db.refresh(customer)
    logger.info("Recorded discount of %s for customer %s", amt, customer.id)
    return _customer_txn_out(txn, customer)


# ── Accounts ─────────────────────────────────────────────────────────────────


def list_accounts(db: Session) -> list[dict]:
    return [
        {"id": str(a.id), "name": a.name, "balance": str(a.balance)}
        for a in db.query(Account).order_by(Account.name).all()
    ]


def create_account(
    db: Session, *, name: str, opening_balance: Decimal = ZERO,
) -> dict:
    existing = db.query(Account).filter(Account.name == name).first()
    if existing:
        raise ValueError(f"Account '{name}' already exists")

    account = Account(name=name, balance=ZERO)
    db.add(account)
    db.flush()
    if opening_balance:
        _post_account(
            db,
            account,
            AccountTransactionType.ADD_FUNDS,
            _amount(opening_balance),
            "Opening balance",
        )

    db.commit()
    db.refresh(account)
    logger.info("Created account %s (%s)", account.name, account.id)
    return {"id": str(account.id), "name": account.name, "balance": str(account.balance)}


def add_funds(
    db: Session,
    *,
    account_id: UUID,
    amount: Decimal,
    description: str | None = None,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    amt = _amount(amount)
    account = _get_account(db, account_id)
    txn = _post_account(
        db,
        account,
        AccountTransactionType.ADD_FUNDS,
        amt,
        description or "Funds added",
        notes=notes,
        on_date=on_date,
    )
    db.commit()
    db.refresh(txn)
    db.refresh(account)
    logger.info("Added %s to account %s", amt, account.id)
    return _account_txn_out(txn, account)


def remove_funds(
    db: Session,
    *,
    account_id: UUID,
    amount: Decimal,
    description: str | None = None,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    amt = _amount(amount)
    account = _get_account(db, account_id)
    txn = _post_account(
        db,
        account,
        AccountTransactionType.REMOVE_FUNDS,
        -amt,
        description or "Funds removed",
        notes=notes,
        on_date=on_date,
    )
    db.commit()
    db.refresh(txn)
    db.refresh(account)
    logger.info("Removed %s from account %s", amt, account.id)
    return _account_txn_out(txn, account)


def add_expense(
    db: Session,
    *,
    account_id: UUID,
    amount: Decimal,
    description: str,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    if not description or not description.strip():
        raise ValueError("Description must not be empty")
    amt = _amount(amount)
    account = _get_account(db, account_id)
    txn = _post_account(
        db,
        account,
        AccountTransactionType.EXPENSE,
        -amt,
        description,
        notes=notes,
        on_date=on_date,
    )
    db.commit()
    db.refresh(txn)
    db.refresh(account)
    logger.info("Recorded expense of %s on account %s", amt, account.id)
    return _account_txn_out(txn, account)


def update_expense(
    db: Session,
    transaction_id: UUID,
    *,
    amount: Decimal | None = None,
    description: str | None = None,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    """Edit a recorded expense; the account balance absorbs any amount change."""
    txn = db.query(AccountTransaction).filter(AccountTransaction.id == transaction_id).first()
    if not txn or txn.type is not AccountTransactionType.EXPENSE:
        raise ValueError("Expense not found")
    account = _get_account(db, txn.account_id)

    if description is not None and not description.strip():
        raise ValueError("Description must not be empty")

    if amount is not None:
        new_amount = -_amount(amount)
        account.balance = account.balance + (new_amount - txn.amount)
        txn.amount = new_amount
    if description is not None:
        txn.description = description
    if notes is not None:
        txn.notes = notes
    if on_date is not None:
        txn.date = on_date

    db.commit()
    db.refresh(txn)
    db.refresh(account)
    logger.info("Updated expense %s on account %s", txn.id, account.id)
    return _account_txn_out(txn, account)


def transfer_funds(
    db: Session,
    *,
    from_account_id: UUID,
    to_account_id: UUID,
    amount: Decimal,
    notes: str | None = None,
    on_date: date_type | None = None,
) -> dict:
    """Move money between two accounts as a matched pair of rows.

    SOURCE       transfer-out  -amount
    DESTINATION  transfer-in   +amount
    """
    amt = _amount(amount)
    if from_account_id == to_account_id:
        raise ValueError("Source and destination accounts must differ")
    source = _get_account(db, from_account_id, "Source account")
    destination = _get_account(db, to_account_id, "Destination account")
    transfer_date = on_date or date_type.today()

    out_txn = _post_account(
        db,
        source,
        AccountTransactionType.TRANSFER_OUT,
        -amt,
        f"Transfer to {destination.name}",
        notes=notes,
        related_account_id=destination.id,
        on_date=transfer_date,
    )
    in_txn = _post_account(
        db,
        destination,
        AccountTransactionType.TRANSFER_IN,
        amt,
        f"Transfer from {source.name}",
        notes=notes,
        related_account_id=source.id,
        on_date=transfer_date,
    )

    db.commit()
    for obj in (out_txn, in_txn, source, destination):
        db.refresh(obj)
    logger.info("Transferred %s from account %s to %s", amt, source.id, destination.id)
    return {
        "transfer_out": _account_txn_out(out_txn, source),
        "transfer_in": _account_txn_out(in_txn, destination),
    }
