"""Business reports folded from the in-memory ledger snapshot.

Every function here is pure: it takes already-fetched records, filters them
by an inclusive date range and returns fresh summary rows. Divisions by zero
resolve to zero.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP

from ledgerbook.app.core.config import settings
from ledgerbook.app.models.account import AccountTransactionType
from ledgerbook.app.models.customer import TransactionType
from ledgerbook.app.schemas.ledger import (
    AccountLedger,
    CustomerLedger,
    DateRange,
    LedgerTransaction,
    PurchaseRecord,
    SaleRecord,
)
from ledgerbook.app.schemas.reports import (
    AccountBalanceRow,
    CustomerActivityRow,
    CustomerSummaryRow,
    ItemSaleRow,
    MonthlySummaryRow,
    PartyItemRow,
    ProfitLossSummary,
    TransactionReportRow,
)
from ledgerbook.app.services.formatting import month_key, short_month_label

ZERO = Decimal("0")
HUNDRED = Decimal("100")
Q = Decimal("0.0001")

UNKNOWN_PARTY = "Unknown Party"
UNKNOWN_PRODUCT = "Unknown Product"
DEFAULT_UNIT = "BAG"
DEFAULT_CATEGORY = "Individual"
ALL_CATEGORIES = "all"


# ── Helpers ──────────────────────────────────────────────────────────────────


def _bag_count(txn: LedgerTransaction) -> int:
    """Bags on a sale line; a line without bags counts as one."""
    return max(1, txn.bags or 1)


def _sales_in_range(
    customer: CustomerLedger, date_range: DateRange,
) -> list[LedgerTransaction]:
    return [
        t for t in customer.transactions
        if t.type is TransactionType.SALE and date_range.contains(t.date)
    ]


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(Q, rounding=ROUND_HALF_UP)


# ── Item reports ─────────────────────────────────────────────────────────────


def item_report_by_party(
    customers: Iterable[CustomerLedger], date_range: DateRange,
) -> list[PartyItemRow]:
    """Bags and amount sold per (customer, product), sorted by customer."""
    grouped: dict[tuple[str, str], dict[str, object]] = {}
    for customer in customers:
        party = customer.name or UNKNOWN_PARTY
        for txn in _sales_in_range(customer, date_range):
            product = txn.sub_category or UNKNOWN_PRODUCT
            item = grouped.setdefault(
                (party, product),
                {"party": party, "product": product, "quantity": 0, "amount": ZERO},
            )
            item["quantity"] += _bag_count(txn)  # type: ignore[operator]
            item["amount"] += txn.amount  # type: ignore[operator]

    rows = [PartyItemRow(unit=DEFAULT_UNIT, **item) for item in grouped.values()]
    return sorted(rows, key=lambda r: r.party.casefold())


def item_sale_summary(
    customers: Iterable[CustomerLedger], date_range: DateRange,
) -> list[ItemSaleRow]:
    """Total bags sold per product, sorted by product name."""
    quantities: dict[str, int] = {}
    for customer in customers:
        for txn in _sales_in_range(customer, date_range):
            product = txn.sub_category or UNKNOWN_PRODUCT
            quantities[product] = quantities.get(product, 0) + _bag_count(txn)

    rows = [
        ItemSaleRow(product=product, quantity=qty, unit=DEFAULT_UNIT)
        for product, qty in quantities.items()
    ]
    return sorted(rows, key=lambda r: r.product.casefold())


# ── Monthly business summary ─────────────────────────────────────────────────


def monthly_business_summary(
    customers: Iterable[CustomerLedger], date_range: DateRange,
) -> list[MonthlySummaryRow]:
    """Sales and collections per calendar month, oldest month first."""
    sales: dict[str, Decimal] = {}
    collections: dict[str, Decimal] = {}
    for customer in customers:
        for txn in customer.transactions:
            if not date_range.contains(txn.date):
                continue
            key = month_key(txn.date)
            sales.setdefault(key, ZERO)
            collections.setdefault(key, ZERO)
            if txn.type is TransactionType.SALE:
                sales[key] += txn.amount
            elif txn.type is TransactionType.PAYMENT:
                collections[key] += abs(txn.amount)

    return [
        MonthlySummaryRow(
            month_key=key,
            month=short_month_label(key),
            sales=sales[key],
            collections=collections[key],
        )
        for key in sorted(sales)
    ]


# ── Customer-wise summary ────────────────────────────────────────────────────


def customer_wise_summary(
    customers: Iterable[CustomerLedger], date_range: DateRange,
) -> list[CustomerSummaryRow]:
    """Per-customer sales vs payments; customers with no activity are dropped."""
    rows: list[CustomerSummaryRow] = []
    for customer in customers:
        in_range = [t for t in customer.transactions if date_range.contains(t.date)]
        total_sales = sum(
            (t.amount for t in in_range if t.type is TransactionType.SALE), ZERO,
        )
        total_payments = sum(
            (abs(t.amount) for t in in_range if t.type is TransactionType.PAYMENT), ZERO,
        )
        if total_sales == ZERO and total_payments == ZERO:
            continue
        rows.append(CustomerSummaryRow(
            name=customer.name,
            phone=customer.phone or "",
            category=customer.category or DEFAULT_CATEGORY,
            total_sales=total_sales,
            total_payments=total_payments,
            balance=total_sales - total_payments,
        ))

    return sorted(rows, key=lambda r: r.total_sales, reverse=True)


# ── Account balance summary ──────────────────────────────────────────────────


def account_balance_summary(
    accounts: Iterable[AccountLedger], date_range: DateRange,
) -> list[AccountBalanceRow]:
    """Customer payments received per account, largest first."""
    rows: list[AccountBalanceRow] = []
    for account in accounts:
        received = sum(
            (
                abs(t.amount) for t in account.transactions
                if t.type is AccountTransactionType.PAYMENT and date_range.contains(t.date)
            ),
            ZERO,
        )
        if received > ZERO:
            rows.append(AccountBalanceRow(account=account.name, balance=received))

    return sorted(rows, key=lambda r: r.balance, reverse=True)


# ── Transaction report ───────────────────────────────────────────────────────


def transaction_report(
    customers: Iterable[CustomerLedger], date_range: DateRange,
) -> list[TransactionReportRow]:
    """Every customer transaction in range with the customer name, newest first."""
    rows = [
        TransactionReportRow(
            id=t.id,
            date=t.date,
            name=customer.name,
            notes=t.notes or "",
            type=t.type.value,
            amount=t.amount,
            bags=t.bags,
            sub_category=t.sub_category,
            location=t.location,
        )
        for customer in customers
        for t in customer.transactions
        if date_range.contains(t.date)
    ]
    return sorted(rows, key=lambda r: r.date, reverse=True)


# ── Customer activity ────────────────────────────────────────────────────────


def customer_activity(
    customers: Iterable[CustomerLedger],
    category: str | None = None,
    today: date | None = None,
    window_days: int | None = None,
) -> list[CustomerActivityRow]:
    """How recently each customer transacted.

    Active customers come first, then customers ordered by days since their
    last transaction; customers that never transacted come last.
    """
    today = today or date.today()
    window = settings.ACTIVITY_WINDOW_DAYS if window_days is None else window_days
    window_start = today - timedelta(days=window)

    if category is None or category == ALL_CATEGORIES:
        selected: Sequence[CustomerLedger] = list(customers)
    else:
        selected = [c for c in customers if c.category == category]

    rows: list[CustomerActivityRow] = []
    for customer in selected:
        dates = [t.date for t in customer.transactions]
        last = max(dates, default=None)
        rows.append(CustomerActivityRow(
            name=customer.name,
            phone=customer.phone or "",
            category=customer.category or DEFAULT_CATEGORY,
            balance=customer.balance,
            last_transaction_date=last,
            days_since_last_transaction=(today - last).days if last else None,
            is_active=last is not None and last >= window_start,
            recent_transactions=sum(1 for d in dates if window_start <= d <= today),
            total_transactions=len(dates),
        ))

    return sorted(
        rows,
        key=lambda r: (
            not r.is_active,
            r.days_since_last_transaction is None,
            r.days_since_last_transaction or 0,
        ),
    )


# ── Profit & loss ────────────────────────────────────────────────────────────


def profit_loss(
    sales: Iterable[SaleRecord],
    purchases: Iterable[PurchaseRecord],
    date_range: DateRange,
) -> ProfitLossSummary:
    """Average selling price vs average cost price per bag.

    Profit per bag, the margin and total profit are computed from the exact
    averages; only the returned figures are rounded to 4 places.
    """
    sales_in = [s for s in sales if date_range.contains(s.date)]
    purchases_in = [p for p in purchases if date_range.contains(p.date)]

    total_sales_bags = sum((s.quantity for s in sales_in), ZERO)
    total_sales_revenue = sum((s.total_amount for s in sales_in), ZERO)
    avg_selling_price = (
        total_sales_revenue / total_sales_bags if total_sales_bags > ZERO else ZERO
    )

    total_purchase_bags = sum((p.quantity for p in purchases_in), ZERO)
    total_purchase_cost = sum((p.quantity * p.cost_basis for p in purchases_in), ZERO)
    avg_cost_price = (
        total_purchase_cost / total_purchase_bags if total_purchase_bags > ZERO else ZERO
    )

    profit_per_bag = avg_selling_price - avg_cost_price
    profit_margin_percent = (
        profit_per_bag / avg_cost_price * HUNDRED if avg_cost_price > ZERO else ZERO
    )

    return ProfitLossSummary(
        total_sales_bags=total_sales_bags,
        total_sales_revenue=total_sales_revenue,
        avg_selling_price=_quantize(avg_selling_price),
        total_purchase_bags=total_purchase_bags,
        total_purchase_cost=total_purchase_cost,
        avg_cost_price=_quantize(avg_cost_price),
        profit_per_bag=_quantize(profit_per_bag),
        profit_margin_percent=_quantize(profit_margin_percent),
        total_profit=_quantize(total_sales_bags * profit_per_bag),
        filtered_sales=sales_in,
        filtered_purchases=purchases_in,
    )
