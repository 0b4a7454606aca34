"""Display helpers shared by the statement, the reports and the exporters."""
from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0")
_WHOLE = Decimal("1")

DEBIT_SIGN = "Dr"
CREDIT_SIGN = "Cr"


def _group_en_in(digits: str) -> str:
    """``1234567`` becomes ``12,34,567``: the last three digits form one group
    and every group above them has two digits.
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(value: Decimal | int | str) -> str:
    """Format an amount with en-IN digit grouping and no fractional digits."""
    n = Decimal(str(value)).quantize(_WHOLE, rounding=ROUND_HALF_UP)
    sign = "-" if n < ZERO else ""
    return sign + _group_en_in(str(abs(int(n))))


def format_number(value: Decimal | int | str, places: int = 2) -> str:
    """en-IN grouping with exactly ``places`` fractional digits."""
    n = Decimal(str(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    sign = "-" if n < ZERO else ""
    whole, _, frac = f"{abs(n):f}".partition(".")
    text = _group_en_in(whole)
    return f"{sign}{text}.{frac}" if frac else sign + text


def format_quantity(value: Decimal | int | str) -> str:
    """Bag counts: whole numbers print without decimals."""
    n = Decimal(str(value))
    return format_number(n, 0 if n == n.to_integral_value() else 2)


def balance_sign(value: Decimal) -> str:
    """``Dr`` when the customer owes (zero included), ``Cr`` otherwise."""
    return DEBIT_SIGN if value >= ZERO else CREDIT_SIGN


def format_balance(value: Decimal, blank_zero: bool = False) -> str:
    """Absolute amount followed by its Dr/Cr label.

    With ``blank_zero`` a zero balance carries no label, which is how the
    opening balance is printed.
    """
    amount = format_inr(abs(value))
    if blank_zero and value == ZERO:
        return amount
    return f"{amount} {balance_sign(value)}"


def format_date(d: date) -> str:
    return d.strftime("%d %b %Y")


def month_key(d: date) -> str:
    """Zero-padded ``YYYY-MM``; sorts lexicographically in calendar order."""
    return f"{d.year:04d}-{d.month:02d}"


def _month_start(key: str) -> date:
    year, month = key.split("-")
    return date(int(year), int(month), 1)


def month_label(key: str) -> str:
    return _month_start(key).strftime("%B %Y")


def short_month_label(key: str) -> str:
    return _month_start(key).strftime("%b %Y")
