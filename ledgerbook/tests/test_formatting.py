"""Tests for the display helpers."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.app.services.formatting import (
    balance_sign,
    format_balance,
    format_date,
    format_inr,
    format_number,
    format_quantity,
    month_key,
    month_label,
    short_month_label,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("0"), "0"),
        (Decimal("999"), "999"),
        (Decimal("1000"), "1,000"),
        (Decimal("100000"), "1,00,000"),
        (Decimal("1234567"), "12,34,567"),
        (Decimal("123456789"), "12,34,56,789"),
        (Decimal("-1200"), "-1,200"),
        (Decimal("1199.5"), "1,200"),
        (Decimal("1200.4"), "1,200"),
        (1500, "1,500"),
        ("2500.00", "2,500"),
    ],
)
def test_format_inr(value: object, expected: str) -> None:
    assert format_inr(value) == expected  # type: ignore[arg-type]


def test_balance_sign_zero_is_debit() -> None:
    assert balance_sign(Decimal("0")) == "Dr"
    assert balance_sign(Decimal("0.01")) == "Dr"
    assert balance_sign(Decimal("-0.01")) == "Cr"


def test_format_balance() -> None:
    assert format_balance(Decimal("1200")) == "1,200 Dr"
    assert format_balance(Decimal("-300")) == "300 Cr"
    assert format_balance(Decimal("0")) == "0 Dr"
    assert format_balance(Decimal("0"), blank_zero=True) == "0"
    assert format_balance(Decimal("-50"), blank_zero=True) == "50 Cr"


def test_dates_and_months() -> None:
    d = date(2024, 1, 5)
    assert format_date(d) == "05 Jan 2024"
    assert month_key(d) == "2024-01"
    assert month_label("2024-01") == "January 2024"
    assert short_month_label("2024-11") == "Nov 2024"


def test_month_keys_sort_chronologically() -> None:
    keys = [month_key(date(2024, m, 1)) for m in (11, 2, 10, 1)]
    assert sorted(keys) == ["2024-01", "2024-02", "2024-10", "2024-11"]


@pytest.mark.parametrize(
    ("value", "places", "expected"),
    [
        (Decimal("333.3333"), 2, "333.33"),
        (Decimal("123456.789"), 2, "1,23,456.79"),
        (Decimal("-1200.5"), 2, "-1,200.50"),
        (Decimal("11.1111"), 4, "11.1111"),
        (Decimal("1199.5"), 0, "1,200"),
    ],
)
def test_format_number(value: Decimal, places: int, expected: str) -> None:
    assert format_number(value, places) == expected


def test_format_quantity() -> None:
    assert format_quantity(Decimal("20")) == "20"
    assert format_quantity(Decimal("150000.0000")) == "1,50,000"
    assert format_quantity(Decimal("12.5")) == "12.50"
