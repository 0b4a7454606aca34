"""Tests for the statement and report exporters (PDF + Excel)."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from ledgerbook.app.schemas.ledger import (
    CustomerLedger,
    DateRange,
    LedgerTransaction,
    PurchaseRecord,
    SaleRecord,
)
from ledgerbook.app.schemas.reports import CustomerActivityRow, MonthlySummaryRow
from ledgerbook.app.services.export_excel import export_report_excel, export_statement_excel
from ledgerbook.app.services.export_labels import (
    REPORTS,
    display_value,
    get_layout,
    profit_loss_rows,
    raw_value,
)
from ledgerbook.app.services.export_pdf import (
    _FONT,
    _new_pdf,
    _summary_boxes,
    _wrap,
    export_report_pdf,
    export_statement_pdf,
)
from ledgerbook.app.services.reports import profit_loss
from ledgerbook.app.services.statement import build_customer_statement


@pytest.fixture()
def statement():
    customer = CustomerLedger(
        id="c1",
        name="Ravi Traders – Main",
        phone="9876543210",
        transactions=[
            LedgerTransaction(id="1", date="2024-01-05", type="sale", amount=1000, notes="10 bags"),
            LedgerTransaction(id="2", date="2024-01-20", type="payment", amount=-400),
            LedgerTransaction(id="3", date="2024-02-02", type="sale", amount=600),
        ],
    )
    dr = DateRange(start=date(2024, 1, 1), end=date(2024, 2, 29))
    return build_customer_statement(customer, dr)


# ── Statement ────────────────────────────────────────────────────────────


def test_statement_pdf_signature(statement) -> None:
    buf = export_statement_pdf(statement)
    assert buf.read(5) == b"%PDF-"


def test_statement_excel_contents(statement) -> None:
    buf = export_statement_excel(statement)
    assert buf.getvalue()[:2] == b"PK"

    ws = load_workbook(buf).active
    values = [row for row in ws.iter_rows(values_only=True)]
    flat = [v for row in values for v in row if v is not None]
    assert "January 2024" in flat
    assert "January 2024 Total" in flat
    assert "Opening Balance" in flat
    net_row = next(row for row in values if row[1] == "Net Balance")
    assert net_row[4] == 1200
    assert net_row[5] == "Dr"


def test_empty_statement_exports(statement) -> None:
    empty = statement.model_copy(update={"groups": ()})
    assert export_statement_pdf(empty).read(5) == b"%PDF-"
    assert export_statement_excel(empty).getvalue()[:2] == b"PK"


def test_long_details_wrap_instead_of_truncating() -> None:
    pdf = _new_pdf("Statement", "")
    pdf.set_font(_FONT, "", 9)
    details = "Sale - 120 bags - OPC 53 delivered to the north site godown behind the market yard"

    lines = _wrap(pdf, details, 72)
    assert len(lines) > 1
    assert " ".join(line.strip() for line in lines) == details
    assert len(_wrap(pdf, "", 72)) == 1


def test_statement_pdf_with_long_details() -> None:
    long_line = LedgerTransaction(
        id="4", date="2024-02-10", type="sale", amount=250,
        notes="Delivered to the north site godown behind the market yard " * 4,
    )
    customer = CustomerLedger(id="c1", name="Ravi Traders", transactions=[long_line])
    st = build_customer_statement(customer)
    assert export_statement_pdf(st).read(5) == b"%PDF-"


def test_opening_balance_box_carries_currency(statement) -> None:
    boxes = _summary_boxes(statement)
    assert boxes[0][0] == "Opening Balance"
    assert all(value.startswith("Rs. ") for _, value, _ in boxes)


# ── Reports ──────────────────────────────────────────────────────────────


def test_every_report_has_a_layout() -> None:
    assert set(REPORTS) == {
        "item-by-party",
        "item-sale-summary",
        "monthly-business-summary",
        "customer-wise-summary",
        "account-balance-summary",
        "transactions",
        "customer-activity",
        "profit-loss",
    }


def test_unknown_report_layout() -> None:
    with pytest.raises(ValueError, match="Unknown report"):
        get_layout("balance-sheet")


def test_report_pdf_and_excel() -> None:
    rows = [
        MonthlySummaryRow(
            month_key="2024-01", month="Jan 2024",
            sales=Decimal("150000"), collections=Decimal("40000"),
        ),
    ]
    assert export_report_pdf("monthly-business-summary", rows, "Period").read(5) == b"%PDF-"

    buf = export_report_excel("monthly-business-summary", rows, "Period")
    ws = load_workbook(buf).active
    assert ws.cell(row=4, column=1).value == "Month"
    assert ws.cell(row=5, column=1).value == "Jan 2024"
    assert ws.cell(row=5, column=2).value == 150000


def test_report_pdf_without_rows() -> None:
    assert export_report_pdf("transactions", [], "").read(5) == b"%PDF-"


def test_activity_cells() -> None:
    row = CustomerActivityRow(
        name="Ravi", phone="", category="Dealer", balance=Decimal("1200"),
        last_transaction_date=date(2024, 3, 30), days_since_last_transaction=1,
        is_active=True, recent_transactions=1, total_transactions=5,
    )
    columns = {c.field: c for c in get_layout("customer-activity").columns}
    assert display_value(row, columns["is_active"]) == "Active"
    assert display_value(row, columns["balance"]) == "1,200"
    assert display_value(row, columns["last_transaction_date"]) == "30 Mar 2024"
    assert raw_value(row, columns["balance"]) == 1200.0


def test_profit_loss_rows() -> None:
    summary = profit_loss([], [], DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31)))
    rows = profit_loss_rows(summary)
    assert rows[0]["metric"] == "Total Sales Bags"
    assert len(rows) == 9
    assert export_report_excel("profit-loss", rows, "").getvalue()[:2] == b"PK"


def test_profit_loss_metric_formatting() -> None:
    sales = [SaleRecord(id="s1", date="2024-01-10", quantity=Decimal("30"), total_amount=Decimal("10000"))]
    purchases = [
        PurchaseRecord(
            id="p1", date="2024-01-02", quantity=Decimal("30"),
            price_per_unit=Decimal("300"), total_amount=Decimal("9000"),
        ),
    ]
    summary = profit_loss(sales, purchases, DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31)))
    rows = {r["metric"]: r for r in profit_loss_rows(summary)}
    column = get_layout("profit-loss").columns[1]

    assert display_value(rows["Total Sales Bags"], column) == "30"
    assert display_value(rows["Total Sales Revenue"], column) == "10,000"
    assert display_value(rows["Avg Selling Price / Bag"], column) == "333.33"
    assert display_value(rows["Profit Margin %"], column) == "11.11%"
    assert display_value(rows["Total Profit"], column) == "1,000"
    assert raw_value(rows["Avg Selling Price / Bag"], column) == pytest.approx(333.3333)
