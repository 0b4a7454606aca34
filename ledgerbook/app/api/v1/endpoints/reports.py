from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import resolve_date_range
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.ledger import DateRange
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
from ledgerbook.app.services.export_excel import export_report_excel
from ledgerbook.app.services.export_labels import REPORTS, profit_loss_rows, t
from ledgerbook.app.services.export_pdf import export_report_pdf
from ledgerbook.app.services.formatting import format_date
from ledgerbook.app.services.reports import (
    account_balance_summary,
    customer_activity,
    customer_wise_summary,
    item_report_by_party,
    item_sale_summary,
    monthly_business_summary,
    profit_loss,
    transaction_report,
)
from ledgerbook.app.services.snapshot import (
    load_account_ledgers,
    load_customer_ledgers,
    load_purchases,
    load_sales,
)

router = APIRouter()


# ── Item reports ────────────────────────────────────────────────────────────


@router.get("/item-by-party", response_model=list[PartyItemRow])
def item_by_party(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> list[PartyItemRow]:
    dr = resolve_date_range(from_date, to_date)
    return item_report_by_party(load_customer_ledgers(db), dr)


@router.get("/item-sale-summary", response_model=list[ItemSaleRow])
def item_sales(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> list[ItemSaleRow]:
    dr = resolve_date_range(from_date, to_date)
    return item_sale_summary(load_customer_ledgers(db), dr)


# ── Business summaries ──────────────────────────────────────────────────────


@router.get("/monthly-business-summary", response_model=list[MonthlySummaryRow])
def monthly_summary(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> list[MonthlySummaryRow]:
    dr = resolve_date_range(from_date, to_date)
    return monthly_business_summary(load_customer_ledgers(db), dr)


@router.get("/customer-wise-summary", response_model=list[CustomerSummaryRow])
def customer_summary(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> list[CustomerSummaryRow]:
    dr = resolve_date_range(from_date, to_date)
    return customer_wise_summary(load_customer_ledgers(db), dr)


@router.get("/account-balance-summary", response_model=list[AccountBalanceRow])
def account_summary(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> list[AccountBalanceRow]:
    dr = resolve_date_range(from_date, to_date)
    return account_balance_summary(load_account_ledgers(db), dr)


# ── Transactions & activity ─────────────────────────────────────────────────


@router.get("/transactions", response_model=list[TransactionReportRow])
def transactions(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> list[TransactionReportRow]:
    dr = resolve_date_range(from_date, to_date)
    return transaction_report(load_customer_ledgers(db), dr)


@router.get("/customer-activity", response_model=list[CustomerActivityRow])
def activity(
    category: str | None = Query(None, description="Customer category, or 'all'"),
    db: Session = Depends(get_db),
) -> list[CustomerActivityRow]:
    return customer_activity(load_customer_ledgers(db), category=category)


# ── Profit & loss ───────────────────────────────────────────────────────────


@router.get("/profit-loss", response_model=ProfitLossSummary)
def profit_and_loss(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> ProfitLossSummary:
    dr = resolve_date_range(from_date, to_date)
    return profit_loss(load_sales(db), load_purchases(db), dr)


# ── Exports ─────────────────────────────────────────────────────────────────

_XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_PDF_MIME = "application/pdf"


def _period(dr: DateRange) -> str:
    return f"{t('period')}: {format_date(dr.start)} to {format_date(dr.end)}"


def _report_rows(
    db: Session,
    report: str,
    from_date: date | None,
    to_date: date | None,
    category: str | None,
) -> tuple[Sequence[Any], str]:
    """Compute a report by name; returns its rows and the export subtitle."""
    if report not in REPORTS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown report '{report}'",
        )

    if report == "customer-activity":
        rows = customer_activity(load_customer_ledgers(db), category=category)
        return rows, f"{t('category')}: {category or 'all'}"

    dr = resolve_date_range(from_date, to_date)
    if report == "profit-loss":
        summary = profit_loss(load_sales(db), load_purchases(db), dr)
        return profit_loss_rows(summary), _period(dr)
    if report == "account-balance-summary":
        return account_balance_summary(load_account_ledgers(db), dr), _period(dr)

    by_customers = {
        "item-by-party": item_report_by_party,
        "item-sale-summary": item_sale_summary,
        "monthly-business-summary": monthly_business_summary,
        "customer-wise-summary": customer_wise_summary,
        "transactions": transaction_report,
    }
    return by_customers[report](load_customer_ledgers(db), dr), _period(dr)


def _export_response(
    buf: object, media_type: str, filename: str,
) -> StreamingResponse:
    return StreamingResponse(
        buf,  # type: ignore[arg-type]
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{report}/export/excel")
def report_export_excel(
    report: str,
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    category: str | None = Query(None),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    rows, subtitle = _report_rows(db, report, from_date, to_date, category)
    buf = export_report_excel(report, rows, subtitle)
    return _export_response(buf, _XLSX_MIME, f"{report}.xlsx")


@router.get("/{report}/export/pdf")
def report_export_pdf(
    report: str,
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    category: str | None = Query(None),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    rows, subtitle = _report_rows(db, report, from_date, to_date, category)
    buf = export_report_pdf(report, rows, subtitle)
    return _export_response(buf, _PDF_MIME, f"{report}.pdf")
