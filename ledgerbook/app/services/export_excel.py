"""Excel exports for the customer statement and the business reports using openpyxl."""
from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ledgerbook.app.core.config import settings
from ledgerbook.app.schemas.statement import Statement
from ledgerbook.app.services.export_labels import get_layout, raw_value, t
from ledgerbook.app.services.formatting import format_date

logger = logging.getLogger(__name__)

# ── Shared styling constants ────────────────────────────────────────────────

_HEADER_FONT = Font(name="Calibri", bold=True, color="FFFFFF", size=11)
_HEADER_FILL = PatternFill(start_color="0B4EA2", end_color="0B4EA2", fill_type="solid")
_SECTION_FONT = Font(name="Calibri", bold=True, size=11)
_SECTION_FILL = PatternFill(start_color="DBEAFE", end_color="DBEAFE", fill_type="solid")
_TOTAL_FONT = Font(name="Calibri", bold=True, size=11)
_TOTAL_FILL = PatternFill(start_color="FEF3C7", end_color="FEF3C7", fill_type="solid")
_TOTAL_BORDER = Border(
    top=Side(style="thin"),
    bottom=Side(style="double"),
)
_DEBIT_FONT = Font(name="Calibri", color="C81E1E")
_CREDIT_FONT = Font(name="Calibri", color="16823C")
_CURRENCY_FMT = '#,##0'
_METRIC_FMT = {"bags": "General", "price": "#,##0.00", "percent": "0.00\"%\""}
_RIGHT = Alignment(horizontal="right")
_LEFT = Alignment(horizontal="left")

_XLSX_TITLE_MAX = 31  # worksheet title limit


def _auto_width(ws: Any) -> None:
    """Auto-fit column widths based on content."""
    for col_idx in range(1, ws.max_column + 1):
        max_len = 0
        col_letter = get_column_letter(col_idx)
        for row in ws.iter_rows(min_row=4, min_col=col_idx, max_col=col_idx, values_only=True):
            if row[0] is not None:
                max_len = max(max_len, len(str(row[0])))
        ws.column_dimensions[col_letter].width = min(max_len + 4, 40)


def _write_header_row(ws: Any, row: int, values: Sequence[str], right: Sequence[bool]) -> None:
    """Write a styled header row."""
    for col, (val, r) in enumerate(zip(values, right), 1):
        cell = ws.cell(row=row, column=col, value=val)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _RIGHT if r else _LEFT


def _write_title(ws: Any, title: str, subtitle: str) -> int:
    """Write report title and subtitle, return next available row."""
    ws.cell(row=1, column=1, value=title).font = Font(name="Calibri", bold=True, size=14)
    ws.cell(row=2, column=1, value=subtitle).font = Font(name="Calibri", size=10, italic=True)
    return 4


def _money_cell(ws: Any, row: int, col: int, value: Any, font: Font | None = None) -> Any:
    c = ws.cell(row=row, column=col, value=float(value))
    c.number_format = _CURRENCY_FMT
    c.alignment = _RIGHT
    if font is not None:
        c.font = font
    return c


def _to_workbook(ws: Any, wb: Workbook) -> io.BytesIO:
    """Finalize workbook and return as BytesIO."""
    _auto_width(ws)
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


# ── Statement ───────────────────────────────────────────────────────────────


def export_statement_excel(statement: Statement) -> io.BytesIO:
    """Statement sheet: one block per month, balances as absolute amounts with Dr/Cr."""
    wb = Workbook()
    ws = wb.active
    ws.title = t("statement")

    subtitle = statement.customer_name
    if statement.date_range is not None:
        subtitle += (
            f" | {t('period')}: {format_date(statement.date_range.start)}"
            f" to {format_date(statement.date_range.end)}"
        )
    if statement.phone:
        subtitle += f" | {t('phone')}: {statement.phone}"
    row = _write_title(ws, f"{settings.BUSINESS_NAME} - {t('statement')}", subtitle)

    headers = [t("date"), t("details"), t("debit"), t("credit"), t("balance"), "Dr/Cr"]
    _write_header_row(ws, row, headers, (False, False, True, True, True, False))
    row += 1

    ws.cell(row=row, column=2, value=t("opening_balance")).font = _TOTAL_FONT
    _money_cell(ws, row, 5, abs(statement.opening_balance))
    row += 1

    for group in statement.groups:
        for col in range(1, 7):
            ws.cell(row=row, column=col).fill = _SECTION_FILL
        ws.cell(row=row, column=1, value=group.label).font = _SECTION_FONT
        row += 1

        for r in group.rows:
            ws.cell(row=row, column=1, value=r.date)
            ws.cell(row=row, column=1).number_format = "DD MMM YYYY"
            ws.cell(row=row, column=2, value=r.details)
            if r.debit:
                _money_cell(ws, row, 3, r.debit, _DEBIT_FONT)
            if r.credit:
                _money_cell(ws, row, 4, r.credit, _CREDIT_FONT)
            _money_cell(ws, row, 5, abs(r.running_balance))
            ws.cell(row=row, column=6, value=r.balance_sign)
            row += 1

        ws.cell(row=row, column=2, value=f"{group.label} {t('total')}").font = _TOTAL_FONT
        for col, value in ((3, group.debit_total), (4, group.credit_total)):
            c = _money_cell(ws, row, col, value, _TOTAL_FONT)
            c.border = _TOTAL_BORDER
        for col in range(1, 7):
            ws.cell(row=row, column=col).fill = _TOTAL_FILL
        row += 1

    row += 1
    summary = [
        (t("total_debit"), statement.total_debit, None),
        (t("total_credit"), statement.total_credit, None),
        (t("net_balance"), abs(statement.net_balance), statement.net_balance_sign),
    ]
    for label, value, sign in summary:
        ws.cell(row=row, column=2, value=label).font = _TOTAL_FONT
        _money_cell(ws, row, 5, value, _TOTAL_FONT)
        if sign:
            ws.cell(row=row, column=6, value=sign).font = _TOTAL_FONT
        row += 1

    logger.info(
        "Exported statement Excel for %s (%d rows)",
        statement.customer_name, len(statement.rows),
    )
    return _to_workbook(ws, wb)


# ── Reports ─────────────────────────────────────────────────────────────────


def export_report_excel(
    report: str, rows: Sequence[Any], subtitle: str = "",
) -> io.BytesIO:
    """Render any report from its column layout as a single sheet."""
    layout = get_layout(report)
    columns = layout.columns
    right = [c.kind in ("money", "number", "metric") for c in columns]

    wb = Workbook()
    ws = wb.active
    ws.title = t(layout.title)[:_XLSX_TITLE_MAX]

    row = _write_title(ws, f"{settings.BUSINESS_NAME} - {t(layout.title)}", subtitle)
    _write_header_row(ws, row, [t(c.label) for c in columns], right)
    row += 1

    for item in rows:
        for col, column in enumerate(columns, 1):
            value = raw_value(item, column)
            c = ws.cell(row=row, column=col, value=value)
            if column.kind == "money" and value is not None:
                c.number_format = _CURRENCY_FMT
            elif column.kind == "metric" and value is not None:
                c.number_format = _METRIC_FMT.get(item["kind"], _CURRENCY_FMT)
            elif column.kind == "date" and value is not None:
                c.number_format = "DD MMM YYYY"
            if right[col - 1]:
                c.alignment = _RIGHT
        row += 1

    logger.info("Exported %s Excel (%d rows)", report, len(rows))
    return _to_workbook(ws, wb)
