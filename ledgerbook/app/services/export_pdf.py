"""PDF exports for the customer statement and the business reports using fpdf2."""
from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from typing import Any

from fpdf import FPDF
from fpdf.enums import MethodReturnValue

from ledgerbook.app.core.config import settings
from ledgerbook.app.schemas.statement import Statement, StatementLine
from ledgerbook.app.services.export_labels import (
    Column,
    display_value,
    get_layout,
    t,
)
from ledgerbook.app.services.formatting import (
    CREDIT_SIGN,
    DEBIT_SIGN,
    format_balance,
    format_date,
    format_inr,
)
from ledgerbook.app.services.statement import statement_lines

logger = logging.getLogger(__name__)


# ── Shared helpers ──────────────────────────────────────────────────────────

_BAR_BG = (11, 78, 162)      # header bar and table header
_SEC_BG = (219, 234, 254)    # month header
_TOTAL_BG = (254, 243, 199)  # month total
_SHADE_BG = (243, 244, 246)  # alternating row shade
_BOX_BG = (248, 250, 252)    # summary boxes
_DEBIT_RGB = (200, 30, 30)
_CREDIT_RGB = (22, 130, 60)
_BLACK = (0, 0, 0)
_LINE_H = 7
_PAGE_W = 190  # A4 portrait less 10 mm margins

_FONT = "Helvetica"

# Date | Details | Debit(-) | Credit(+) | Balance
_STATEMENT_WIDTHS = (26, 72, 30, 30, 32)


class _LedgerPDF(FPDF):
    """A4 portrait page with the business footer on every page."""

    def footer(self) -> None:
        self.set_y(-12)
        self.set_font(_FONT, "I", 8)
        self.set_text_color(120, 120, 120)
        self.cell(
            _PAGE_W - 20, 6,
            _safe_text(f"{t('generated_by')} {settings.BUSINESS_NAME}"),
            align="L",
        )
        self.cell(20, 6, f"{self.page_no()}", align="R")
        self.set_text_color(*_BLACK)


def _new_pdf(title: str, subtitle: str) -> FPDF:
    """Create a portrait PDF opened with the business header bar."""
    pdf = _LedgerPDF()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=18)

    pdf.set_fill_color(*_BAR_BG)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(_FONT, "B", 16)
    pdf.cell(_PAGE_W, 11, _safe_text(settings.BUSINESS_NAME), fill=True, align="C", ln=True)
    pdf.set_font(_FONT, "", 10)
    pdf.cell(_PAGE_W, 7, _safe_text(title), fill=True, align="C", ln=True)
    pdf.set_text_color(*_BLACK)
    pdf.ln(3)

    if subtitle:
        pdf.set_font(_FONT, "", 9)
        pdf.multi_cell(_PAGE_W, 5, _safe_text(subtitle))
        pdf.ln(2)
    return pdf


def _header_row(pdf: FPDF, headers: Sequence[str], widths: Sequence[int], right: Sequence[bool]) -> None:
    """Draw a colored header row."""
    pdf.set_fill_color(*_BAR_BG)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(_FONT, "B", 9)
    for h, w, r in zip(headers, widths, right):
        pdf.cell(w, _LINE_H, _safe_text(h), border=1, fill=True, align="R" if r else "L")
    pdf.ln()
    pdf.set_text_color(*_BLACK)


def _sign_color(sign: str | None) -> tuple[int, int, int]:
    if sign == DEBIT_SIGN:
        return _DEBIT_RGB
    if sign == CREDIT_SIGN:
        return _CREDIT_RGB
    return _BLACK


def _safe_text(text: str) -> str:
    """Replace non-latin-1 characters for PDF built-in fonts."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _money(value: Any) -> str:
    return f"{settings.CURRENCY_PREFIX} {format_inr(value)}"


def _to_bytes(pdf: FPDF) -> io.BytesIO:
    """Output PDF to BytesIO."""
    buf = io.BytesIO()
    pdf.output(buf)
    buf.seek(0)
    return buf


# ── Statement ───────────────────────────────────────────────────────────────


def _statement_subtitle(statement: Statement) -> str:
    parts = [statement.customer_name]
    if statement.date_range is not None:
        parts.append(
            f"{t('period')}: {format_date(statement.date_range.start)}"
            f" to {format_date(statement.date_range.end)}"
        )
    if statement.phone:
        parts.append(f"{t('phone')}: {statement.phone}")
    return "   |   ".join(parts)


def _summary_boxes(statement: Statement) -> list[tuple[str, str, str | None]]:
    """Label, value and Dr/Cr colouring for the four summary boxes."""
    return [
        (
            t("opening_balance"),
            f"{settings.CURRENCY_PREFIX} {format_balance(statement.opening_balance, blank_zero=True)}",
            None,
        ),
        (t("total_debit"), _money(statement.total_debit), DEBIT_SIGN),
        (t("total_credit"), _money(statement.total_credit), CREDIT_SIGN),
        (
            t("net_balance"),
            f"{settings.CURRENCY_PREFIX} {format_balance(statement.net_balance)}",
            statement.net_balance_sign,
        ),
    ]


def _summary_strip(pdf: FPDF, statement: Statement) -> None:
    boxes = _summary_boxes(statement)
    box_w = _PAGE_W / len(boxes)
    x0, y0 = pdf.get_x(), pdf.get_y()
    pdf.set_fill_color(*_BOX_BG)
    for i, (label, value, sign) in enumerate(boxes):
        pdf.set_xy(x0 + i * box_w, y0)
        pdf.set_font(_FONT, "", 8)
        pdf.set_text_color(90, 90, 90)
        pdf.cell(box_w, 6, _safe_text(label), border="LTR", fill=True, align="C")
        pdf.set_xy(x0 + i * box_w, y0 + 6)
        pdf.set_font(_FONT, "B", 11)
        pdf.set_text_color(*_sign_color(sign))
        pdf.cell(box_w, 8, _safe_text(value), border="LBR", fill=True, align="C")
    pdf.set_text_color(*_BLACK)
    pdf.set_xy(x0, y0 + 14)
    pdf.ln(4)


def _wrap(pdf: FPDF, text: str, width: float) -> list[str]:
    """Lines ``text`` occupies in a cell of ``width`` at the current font."""
    lines = pdf.multi_cell(
        width, _LINE_H, text, dry_run=True, output=MethodReturnValue.LINES,
    )
    return lines or [""]


def _statement_line(pdf: FPDF, line: StatementLine) -> None:
    widths = _STATEMENT_WIDTHS

    if line.kind == "month_header":
        pdf.set_fill_color(*_SEC_BG)
        pdf.set_font(_FONT, "B", 9)
        pdf.cell(sum(widths), _LINE_H, _safe_text(line.details), border=1, fill=True, ln=True)
        return

    if line.kind == "month_total":
        pdf.set_fill_color(*_TOTAL_BG)
        fill, style = True, "B"
    elif line.kind == "opening":
        pdf.set_fill_color(*_SHADE_BG)
        fill, style = True, "B"
    else:
        pdf.set_fill_color(*_SHADE_BG)
        fill, style = line.shaded, ""

    pdf.set_font(_FONT, style, 8)
    details = _safe_text(line.details)
    # Long details wrap; the whole row grows to the wrapped height
    row_h = _LINE_H * len(_wrap(pdf, details, widths[1]))
    if pdf.will_page_break(row_h):
        pdf.add_page()

    pdf.cell(widths[0], row_h, line.date, border="LB", fill=fill)
    pdf.multi_cell(
        widths[1], _LINE_H, details, border="B", fill=fill, new_x="RIGHT", new_y="TOP",
    )
    pdf.set_text_color(*_DEBIT_RGB)
    pdf.cell(widths[2], row_h, line.debit, border="B", fill=fill, align="R")
    pdf.set_text_color(*_CREDIT_RGB)
    pdf.cell(widths[3], row_h, line.credit, border="B", fill=fill, align="R")
    pdf.set_text_color(*_sign_color(line.balance_sign))
    pdf.cell(widths[4], row_h, line.balance, border="BR", fill=fill, align="R")
    pdf.set_text_color(*_BLACK)
    pdf.ln(row_h)


def export_statement_pdf(statement: Statement) -> io.BytesIO:
    pdf = _new_pdf(t("statement"), _statement_subtitle(statement))
    _summary_strip(pdf, statement)

    headers = [t("date"), t("details"), t("debit"), t("credit"), t("balance")]
    _header_row(pdf, headers, _STATEMENT_WIDTHS, (False, False, True, True, True))
    for line in statement_lines(statement):
        _statement_line(pdf, line)

    logger.info(
        "Exported statement PDF for %s (%d rows)",
        statement.customer_name, len(statement.rows),
    )
    return _to_bytes(pdf)


# ── Reports ─────────────────────────────────────────────────────────────────


def _is_numeric(column: Column) -> bool:
    return column.kind in ("money", "number", "metric")


def export_report_pdf(
    report: str, rows: Sequence[Any], subtitle: str = "",
) -> io.BytesIO:
    """Render any report from its column layout as a single table."""
    layout = get_layout(report)
    columns = layout.columns
    widths = [c.width for c in columns]
    right = [_is_numeric(c) for c in columns]

    pdf = _new_pdf(t(layout.title), subtitle)
    _header_row(pdf, [t(c.label) for c in columns], widths, right)

    if not rows:
        pdf.set_font(_FONT, "I", 9)
        pdf.cell(sum(widths), _LINE_H, "No data for this period", border="B", ln=True)

    pdf.set_fill_color(*_SHADE_BG)
    for idx, row in enumerate(rows):
        pdf.set_font(_FONT, "", 8)
        for column, w, r in zip(columns, widths, right):
            text = _safe_text(display_value(row, column))
            pdf.cell(w, _LINE_H, text, border="B", fill=idx % 2 == 1, align="R" if r else "L")
        pdf.ln()

    logger.info("Exported %s PDF (%d rows)", report, len(rows))
    return _to_bytes(pdf)
