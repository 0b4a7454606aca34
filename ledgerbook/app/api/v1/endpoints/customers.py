from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import http_error, resolve_date_range
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.customer import CustomerCreate, CustomerOut, CustomerUpdate
from ledgerbook.app.schemas.ledger import DateRange
from ledgerbook.app.schemas.statement import Statement
from ledgerbook.app.services.customers import (
    create_customer,
    delete_customer,
    list_customers,
    update_customer,
)
from ledgerbook.app.services.export_excel import export_statement_excel
from ledgerbook.app.services.export_pdf import export_statement_pdf
from ledgerbook.app.services.snapshot import load_customer_ledger
from ledgerbook.app.services.statement import build_customer_statement

router = APIRouter()

_XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_PDF_MIME = "application/pdf"


@router.get("", response_model=list[CustomerOut])
def get_customers(
    q: str | None = Query(None, description="Search by name or phone"),
    category: str | None = Query(None),
    db: Session = Depends(get_db),
) -> list[CustomerOut]:
    return list_customers(db, q=q, category=category)


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def post_customer(
    payload: CustomerCreate,
    db: Session = Depends(get_db),
) -> CustomerOut:
    return create_customer(db, payload)


@router.patch("/{customer_id}", response_model=CustomerOut)
def patch_customer(
    customer_id: UUID,
    payload: CustomerUpdate,
    db: Session = Depends(get_db),
) -> CustomerOut:
    try:
        return update_customer(db, customer_id, payload)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    try:
        delete_customer(db, customer_id)
    except ValueError as e:
        raise http_error(e)


# ── Statement ───────────────────────────────────────────────────────────────


def _statement_range(from_date: date | None, to_date: date | None) -> DateRange | None:
    """No bounds means the whole history; one bound falls back to the current month."""
    if from_date is None and to_date is None:
        return None
    return resolve_date_range(from_date, to_date)


def _statement(
    db: Session, customer_id: UUID, from_date: date | None, to_date: date | None,
) -> Statement:
    date_range = _statement_range(from_date, to_date)
    try:
        customer = load_customer_ledger(db, customer_id)
    except ValueError as e:
        raise http_error(e)
    return build_customer_statement(customer, date_range)


def _export_response(buf: object, media_type: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        buf,  # type: ignore[arg-type]
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{customer_id}/statement", response_model=Statement)
def get_statement(
    customer_id: UUID,
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> Statement:
    return _statement(db, customer_id, from_date, to_date)


@router.get("/{customer_id}/statement/export/pdf")
def statement_export_pdf(
    customer_id: UUID,
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    statement = _statement(db, customer_id, from_date, to_date)
    buf = export_statement_pdf(statement)
    return _export_response(buf, _PDF_MIME, f"statement-{customer_id}.pdf")


@router.get("/{customer_id}/statement/export/excel")
def statement_export_excel(
    customer_id: UUID,
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    statement = _statement(db, customer_id, from_date, to_date)
    buf = export_statement_excel(statement)
    return _export_response(buf, _XLSX_MIME, f"statement-{customer_id}.xlsx")
