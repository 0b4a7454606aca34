from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import http_error
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.payments import (
    CustomerPaymentCreate,
    CustomerTransactionOut,
    DiscountCreate,
)
from ledgerbook.app.services.payments import record_customer_payment, record_discount

router = APIRouter()


@router.post(
    "/customer",
    response_model=CustomerTransactionOut,
    status_code=status.HTTP_201_CREATED,
)
def customer_payment(
    payload: CustomerPaymentCreate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return record_customer_payment(
            db,
            customer_id=payload.customer_id,
            amount=payload.amount,
            account_id=payload.account_id,
            method=payload.method,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.post(
    "/discount",
    response_model=CustomerTransactionOut,
    status_code=status.HTTP_201_CREATED,
)
def discount(
    payload: DiscountCreate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return record_discount(
            db,
            customer_id=payload.customer_id,
            amount=payload.amount,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)
