from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import http_error
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.payments import PurchaseCreate, PurchaseOut, PurchaseUpdate
from ledgerbook.app.services.payments import delete_purchase, record_purchase, update_purchase

router = APIRouter()


@router.post("", response_model=PurchaseOut, status_code=status.HTTP_201_CREATED)
def create_purchase(
    payload: PurchaseCreate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return record_purchase(
            db,
            product_id=payload.product_id,
            quantity=payload.quantity,
            unit=payload.unit,
            price_per_unit=payload.price_per_unit,
            original_price=payload.original_price,
            category=payload.category,
            account_id=payload.account_id,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.patch("/{purchase_id}", response_model=PurchaseOut)
def patch_purchase(
    purchase_id: UUID,
    payload: PurchaseUpdate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return update_purchase(
            db,
            purchase_id,
            quantity=payload.quantity,
            price_per_unit=payload.price_per_unit,
            original_price=payload.original_price,
            category=payload.category,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.delete("/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_purchase(
    purchase_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    try:
        delete_purchase(db, purchase_id)
    except ValueError as e:
        raise http_error(e)
