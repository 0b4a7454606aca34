from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import http_error
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.payments import SaleCreate, SaleOut, SaleUpdate
from ledgerbook.app.services.payments import delete_sale, record_sale, update_sale

router = APIRouter()


@router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def create_sale(
    payload: SaleCreate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return record_sale(
            db,
            customer_id=payload.customer_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            unit=payload.unit,
            price_per_unit=payload.price_per_unit,
            sub_category=payload.sub_category,
            location=payload.location,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.patch("/{sale_id}", response_model=SaleOut)
def patch_sale(
    sale_id: UUID,
    payload: SaleUpdate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return update_sale(
            db,
            sale_id,
            quantity=payload.quantity,
            price_per_unit=payload.price_per_unit,
            sub_category=payload.sub_category,
            location=payload.location,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_sale(
    sale_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    try:
        delete_sale(db, sale_id)
    except ValueError as e:
        raise http_error(e)
