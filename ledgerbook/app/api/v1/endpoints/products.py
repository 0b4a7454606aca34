from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import http_error
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.inventory import ProductCreate, ProductOut
from ledgerbook.app.services.inventory import create_product, delete_product, list_products

router = APIRouter()


@router.get("", response_model=list[ProductOut])
def get_products(db: Session = Depends(get_db)) -> list[ProductOut]:
    return list_products(db)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def post_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
) -> ProductOut:
    return create_product(db, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_product(
    product_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    try:
        delete_product(db, product_id)
    except ValueError as e:
        raise http_error(e)
