from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import http_error
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.inventory import (
    StockCreate,
    StockDump,
    StockEventOut,
    StockLoad,
    StockOut,
    StockTransfer,
    StockTransferOut,
)
from ledgerbook.app.services.inventory import (
    add_stock,
    delete_stock,
    dump_stock,
    list_stocks,
    load_stock,
    stock_history,
    transfer_stock,
)

router = APIRouter()


@router.get("", response_model=list[StockOut])
def get_stocks(db: Session = Depends(get_db)) -> list[StockOut]:
    return list_stocks(db)


@router.post("", response_model=StockOut, status_code=status.HTTP_201_CREATED)
def post_stock(
    payload: StockCreate,
    db: Session = Depends(get_db),
) -> StockOut:
    try:
        return add_stock(db, payload)
    except ValueError as e:
        raise http_error(e)


@router.post("/transfer", response_model=StockTransferOut, status_code=status.HTTP_201_CREATED)
def post_transfer(
    payload: StockTransfer,
    db: Session = Depends(get_db),
) -> StockTransferOut:
    try:
        source, destination = transfer_stock(
            db, payload.from_stock_id, payload.to_stock_id, payload.quantity, payload.notes,
        )
    except ValueError as e:
        raise http_error(e)
    return StockTransferOut(source=source, destination=destination)


@router.delete("/{stock_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_stock(
    stock_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    try:
        delete_stock(db, stock_id)
    except ValueError as e:
        raise http_error(e)


@router.post("/{stock_id}/load", response_model=StockOut, status_code=status.HTTP_201_CREATED)
def post_load(
    stock_id: UUID,
    payload: StockLoad,
    db: Session = Depends(get_db),
) -> StockOut:
    try:
        return load_stock(db, stock_id, payload.quantity, payload.notes)
    except ValueError as e:
        raise http_error(e)


@router.post("/{stock_id}/dump", response_model=StockOut, status_code=status.HTTP_201_CREATED)
def post_dump(
    stock_id: UUID,
    payload: StockDump,
    db: Session = Depends(get_db),
) -> StockOut:
    try:
        return dump_stock(
            db,
            stock_id,
            payload.quantity,
            payload.to_location,
            product_id=payload.product_id,
            sub_category=payload.sub_category,
            notes=payload.notes,
        )
    except ValueError as e:
        raise http_error(e)


@router.get("/{stock_id}/history", response_model=list[StockEventOut])
def get_history(
    stock_id: UUID,
    db: Session = Depends(get_db),
) -> list[StockEventOut]:
    try:
        return stock_history(db, stock_id)
    except ValueError as e:
        raise http_error(e)
