from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledgerbook.app.api.deps import http_error
from ledgerbook.app.core.database import get_db
from ledgerbook.app.schemas.payments import (
    AccountCreate,
    AccountOut,
    AccountTransactionOut,
    ExpenseUpdate,
    FundsChange,
    TransferCreate,
    TransferOut,
)
from ledgerbook.app.services.payments import (
    add_expense,
    add_funds,
    create_account,
    list_accounts,
    remove_funds,
    transfer_funds,
    update_expense,
)

router = APIRouter()


@router.get("", response_model=list[AccountOut])
def get_accounts(db: Session = Depends(get_db)) -> list[dict]:
    return list_accounts(db)


@router.post("", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def post_account(
    payload: AccountCreate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return create_account(
            db, name=payload.name, opening_balance=payload.opening_balance,
        )
    except ValueError as e:
        raise http_error(e)


@router.post("/transfer", response_model=TransferOut, status_code=status.HTTP_201_CREATED)
def transfer(
    payload: TransferCreate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return transfer_funds(
            db,
            from_account_id=payload.from_account_id,
            to_account_id=payload.to_account_id,
            amount=payload.amount,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.post(
    "/{account_id}/add-funds",
    response_model=AccountTransactionOut,
    status_code=status.HTTP_201_CREATED,
)
def post_add_funds(
    account_id: UUID,
    payload: FundsChange,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return add_funds(
            db,
            account_id=account_id,
            amount=payload.amount,
            description=payload.description,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.post(
    "/{account_id}/remove-funds",
    response_model=AccountTransactionOut,
    status_code=status.HTTP_201_CREATED,
)
def post_remove_funds(
    account_id: UUID,
    payload: FundsChange,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return remove_funds(
            db,
            account_id=account_id,
            amount=payload.amount,
            description=payload.description,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.post(
    "/{account_id}/expenses",
    response_model=AccountTransactionOut,
    status_code=status.HTTP_201_CREATED,
)
def post_expense(
    account_id: UUID,
    payload: FundsChange,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return add_expense(
            db,
            account_id=account_id,
            amount=payload.amount,
            description=payload.description or "",
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)


@router.patch("/expenses/{transaction_id}", response_model=AccountTransactionOut)
def patch_expense(
    transaction_id: UUID,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        return update_expense(
            db,
            transaction_id,
            amount=payload.amount,
            description=payload.description,
            notes=payload.notes,
            on_date=payload.date,
        )
    except ValueError as e:
        raise http_error(e)
