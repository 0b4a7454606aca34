from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from ledgerbook.app.models.inventory import StockEventType


def _positive(v: Decimal) -> Decimal:
    if v <= 0:
        raise ValueError("Quantity must be greater than 0")
    return v


# ─── Products ─────────────────────────────────────────────────────────────────


class ProductCreate(BaseModel):
    name: str
    category: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str | None


# ─── Stock locations ──────────────────────────────────────────────────────────


class StockCreate(BaseModel):
    location: str
    threshold: Decimal = Decimal("100")
    product_id: UUID | None = None

    @field_validator("location")
    @classmethod
    def location_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Location must not be empty")
        return v.strip()


class StockOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    location: str
    quantity: Decimal
    threshold: Decimal
    product_id: UUID | None


class StockLoad(BaseModel):
    quantity: Decimal
    notes: str | None = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class StockDump(BaseModel):
    quantity: Decimal
    to_location: str
    product_id: UUID | None = None
    sub_category: str | None = None
    notes: str | None = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class StockTransfer(BaseModel):
    from_stock_id: UUID
    to_stock_id: UUID
    quantity: Decimal
    notes: str | None = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: Decimal) -> Decimal:
        return _positive(v)


class StockTransferOut(BaseModel):
    source: StockOut
    destination: StockOut


class StockEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    stock_id: UUID
    type: StockEventType
    quantity: Decimal
    from_location: str | None
    to_location: str | None
    product_id: UUID | None
    sub_category: str | None
    notes: str | None
    created_at: datetime | None
