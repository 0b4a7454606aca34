from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, field_validator


# ─── Customer CRUD ────────────────────────────────────────────────────────────


class CustomerCreate(BaseModel):
    name: str
    phone: str | None = None
    category: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()


class CustomerUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    category: str | None = None


class CustomerOut(BaseModel):
    id: UUID
    name: str
    phone: str | None
    category: str | None
    balance: str
    created_at: datetime | None
