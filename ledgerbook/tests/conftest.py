"""Shared test fixtures.

Tests run against a private in-memory SQLite database; every table is
created before a test and dropped after it, so tests never see each
other's rows.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from ledgerbook.app.core.database import SessionLocal, engine, get_db
from ledgerbook.app.main import app
from ledgerbook.app.models.registry import Account, Customer, Product, metadata


# ─── DB session on a fresh schema ────────────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    """Yield a session on freshly created tables; tables are dropped afterwards."""
    metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Customers, products & accounts ──────────────────────────────────────────


@pytest.fixture()
def customer(db: Session) -> Customer:
    c = Customer(name="Ravi Traders", phone="9876543210", category="Dealer", balance=Decimal("0"))
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


@pytest.fixture()
def other_customer(db: Session) -> Customer:
    c = Customer(name="Anand Stores", phone=None, category=None, balance=Decimal("0"))
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


@pytest.fixture()
def product(db: Session) -> Product:
    p = Product(name="Cement OPC 53", category="Cement")
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture()
def cash_account(db: Session) -> Account:
    a = Account(name="Cash", balance=Decimal("0"))
    db.add(a)
    db.commit()
    db.refresh(a)
    return a


@pytest.fixture()
def bank_account(db: Session) -> Account:
    a = Account(name="Bank", balance=Decimal("0"))
    db.add(a)
    db.commit()
    db.refresh(a)
    return a
