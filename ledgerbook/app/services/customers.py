from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from ledgerbook.app.models.customer import Customer
from ledgerbook.app.models.inventory import Sale
from ledgerbook.app.schemas.customer import CustomerCreate, CustomerOut, CustomerUpdate

logger = logging.getLogger(__name__)


def _to_out(c: Customer) -> CustomerOut:
    return CustomerOut(
        id=c.id,
        name=c.name,
        phone=c.phone,
        category=c.category,
        balance=str(c.balance),
        created_at=c.created_at,
    )


def _get_customer(db: Session, customer_id: UUID) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise ValueError("Customer not found")
    return customer


def list_customers(
    db: Session, q: str | None = None, category: str | None = None,
) -> list[CustomerOut]:
    query = db.query(Customer)
    if q:
        like = f"%{q}%"
        query = query.filter(Customer.name.ilike(like) | Customer.phone.ilike(like))
    if category:
        query = query.filter(Customer.category == category)
    return [_to_out(c) for c in query.order_by(Customer.name).all()]


def create_customer(db: Session, payload: CustomerCreate) -> CustomerOut:
    customer = Customer(**payload.model_dump())
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info("Created customer %s (%s)", customer.name, customer.id)
    return _to_out(customer)


def update_customer(
    db: Session, customer_id: UUID, payload: CustomerUpdate,
) -> CustomerOut:
    customer = _get_customer(db, customer_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)
    db.commit()
    db.refresh(customer)
    logger.info("Updated customer %s", customer.id)
    return _to_out(customer)


def delete_customer(db: Session, customer_id: UUID) -> None:
    """Delete a customer together with their ledger lines and sales."""
    customer = _get_customer(db, customer_id)
    db.query(Sale).filter(Sale.customer_id == customer.id).delete()
    db.delete(customer)
    db.commit()
    logger.info("Deleted customer %s", customer_id)
