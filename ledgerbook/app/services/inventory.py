"""Products and stock locations.

A stock row holds the bags on hand at one location. Every movement writes a
stock event: a load adds bags at a location, a dump books bags delivered to
another location (typically a shop) against that destination, and a transfer
moves bags between two locations with one event on each side.
"""
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from sqlalchemy.orm import Session

from ledgerbook.app.models.inventory import (
    Product,
    Purchase,
    Sale,
    Stock,
    StockEvent,
    StockEventType,
)
from ledgerbook.app.schemas.inventory import (
    ProductCreate,
    ProductOut,
    StockCreate,
    StockEventOut,
    StockOut,
)

logger = logging.getLogger(__name__)

Q = Decimal("0.0001")
ZERO = Decimal("0")
DEFAULT_PRODUCT_CATEGORY = "Other"


def _quantity(value: Decimal) -> Decimal:
    qty = Decimal(str(value)).quantize(Q, rounding=ROUND_HALF_UP)
    if qty <= ZERO:
        raise ValueError("Quantity must be greater than 0")
    return qty


# ─── Products ─────────────────────────────────────────────────────────────────


def list_products(db: Session) -> list[ProductOut]:
    rows = db.query(Product).order_by(Product.name).all()
    return [ProductOut.model_validate(p) for p in rows]


def create_product(db: Session, data: ProductCreate) -> ProductOut:
    product = Product(name=data.name, category=data.category or DEFAULT_PRODUCT_CATEGORY)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s)", product.name, product.id)
    return ProductOut.model_validate(product)


def delete_product(db: Session, product_id: UUID) -> None:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise ValueError("Product not found")

    in_use = (
        db.query(Sale.id).filter(Sale.product_id == product_id).first()
        or db.query(Purchase.id).filter(Purchase.product_id == product_id).first()
    )
    if in_use:
        raise ValueError("Cannot delete product that has sales or purchases")

    db.delete(product)
    db.commit()
    logger.info("Deleted product %s", product_id)


# ─── Stock locations ──────────────────────────────────────────────────────────


def _get_stock(db: Session, stock_id: UUID) -> Stock:
    stock = db.query(Stock).filter(Stock.id == stock_id).first()
    if not stock:
        raise ValueError("Stock location not found")
    return stock


def _event(
    stock: Stock,
    event_type: StockEventType,
    quantity: Decimal,
    *,
    from_location: str | None = None,
    to_location: str | None = None,
    product_id: UUID | None = None,
    sub_category: str | None = None,
    notes: str | None = None,
) -> StockEvent:
    stock.quantity = stock.quantity + quantity
    return StockEvent(
        stock_id=stock.id,
        type=event_type,
        quantity=quantity,
        from_location=from_location,
        to_location=to_location,
        product_id=product_id,
        sub_category=sub_category,
        notes=notes,
    )


def list_stocks(db: Session) -> list[StockOut]:
    rows = db.query(Stock).order_by(Stock.location).all()
    return [StockOut.model_validate(s) for s in rows]


def add_stock(db: Session, data: StockCreate) -> StockOut:
    location = data.location.strip()
    if db.query(Stock).filter(Stock.location == location).first():
        raise ValueError(f"Stock location '{location}' already exists")

    stock = Stock(
        location=location,
        threshold=data.threshold,
        product_id=data.product_id,
        quantity=ZERO,
    )
    db.add(stock)
    db.commit()
    db.refresh(stock)
    logger.info("Added stock location %s (%s)", stock.location, stock.id)
    return StockOut.model_validate(stock)


def delete_stock(db: Session, stock_id: UUID) -> None:
    stock = _get_stock(db, stock_id)
    if db.query(StockEvent.id).filter(StockEvent.stock_id == stock_id).first():
        raise ValueError("Cannot delete stock location that has transaction history")
    db.delete(stock)
    db.commit()
    logger.info("Deleted stock location %s", stock_id)


def load_stock(
    db: Session, stock_id: UUID, quantity: Decimal, notes: str | None = None,
) -> StockOut:
    qty = _quantity(quantity)
    stock = _get_stock(db, stock_id)
    db.add(_event(stock, StockEventType.LOAD, qty, product_id=stock.product_id, notes=notes))
    db.commit()
    db.refresh(stock)
    logger.info("Loaded %s into %s", qty, stock.location)
    return StockOut.model_validate(stock)


def dump_stock(
    db: Session,
    stock_id: UUID,
    quantity: Decimal,
    to_location: str,
    *,
    product_id: UUID | None = None,
    sub_category: str | None = None,
    notes: str | None = None,
) -> StockOut:
    """Book bags delivered from ``stock_id`` onto the stock at ``to_location``.

    The source quantity is left untouched; the destination gains the bags
    and carries the event.
    """
    qty = _quantity(quantity)
    source = _get_stock(db, stock_id)
    destination = db.query(Stock).filter(Stock.location == to_location).first()
    if not destination:
        raise ValueError(f"Stock location '{to_location}' not found")

    db.add(_event(
        destination,
        StockEventType.DUMP,
        qty,
        from_location=source.location,
        to_location=destination.location,
        product_id=product_id or source.product_id,
        sub_category=sub_category,
        notes=notes,
    ))
    db.commit()
    db.refresh(destination)
    logger.info("Dumped %s from %s to %s", qty, source.location, destination.location)
    return StockOut.model_validate(destination)


def transfer_stock(
    db: Session,
    from_stock_id: UUID,
    to_stock_id: UUID,
    quantity: Decimal,
    notes: str | None = None,
) -> tuple[StockOut, StockOut]:
    qty = _quantity(quantity)
    if from_stock_id == to_stock_id:
        raise ValueError("Source and destination locations must differ")
    source = _get_stock(db, from_stock_id)
    destination = _get_stock(db, to_stock_id)

    db.add(_event(
        source, StockEventType.TRANSFER, -qty, to_location=destination.location, notes=notes,
    ))
    db.add(_event(
        destination, StockEventType.TRANSFER, qty, from_location=source.location, notes=notes,
    ))
    db.commit()
    db.refresh(source)
    db.refresh(destination)
    logger.info("Transferred %s from %s to %s", qty, source.location, destination.location)
    return StockOut.model_validate(source), StockOut.model_validate(destination)


def stock_history(db: Session, stock_id: UUID) -> list[StockEventOut]:
    """Events at one location, newest first."""
    _get_stock(db, stock_id)
    rows = (
        db.query(StockEvent)
        .filter(StockEvent.stock_id == stock_id)
        .order_by(StockEvent.created_at.desc(), StockEvent.id)
        .all()
    )
    return [StockEventOut.model_validate(e) for e in rows]
