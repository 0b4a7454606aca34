"""Tests for products, stock locations and stock movements."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from ledgerbook.app.models.registry import Customer, Product, StockEvent, StockEventType
from ledgerbook.app.schemas.inventory import ProductCreate, StockCreate
from ledgerbook.app.services.inventory import (
    add_stock,
    create_product,
    delete_product,
    delete_stock,
    dump_stock,
    list_products,
    list_stocks,
    load_stock,
    stock_history,
    transfer_stock,
)
from ledgerbook.app.services.payments import record_purchase, record_sale


# ═══════════════════════════════════════════════════════════════════════════════
#  Products
# ═══════════════════════════════════════════════════════════════════════════════


class TestProducts:
    def test_create_and_list(self, db: Session) -> None:
        create_product(db, ProductCreate(name="PPC", category="Cement"))
        out = create_product(db, ProductCreate(name="  Binding Wire "))
        assert out.name == "Binding Wire"
        assert out.category == "Other"
        assert [p.name for p in list_products(db)] == ["Binding Wire", "PPC"]

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="Name must not be empty"):
            ProductCreate(name="   ")

    def test_delete_unused(self, db: Session, product: Product) -> None:
        delete_product(db, product.id)
        assert list_products(db) == []

    def test_delete_in_use(self, db: Session, customer: Customer, product: Product) -> None:
        record_sale(
            db,
            customer_id=customer.id,
            product_id=product.id,
            quantity=Decimal("1"),
            price_per_unit=Decimal("380"),
        )
        with pytest.raises(ValueError, match="Cannot delete product"):
            delete_product(db, product.id)

    def test_delete_used_by_purchase(self, db: Session, product: Product) -> None:
        record_purchase(
            db, product_id=product.id, quantity=Decimal("5"), price_per_unit=Decimal("300"),
        )
        with pytest.raises(ValueError, match="Cannot delete product"):
            delete_product(db, product.id)

    def test_delete_missing(self, db: Session) -> None:
        with pytest.raises(ValueError, match="Product not found"):
            delete_product(db, uuid.uuid4())


# ═══════════════════════════════════════════════════════════════════════════════
#  Stock locations
# ═══════════════════════════════════════════════════════════════════════════════


def _location(db: Session, name: str, product: Product | None = None):
    return add_stock(
        db, StockCreate(location=name, product_id=product.id if product else None),
    )


class TestStockLocations:
    def test_add_starts_empty(self, db: Session, product: Product) -> None:
        out = _location(db, " Godown ", product)
        assert out.location == "Godown"
        assert out.quantity == Decimal("0")
        assert out.threshold == Decimal("100")
        assert out.product_id == product.id

    def test_duplicate_location_rejected(self, db: Session) -> None:
        _location(db, "Godown")
        with pytest.raises(ValueError, match="already exists"):
            _location(db, "Godown")

    def test_listed_by_location(self, db: Session) -> None:
        _location(db, "Shop")
        _location(db, "Godown")
        assert [s.location for s in list_stocks(db)] == ["Godown", "Shop"]

    def test_delete_empty_location(self, db: Session) -> None:
        stock = _location(db, "Godown")
        delete_stock(db, stock.id)
        assert list_stocks(db) == []

    def test_delete_with_history_rejected(self, db: Session) -> None:
        stock = _location(db, "Godown")
        load_stock(db, stock.id, Decimal("10"))
        with pytest.raises(ValueError, match="transaction history"):
            delete_stock(db, stock.id)

    def test_missing_location(self, db: Session) -> None:
        with pytest.raises(ValueError, match="Stock location not found"):
            load_stock(db, uuid.uuid4(), Decimal("1"))


# ═══════════════════════════════════════════════════════════════════════════════
#  Movements
# ═══════════════════════════════════════════════════════════════════════════════


class TestStockMovements:
    def test_load_adds_bags(self, db: Session, product: Product) -> None:
        stock = _location(db, "Godown", product)
        load_stock(db, stock.id, Decimal("200"), notes="Rake arrival")
        out = load_stock(db, stock.id, Decimal("50"))
        assert out.quantity == Decimal("250")

        event = db.query(StockEvent).filter(StockEvent.notes == "Rake arrival").one()
        assert event.type == StockEventType.LOAD
        assert event.product_id == product.id

    def test_load_rejects_non_positive(self, db: Session) -> None:
        stock = _location(db, "Godown")
        with pytest.raises(ValueError, match="Quantity must be greater than 0"):
            load_stock(db, stock.id, Decimal("0"))

    def test_dump_books_bags_on_destination(self, db: Session, product: Product) -> None:
        godown = _location(db, "Godown", product)
        shop = _location(db, "Shop")
        load_stock(db, godown.id, Decimal("100"))

        out = dump_stock(
            db, godown.id, Decimal("30"), "Shop", sub_category="OPC 53", notes="Truck 7",
        )
        assert out.id == shop.id
        assert out.quantity == Decimal("30")
        assert {s.location: s.quantity for s in list_stocks(db)} == {
            "Godown": Decimal("100"),
            "Shop": Decimal("30"),
        }

        event = stock_history(db, shop.id)[0]
        assert event.type == StockEventType.DUMP
        assert event.from_location == "Godown"
        assert event.to_location == "Shop"
        assert event.product_id == product.id
        assert event.sub_category == "OPC 53"

    def test_dump_to_unknown_location(self, db: Session) -> None:
        godown = _location(db, "Godown")
        with pytest.raises(ValueError, match="Stock location 'Depot' not found"):
            dump_stock(db, godown.id, Decimal("5"), "Depot")

    def test_transfer_moves_bags(self, db: Session) -> None:
        godown = _location(db, "Godown")
        shop = _location(db, "Shop")
        load_stock(db, godown.id, Decimal("100"))

        source, destination = transfer_stock(db, godown.id, shop.id, Decimal("40"))
        assert source.quantity == Decimal("60")
        assert destination.quantity == Decimal("40")

        out_event = stock_history(db, godown.id)[0]
        assert out_event.type == StockEventType.TRANSFER
        assert out_event.quantity == Decimal("-40")
        assert out_event.to_location == "Shop"

        in_event = stock_history(db, shop.id)[0]
        assert in_event.quantity == Decimal("40")
        assert in_event.from_location == "Godown"

    def test_transfer_to_same_location_rejected(self, db: Session) -> None:
        godown = _location(db, "Godown")
        with pytest.raises(ValueError, match="must differ"):
            transfer_stock(db, godown.id, godown.id, Decimal("1"))

    def test_history_newest_first(self, db: Session) -> None:
        godown = _location(db, "Godown")
        shop = _location(db, "Shop")
        load_stock(db, godown.id, Decimal("100"))
        db.query(StockEvent).update({StockEvent.created_at: datetime(2024, 1, 1, tzinfo=timezone.utc)})
        db.commit()
        transfer_stock(db, godown.id, shop.id, Decimal("10"))

        assert [e.type for e in stock_history(db, godown.id)] == [
            StockEventType.TRANSFER,
            StockEventType.LOAD,
        ]
        assert stock_history(db, shop.id)[0].type == StockEventType.TRANSFER


# ═══════════════════════════════════════════════════════════════════════════════
#  Endpoints
# ═══════════════════════════════════════════════════════════════════════════════


class TestProductEndpoints:
    def test_lifecycle(self, client: TestClient) -> None:
        resp = client.post("/api/v1/products", json={"name": "PPC", "category": "Cement"})
        assert resp.status_code == 201
        product_id = resp.json()["id"]

        assert [p["name"] for p in client.get("/api/v1/products").json()] == ["PPC"]

        resp = client.delete(f"/api/v1/products/{product_id}")
        assert resp.status_code == 204
        assert client.get("/api/v1/products").json() == []

    def test_blank_name_is_422(self, client: TestClient) -> None:
        assert client.post("/api/v1/products", json={"name": " "}).status_code == 422

    def test_sale_against_new_product(self, client: TestClient, customer: Customer) -> None:
        product_id = client.post("/api/v1/products", json={"name": "PPC"}).json()["id"]
        resp = client.post("/api/v1/sales", json={
            "customer_id": str(customer.id),
            "product_id": product_id,
            "quantity": 5,
            "price_per_unit": 350,
            "date": "2024-01-05",
        })
        assert resp.status_code == 201, resp.text

        resp = client.delete(f"/api/v1/products/{product_id}")
        assert resp.status_code == 400

    def test_delete_missing_is_404(self, client: TestClient) -> None:
        assert client.delete(f"/api/v1/products/{uuid.uuid4()}").status_code == 404


class TestStockEndpoints:
    def test_movements(self, client: TestClient) -> None:
        resp = client.post("/api/v1/stocks", json={"location": "Godown", "threshold": 50})
        assert resp.status_code == 201
        godown_id = resp.json()["id"]
        shop_id = client.post("/api/v1/stocks", json={"location": "Shop"}).json()["id"]

        resp = client.post(f"/api/v1/stocks/{godown_id}/load", json={"quantity": 120})
        assert resp.status_code == 201
        assert Decimal(resp.json()["quantity"]) == Decimal("120")

        resp = client.post(f"/api/v1/stocks/{godown_id}/dump", json={
            "quantity": 20,
            "to_location": "Shop",
        })
        assert resp.status_code == 201
        assert resp.json()["id"] == shop_id

        resp = client.post("/api/v1/stocks/transfer", json={
            "from_stock_id": godown_id,
            "to_stock_id": shop_id,
            "quantity": 30,
        })
        assert resp.status_code == 201
        body = resp.json()
        assert Decimal(body["source"]["quantity"]) == Decimal("90")
        assert Decimal(body["destination"]["quantity"]) == Decimal("50")

        history = client.get(f"/api/v1/stocks/{shop_id}/history").json()
        assert sorted(e["type"] for e in history) == ["dump", "transfer"]

        resp = client.delete(f"/api/v1/stocks/{godown_id}")
        assert resp.status_code == 400

    def test_duplicate_location_is_400(self, client: TestClient) -> None:
        client.post("/api/v1/stocks", json={"location": "Godown"})
        assert client.post("/api/v1/stocks", json={"location": "Godown"}).status_code == 400

    def test_zero_quantity_is_422(self, client: TestClient) -> None:
        stock_id = client.post("/api/v1/stocks", json={"location": "Godown"}).json()["id"]
        resp = client.post(f"/api/v1/stocks/{stock_id}/load", json={"quantity": 0})
        assert resp.status_code == 422

    def test_unknown_location_is_404(self, client: TestClient) -> None:
        resp = client.get(f"/api/v1/stocks/{uuid.uuid4()}/history")
        assert resp.status_code == 404
