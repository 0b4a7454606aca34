"""API tests through the FastAPI TestClient."""
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient

from ledgerbook.app.models.registry import Account, Customer


def _sale(client: TestClient, customer_id: uuid.UUID, qty: int, price: int, d: str) -> dict:
    resp = client.post("/api/v1/sales", json={
        "customer_id": str(customer_id),
        "quantity": qty,
        "price_per_unit": price,
        "sub_category": "OPC 53",
        "date": d,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def _seed_ledger(client: TestClient, customer: Customer, account: Account) -> None:
    _sale(client, customer.id, 10, 100, "2024-01-05")
    resp = client.post("/api/v1/payments/customer", json={
        "customer_id": str(customer.id),
        "account_id": str(account.id),
        "amount": 400,
        "method": "Cash",
        "date": "2024-01-20",
    })
    assert resp.status_code == 201, resp.text
    _sale(client, customer.id, 6, 100, "2024-02-02")


def test_health(client: TestClient) -> None:
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ── Customers ────────────────────────────────────────────────────────────


class TestCustomerEndpoints:
    def test_create_list_update_delete(self, client: TestClient) -> None:
        resp = client.post("/api/v1/customers", json={"name": "Ravi Traders", "category": "Dealer"})
        assert resp.status_code == 201
        customer_id = resp.json()["id"]

        resp = client.get("/api/v1/customers")
        assert [c["name"] for c in resp.json()] == ["Ravi Traders"]

        resp = client.patch(f"/api/v1/customers/{customer_id}", json={"phone": "12345"})
        assert resp.status_code == 200
        assert resp.json()["phone"] == "12345"

        resp = client.delete(f"/api/v1/customers/{customer_id}")
        assert resp.status_code == 204
        assert client.get("/api/v1/customers").json() == []

    def test_blank_name_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/v1/customers", json={"name": "   "})
        assert resp.status_code == 422

    def test_update_missing_is_404(self, client: TestClient) -> None:
        resp = client.patch(f"/api/v1/customers/{uuid.uuid4()}", json={"name": "x"})
        assert resp.status_code == 404


# ── Statement ────────────────────────────────────────────────────────────


class TestStatementEndpoints:
    def test_statement_json(
        self, client: TestClient, customer: Customer, cash_account: Account,
    ) -> None:
        _seed_ledger(client, customer, cash_account)
        resp = client.get(f"/api/v1/customers/{customer.id}/statement")
        assert resp.status_code == 200
        body = resp.json()
        assert body["customer_name"] == "Ravi Traders"
        assert [g["month_key"] for g in body["groups"]] == ["2024-01", "2024-02"]
        assert Decimal(body["net_balance"]) == Decimal("1200")
        assert body["net_balance_sign"] == "Dr"

    def test_statement_range(
        self, client: TestClient, customer: Customer, cash_account: Account,
    ) -> None:
        _seed_ledger(client, customer, cash_account)
        resp = client.get(
            f"/api/v1/customers/{customer.id}/statement",
            params={"from_date": "2024-02-01", "to_date": "2024-02-29"},
        )
        body = resp.json()
        assert len(body["groups"]) == 1
        assert Decimal(body["net_balance"]) == Decimal("600")

    def test_inverted_range_is_400(self, client: TestClient, customer: Customer) -> None:
        resp = client.get(
            f"/api/v1/customers/{customer.id}/statement",
            params={"from_date": "2024-03-01", "to_date": "2024-02-01"},
        )
        assert resp.status_code == 400

    def test_unknown_customer_is_404(self, client: TestClient) -> None:
        resp = client.get(f"/api/v1/customers/{uuid.uuid4()}/statement")
        assert resp.status_code == 404

    def test_statement_exports(
        self, client: TestClient, customer: Customer, cash_account: Account,
    ) -> None:
        _seed_ledger(client, customer, cash_account)
        resp = client.get(f"/api/v1/customers/{customer.id}/statement/export/pdf")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.content[:5] == b"%PDF-"

        resp = client.get(f"/api/v1/customers/{customer.id}/statement/export/excel")
        assert resp.status_code == 200
        assert "spreadsheetml" in resp.headers["content-type"]
        assert resp.content[:2] == b"PK"


# ── Payments & accounts ──────────────────────────────────────────────────


class TestPaymentEndpoints:
    def test_payment_unknown_customer_is_404(
        self, client: TestClient, cash_account: Account,
    ) -> None:
        resp = client.post("/api/v1/payments/customer", json={
            "customer_id": str(uuid.uuid4()),
            "account_id": str(cash_account.id),
            "amount": 10,
        })
        assert resp.status_code == 404

    def test_negative_amount_is_422(self, client: TestClient, customer: Customer) -> None:
        resp = client.post("/api/v1/payments/discount", json={
            "customer_id": str(customer.id),
            "amount": -5,
        })
        assert resp.status_code == 422

    def test_discount(self, client: TestClient, customer: Customer) -> None:
        resp = client.post("/api/v1/payments/discount", json={
            "customer_id": str(customer.id),
            "amount": 50,
        })
        assert resp.status_code == 201
        assert Decimal(resp.json()["amount"]) == Decimal("-50")

    def test_purchase(self, client: TestClient) -> None:
        resp = client.post("/api/v1/purchases", json={
            "quantity": 10,
            "price_per_unit": 300,
            "date": "2024-01-02",
        })
        assert resp.status_code == 201
        assert Decimal(resp.json()["total_amount"]) == Decimal("3000")


class TestSaleAndPurchaseEdits:
    def test_edit_and_delete_sale(self, client: TestClient, customer: Customer) -> None:
        sale = _sale(client, customer.id, 10, 100, "2024-01-05")

        resp = client.patch(f"/api/v1/sales/{sale['id']}", json={"price_per_unit": 120})
        assert resp.status_code == 200, resp.text
        assert Decimal(resp.json()["total_amount"]) == Decimal("1200")
        balance = client.get("/api/v1/customers").json()[0]["balance"]
        assert Decimal(balance) == Decimal("1200")

        resp = client.delete(f"/api/v1/sales/{sale['id']}")
        assert resp.status_code == 204
        balance = client.get("/api/v1/customers").json()[0]["balance"]
        assert Decimal(balance) == Decimal("0")

    def test_fractional_bags_is_400(self, client: TestClient, customer: Customer) -> None:
        resp = client.post("/api/v1/sales", json={
            "customer_id": str(customer.id),
            "quantity": 2.5,
            "price_per_unit": 100,
        })
        assert resp.status_code == 400

    def test_missing_sale_is_404(self, client: TestClient) -> None:
        assert client.patch(f"/api/v1/sales/{uuid.uuid4()}", json={"quantity": 1}).status_code == 404
        assert client.delete(f"/api/v1/sales/{uuid.uuid4()}").status_code == 404

    def test_edit_and_delete_purchase(self, client: TestClient) -> None:
        purchase = client.post("/api/v1/purchases", json={
            "quantity": 10,
            "price_per_unit": 300,
            "date": "2024-01-02",
        }).json()

        resp = client.patch(f"/api/v1/purchases/{purchase['id']}", json={"quantity": 12})
        assert resp.status_code == 200
        assert Decimal(resp.json()["total_amount"]) == Decimal("3600")

        resp = client.patch(f"/api/v1/purchases/{purchase['id']}", json={"price_per_unit": 0})
        assert resp.status_code == 422

        assert client.delete(f"/api/v1/purchases/{purchase['id']}").status_code == 204
        assert client.delete(f"/api/v1/purchases/{purchase['id']}").status_code == 404


class TestAccountEndpoints:
    def test_account_lifecycle(self, client: TestClient) -> None:
        resp = client.post("/api/v1/accounts", json={"name": "Cash", "opening_balance": 1000})
        assert resp.status_code == 201
        cash_id = resp.json()["id"]
        bank_id = client.post("/api/v1/accounts", json={"name": "Bank"}).json()["id"]

        resp = client.post(f"/api/v1/accounts/{cash_id}/add-funds", json={"amount": 500})
        assert Decimal(resp.json()["account_balance"]) == Decimal("1500")

        resp = client.post(f"/api/v1/accounts/{cash_id}/remove-funds", json={"amount": 200})
        assert Decimal(resp.json()["account_balance"]) == Decimal("1300")

        resp = client.post(
            f"/api/v1/accounts/{cash_id}/expenses",
            json={"amount": 100, "description": "Diesel"},
        )
        assert resp.status_code == 201
        assert Decimal(resp.json()["account_balance"]) == Decimal("1200")

        resp = client.post("/api/v1/accounts/transfer", json={
            "from_account_id": cash_id,
            "to_account_id": bank_id,
            "amount": 700,
        })
        assert resp.status_code == 201
        assert Decimal(resp.json()["transfer_in"]["account_balance"]) == Decimal("700")

        balances = {a["name"]: Decimal(a["balance"]) for a in client.get("/api/v1/accounts").json()}
        assert balances == {"Bank": Decimal("700"), "Cash": Decimal("500")}

    def test_duplicate_account_is_400(self, client: TestClient, cash_account: Account) -> None:
        resp = client.post("/api/v1/accounts", json={"name": "Cash"})
        assert resp.status_code == 400

    def test_transfer_same_account_is_400(self, client: TestClient, cash_account: Account) -> None:
        resp = client.post("/api/v1/accounts/transfer", json={
            "from_account_id": str(cash_account.id),
            "to_account_id": str(cash_account.id),
            "amount": 10,
        })
        assert resp.status_code == 400

    def test_expense_without_description_is_400(
        self, client: TestClient, cash_account: Account,
    ) -> None:
        resp = client.post(f"/api/v1/accounts/{cash_account.id}/expenses", json={"amount": 10})
        assert resp.status_code == 400

    def test_edit_expense(self, client: TestClient, cash_account: Account) -> None:
        expense = client.post(
            f"/api/v1/accounts/{cash_account.id}/expenses",
            json={"amount": 100, "description": "Diesel"},
        ).json()

        resp = client.patch(f"/api/v1/accounts/expenses/{expense['id']}", json={"amount": 80})
        assert resp.status_code == 200, resp.text
        assert Decimal(resp.json()["amount"]) == Decimal("-80")
        assert Decimal(resp.json()["account_balance"]) == Decimal("-80")

        resp = client.patch(f"/api/v1/accounts/expenses/{uuid.uuid4()}", json={"amount": 80})
        assert resp.status_code == 404


# ── Reports ──────────────────────────────────────────────────────────────

Q1 = {"from_date": "2024-01-01", "to_date": "2024-03-31"}


class TestReportEndpoints:
    def test_item_reports(
        self, client: TestClient, customer: Customer, cash_account: Account,
    ) -> None:
        _seed_ledger(client, customer, cash_account)
        rows = client.get("/api/v1/reports/item-by-party", params=Q1).json()
        assert rows == [{
            "party": "Ravi Traders",
            "product": "OPC 53",
            "quantity": 16,
            "amount": rows[0]["amount"],
            "unit": "BAG",
        }]
        assert Decimal(rows[0]["amount"]) == Decimal("1600")

        rows = client.get("/api/v1/reports/item-sale-summary", params=Q1).json()
        assert [(r["product"], r["quantity"]) for r in rows] == [("OPC 53", 16)]

    def test_summaries(
        self, client: TestClient, customer: Customer, cash_account: Account,
    ) -> None:
        _seed_ledger(client, customer, cash_account)

        rows = client.get("/api/v1/reports/monthly-business-summary", params=Q1).json()
        assert [r["month"] for r in rows] == ["Jan 2024", "Feb 2024"]
        assert Decimal(rows[0]["collections"]) == Decimal("400")

        rows = client.get("/api/v1/reports/customer-wise-summary", params=Q1).json()
        assert Decimal(rows[0]["balance"]) == Decimal("1200")

        rows = client.get("/api/v1/reports/account-balance-summary", params=Q1).json()
        assert [(r["account"], Decimal(r["balance"])) for r in rows] == [("Cash", Decimal("400"))]

        rows = client.get("/api/v1/reports/transactions", params=Q1).json()
        assert [r["type"] for r in rows] == ["sale", "payment", "sale"]

    def test_profit_loss(self, client: TestClient, customer: Customer) -> None:
        _sale(client, customer.id, 10, 420, "2024-01-05")
        client.post("/api/v1/purchases", json={
            "quantity": 20, "price_per_unit": 380, "original_price": 360, "date": "2024-01-02",
        })
        body = client.get("/api/v1/reports/profit-loss", params=Q1).json()
        assert Decimal(body["avg_selling_price"]) == Decimal("420")
        assert Decimal(body["avg_cost_price"]) == Decimal("360")
        assert Decimal(body["total_profit"]) == Decimal("600")

    def test_customer_activity(self, client: TestClient, customer: Customer) -> None:
        _sale(client, customer.id, 1, 100, date.today().isoformat())
        rows = client.get("/api/v1/reports/customer-activity", params={"category": "all"}).json()
        assert rows[0]["is_active"] is True
        assert rows[0]["days_since_last_transaction"] == 0

        rows = client.get("/api/v1/reports/customer-activity", params={"category": "Retail"}).json()
        assert rows == []

    def test_inverted_range_is_400(self, client: TestClient) -> None:
        resp = client.get(
            "/api/v1/reports/transactions",
            params={"from_date": "2024-03-01", "to_date": "2024-01-01"},
        )
        assert resp.status_code == 400

    def test_exports(
        self, client: TestClient, customer: Customer, cash_account: Account,
    ) -> None:
        _seed_ledger(client, customer, cash_account)
        for report in (
            "item-by-party",
            "monthly-business-summary",
            "customer-activity",
            "profit-loss",
        ):
            resp = client.get(f"/api/v1/reports/{report}/export/pdf", params=Q1)
            assert resp.status_code == 200, report
            assert resp.content[:5] == b"%PDF-"

            resp = client.get(f"/api/v1/reports/{report}/export/excel", params=Q1)
            assert resp.status_code == 200, report
            assert resp.content[:2] == b"PK"

    def test_unknown_report_export_is_404(self, client: TestClient) -> None:
        resp = client.get("/api/v1/reports/balance-sheet/export/pdf")
        assert resp.status_code == 404
