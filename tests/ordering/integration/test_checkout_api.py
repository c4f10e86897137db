"""Integration tests for Checkout and Order history endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from inventory.stock import catalogue, ledger
from ordering.api.routes import cart_router, checkout_router, order_router
from shared.api import register_exception_handlers

HEADERS = {"X-User-Id": "user-checkout-001"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return TestClient(app)


def _add_items(client, product_id, quantity=1):
    for _ in range(quantity):
        response = client.post("/cart/items", json={"product_id": product_id}, headers=HEADERS)
        assert response.status_code == 200


class TestCheckoutEndpoint:
    def test_checkout_creates_order(self, client, make_product):
        product = make_product(price="20.00", stock=5)
        _add_items(client, product.id, 3)

        response = client.post("/checkout", headers=HEADERS)
        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == HEADERS["X-User-Id"]
        assert body["subtotal"] == "60.00"
        assert body["tax"] == "4.20"
        assert body["total"] == "64.20"
        assert body["lines"] == [
            {"product_id": product.id, "quantity": 3, "unit_price": "20.00", "line_total": "60.00"}
        ]
        assert ledger.get_stock(product.id) == 2
        assert client.get("/cart", headers=HEADERS).json()["items"] == []

    def test_checkout_empty_cart(self, client):
        response = client.post("/checkout", headers=HEADERS)
        assert response.status_code == 400
        assert response.json()["code"] == "empty_cart"
        assert response.json()["message"] == "Cart is empty"

    def test_checkout_insufficient_stock(self, client, make_product):
        product = make_product(name="Laptop Pro 14", stock=2)
        _add_items(client, product.id, 2)
        ledger.decrement_stock(product.id, 1)

        response = client.post("/checkout", headers=HEADERS)
        assert response.status_code == 409
        assert response.json()["message"] == 'Not enough stock for "Laptop Pro 14".'
        assert len(client.get("/cart", headers=HEADERS).json()["items"]) == 1

    def test_checkout_deleted_product(self, client, make_product):
        product = make_product()
        _add_items(client, product.id)
        catalogue.delete_product(product.id)

        response = client.post("/checkout", headers=HEADERS)
        assert response.status_code == 404
        assert response.json()["code"] == "product_not_found"

    def test_storage_failure_is_retryable(self, client, make_product, monkeypatch):
        product = make_product()
        _add_items(client, product.id)

        def _unavailable(user_id):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        monkeypatch.setattr("ordering.api.routes.checkout", _unavailable)

        response = client.post("/checkout", headers=HEADERS)
        assert response.status_code == 503
        assert response.json() == {
            "code": "storage_unavailable",
            "message": "Storage is temporarily unavailable",
            "retryable": True,
        }

    def test_checkout_requires_user(self, client):
        response = client.post("/checkout")
        assert response.status_code == 401


class TestOrderHistoryEndpoint:
    def test_history_newest_first(self, client, make_product):
        product = make_product(stock=5)
        _add_items(client, product.id)
        first = client.post("/checkout", headers=HEADERS).json()
        _add_items(client, product.id, 2)
        second = client.post("/checkout", headers=HEADERS).json()

        response = client.get("/orders/my", headers=HEADERS)
        assert response.status_code == 200
        assert [entry["order_id"] for entry in response.json()] == [second["id"], first["id"]]

    def test_history_shows_product_names(self, client, make_product):
        product = make_product(name="Wireless Headphones", category="Audio")
        _add_items(client, product.id)
        client.post("/checkout", headers=HEADERS)

        [entry] = client.get("/orders/my", headers=HEADERS).json()
        assert entry["lines"][0]["name"] == "Wireless Headphones"
        assert entry["lines"][0]["category"] == "Audio"

    def test_history_after_product_deleted(self, client, make_product):
        product = make_product()
        _add_items(client, product.id)
        client.post("/checkout", headers=HEADERS)
        catalogue.delete_product(product.id)

        [entry] = client.get("/orders/my", headers=HEADERS).json()
        assert entry["lines"][0]["name"] == "Product removed"
        assert entry["lines"][0]["category"] == ""

    def test_empty_history(self, client):
        response = client.get("/orders/my", headers=HEADERS)
        assert response.status_code == 200
        assert response.json() == []
