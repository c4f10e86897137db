"""Integration tests for Product API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from inventory.api.routes import product_router
from inventory.stock import ledger
from inventory.stock.product import MAX_STOCK
from shared.api import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(product_router)
    register_exception_handlers(app)
    return TestClient(app)


def _add_product(client, name="Desk Lamp", price="24.50", stock=4):
    """Helper: POST /products and return the product body."""
    response = client.post("/products", json={"name": name, "price": price, "stock": stock, "category": "Home"})
    assert response.status_code == 201
    return response.json()


class TestProductEndpoints:
    def test_add_product(self, client):
        body = _add_product(client)
        assert body["name"] == "Desk Lamp"
        assert body["price"] == "24.50"
        assert body["stock"] == 4
        assert ledger.get_stock(body["id"]) == 4

    def test_add_product_rejects_negative_stock(self, client):
        response = client.post("/products", json={"name": "Broken", "price": "1.00", "stock": -1})
        assert response.status_code == 422

    def test_list_products(self, client):
        _add_product(client, name="B Product")
        _add_product(client, name="A Product")

        response = client.get("/products")
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["A Product", "B Product"]

    def test_get_product(self, client):
        product_id = _add_product(client)["id"]

        response = client.get(f"/products/{product_id}")
        assert response.status_code == 200
        assert response.json()["id"] == product_id

    def test_get_unknown_product(self, client):
        response = client.get("/products/missing")
        assert response.status_code == 404
        assert response.json()["code"] == "product_not_found"
        assert response.json()["message"] == "Product not found"

    def test_delete_product(self, client):
        product_id = _add_product(client)["id"]

        response = client.delete(f"/products/{product_id}")
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").status_code == 404

    def test_restock(self, client):
        product_id = _add_product(client, stock=1)["id"]

        response = client.post(f"/products/{product_id}/restock", json={"quantity": 5})
        assert response.status_code == 200
        assert response.json() == {"product_id": product_id, "stock": 6}

    def test_restock_requires_positive_quantity(self, client):
        product_id = _add_product(client)["id"]

        response = client.post(f"/products/{product_id}/restock", json={"quantity": 0})
        assert response.status_code == 422


class TestStorageLimits:
    def test_add_product_rejects_stock_beyond_column_range(self, client):
        response = client.post("/products", json={"name": "Bulk", "price": "1.00", "stock": 10**20})
        assert response.status_code == 422

    def test_add_product_accepts_largest_stock(self, client):
        body = _add_product(client, stock=MAX_STOCK)
        assert body["stock"] == MAX_STOCK

    def test_add_product_rejects_price_beyond_column_range(self, client):
        response = client.post("/products", json={"name": "Yacht", "price": "99999999.00", "stock": 1})
        assert response.status_code == 422

    def test_restock_rejects_quantity_beyond_column_range(self, client):
        product_id = _add_product(client)["id"]

        response = client.post(f"/products/{product_id}/restock", json={"quantity": 10**20})
        assert response.status_code == 422
        assert ledger.get_stock(product_id) == 4

    def test_restock_past_largest_stock(self, client):
        product_id = _add_product(client, stock=MAX_STOCK - 1)["id"]

        response = client.post(f"/products/{product_id}/restock", json={"quantity": 2})
        assert response.status_code == 422
        assert response.json()["code"] == "stock_limit_exceeded"
        assert response.json()["limit"] == MAX_STOCK
        assert ledger.get_stock(product_id) == MAX_STOCK - 1
