"""Smoke tests for the assembled storefront application.

These go through the real app object, so startup (schema creation and
seeding), the request middleware and the health endpoint are exercised too.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from app import app
from inventory.stock.catalogue import SAMPLE_PRODUCTS

HEADERS = {"X-User-Id": "user-app-001"}


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("STOREFRONT_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("STOREFRONT_SEED", "1")
    monkeypatch.delenv("STOREFRONT_LOG_DIR", raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    with TestClient(app) as client:
        yield client
    root.handlers = handlers
    root.setLevel(level)


class TestStartup:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "env": "test"}

    def test_sample_catalogue_is_seeded(self, client):
        response = client.get("/products")
        assert response.status_code == 200
        assert sorted(p["name"] for p in response.json()) == sorted(p["name"] for p in SAMPLE_PRODUCTS)


class TestRequestMiddleware:
    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-Id": "req-123"})
        assert response.headers["X-Request-Id"] == "req-123"

    def test_request_id_is_generated(self, client):
        response = client.get("/health")
        assert len(response.headers["X-Request-Id"]) == 36

    def test_error_responses_carry_request_id(self, client):
        response = client.get("/products/missing", headers={"X-Request-Id": "req-404"})
        assert response.status_code == 404
        assert response.headers["X-Request-Id"] == "req-404"


class TestShoppingRoundTrip:
    def test_browse_add_checkout_and_history(self, client):
        laptop = next(p for p in client.get("/products").json() if p["name"] == "Laptop Pro 14")

        assert client.post("/cart/items", json={"product_id": laptop["id"]}, headers=HEADERS).status_code == 200

        response = client.post("/checkout", headers=HEADERS)
        assert response.status_code == 201
        order = response.json()
        assert order["subtotal"] == "1299.00"

        assert client.get(f"/products/{laptop['id']}").json()["stock"] == laptop["stock"] - 1
        assert client.get("/cart", headers=HEADERS).json()["items"] == []
        [entry] = client.get("/orders/my", headers=HEADERS).json()
        assert entry["order_id"] == order["id"]

    def test_cart_requires_user_header(self, client):
        assert client.get("/cart").status_code == 401
