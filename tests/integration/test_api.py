"""Integration tests for the Commerce API endpoints via TestClient."""

import pytest
from commerce.api import (
    admin_router,
    cart_router,
    checkout_router,
    order_router,
    product_router,
    register_commerce_exception_handlers,
    stock_router,
)
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

ALICE = {"X-Owner-Id": "owner-alice"}
BOB = {"X-Owner-Id": "owner-bob"}


@pytest.fixture()
def client():
    app = FastAPI()
    for router in (product_router, stock_router, cart_router, checkout_router, order_router, admin_router):
        app.include_router(router)
    register_exception_handlers(app)
    register_commerce_exception_handlers(app)
    return TestClient(app)


def _product(client, name="Widget", price=10.0, stock=10):
    response = client.post("/products", json={"name": name, "price": price})
    assert response.status_code == 201
    product_id = response.json()["product_id"]
    if stock:
        response = client.post(f"/stock/{product_id}/add", json={"quantity": stock})
        assert response.status_code == 200
    return product_id


def _add_item(client, product_id, quantity=1, headers=ALICE):
    return client.post("/cart/items", json={"product_id": product_id, "quantity": quantity}, headers=headers)


def _checkout(client, headers=ALICE):
    return client.post("/checkout", json={"shipping_address": "Rua das Flores, 123"}, headers=headers)


class TestProductEndpoints:
    def test_register_and_get(self, client):
        product_id = _product(client, stock=0)
        response = client.get(f"/products/{product_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Widget"
        assert body["price"] == {"amount": "10.00", "currency": "BRL"}
        assert body["active"] is True

    def test_unknown_product_is_404(self, client):
        response = client.get("/products/missing-product")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_deactivate(self, client):
        product_id = _product(client, stock=0)
        assert client.put(f"/products/{product_id}/deactivate").status_code == 200
        assert client.get(f"/products/{product_id}").json()["active"] is False


class TestStockEndpoints:
    def test_stock_level(self, client):
        product_id = _product(client, stock=10)
        body = client.get(f"/stock/{product_id}").json()
        assert body["quantity"] == 10
        assert body["low_stock"] is False
        assert body["out_of_stock"] is False

    def test_remove_too_many_is_422(self, client):
        product_id = _product(client, stock=2)
        response = client.post(f"/stock/{product_id}/remove", json={"quantity": 3})
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["category"] == "insufficient_stock"
        assert error["available"] == 2
        assert error["requested"] == 3

    def test_adjust(self, client):
        product_id = _product(client, stock=10)
        response = client.put(f"/stock/{product_id}", json={"new_quantity": 0, "reason": "Count"})
        assert response.status_code == 200
        assert response.json()["out_of_stock"] is True

    def test_zero_quantity_is_400(self, client):
        product_id = _product(client, stock=1)
        response = client.post(f"/stock/{product_id}/add", json={"quantity": 0})
        assert response.status_code == 400
        assert response.json()["error"]["category"] == "invalid_argument"


class TestCartEndpoints:
    def test_get_cart_creates_one(self, client):
        response = client.get("/cart", headers=ALICE)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "Active"
        assert body["lines"] == []
        assert body["total_value"] == {"amount": "0.00", "currency": "BRL"}

    def test_add_update_remove(self, client):
        product_id = _product(client)
        response = _add_item(client, product_id, 2)
        assert response.status_code == 201
        line_id = response.json()["lines"][0]["id"]

        response = client.put(f"/cart/items/{line_id}", json={"quantity": 5}, headers=ALICE)
        assert response.status_code == 200
        assert response.json()["total_value"]["amount"] == "50.00"

        response = client.delete(f"/cart/items/{line_id}", headers=ALICE)
        assert response.status_code == 200
        assert response.json()["lines"] == []

    def test_foreign_line_is_409(self, client):
        product_id = _product(client)
        line_id = _add_item(client, product_id, 1).json()["lines"][0]["id"]

        response = client.delete(f"/cart/items/{line_id}", headers=BOB)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "LINE_OWNERSHIP_MISMATCH"

    def test_missing_owner_header_is_rejected(self, client):
        assert client.get("/cart").status_code == 422

    def test_clear(self, client):
        _add_item(client, _product(client), 2)
        response = client.delete("/cart/items", headers=ALICE)
        assert response.status_code == 200
        assert response.json()["total_quantity"] == 0


class TestCheckoutAndOrderEndpoints:
    def test_checkout(self, client):
        product_id = _product(client, stock=5)
        _add_item(client, product_id, 2)

        response = _checkout(client)
        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "Created"
        assert order["total"] == {"amount": "20.00", "currency": "BRL"}
        assert order["item_count"] == 2
        assert client.get(f"/stock/{product_id}").json()["quantity"] == 3

    def test_checkout_empty_cart_is_409(self, client):
        client.get("/cart", headers=ALICE)
        response = _checkout(client)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "EMPTY_CART"

    def test_checkout_without_cart_is_404(self, client):
        assert _checkout(client).status_code == 404

    def test_owner_sees_only_own_orders(self, client):
        product_id = _product(client)
        _add_item(client, product_id, 1)
        order_id = _checkout(client).json()["id"]

        assert [o["id"] for o in client.get("/orders", headers=ALICE).json()] == [order_id]
        assert client.get("/orders", headers=BOB).json() == []
        assert client.get(f"/orders/{order_id}", headers=BOB).status_code == 404

    def test_lifecycle(self, client):
        _add_item(client, _product(client), 1)
        order_id = _checkout(client).json()["id"]

        assert client.put(f"/orders/{order_id}/pay", headers=ALICE).json()["status"] == "Paid"
        assert client.put(f"/admin/orders/{order_id}/ship").json()["status"] == "Shipped"
        assert client.put(f"/admin/orders/{order_id}/deliver").json()["status"] == "Delivered"

        response = client.put(f"/orders/{order_id}/cancel", headers=ALICE)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ILLEGAL_STATE_TRANSITION"

    def test_cancel_with_reason(self, client):
        _add_item(client, _product(client), 1)
        order_id = _checkout(client).json()["id"]

        response = client.put(f"/orders/{order_id}/cancel", json={"reason": "Too slow"}, headers=ALICE)
        assert response.status_code == 200
        assert response.json()["status"] == "Canceled"
        assert response.json()["cancellation_reason"] == "Too slow"

    def test_admin_lists_by_status(self, client):
        _add_item(client, _product(client), 1)
        order_id = _checkout(client).json()["id"]

        assert [o["id"] for o in client.get("/admin/orders", params={"status": "Created"}).json()] == [order_id]
        assert client.get("/admin/orders", params={"status": "Paid"}).json() == []
