"""Integration tests for the Order API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.authenticator import get_authenticator
from identity.principal import Principal, Role
from notifications.channel import get_email_channel
from ordering.api import order_router
from ordering.order.order import Order
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers
from shared.handlers import register_error_handlers

CUSTOMER = Principal(id="user-001", name="Nimal Perera", email="nimal@example.com")
OTHER = Principal(id="user-002", name="Kumari Silva", email="kumari@example.com")
ADMIN = Principal(id="admin-001", name="Shop Admin", email="admin@example.com", role=Role.ADMIN)

CUSTOMER_AUTH = {"Authorization": "Bearer tok-customer"}
OTHER_AUTH = {"Authorization": "Bearer tok-other"}
ADMIN_AUTH = {"Authorization": "Bearer tok-admin"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    register_exception_handlers(app)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture(autouse=True)
def principals():
    authenticator = get_authenticator()
    authenticator.register("tok-customer", CUSTOMER)
    authenticator.register("tok-other", OTHER)
    authenticator.register("tok-admin", ADMIN)


def _order_body(**overrides):
    body = {
        "orderItems": [
            {"product": "prod-oak", "name": "Oak Frame", "price": 10.0, "image": "oak.jpg", "quantity": 2},
            {"product": "prod-walnut", "name": "Walnut Frame", "price": 5.0, "image": "walnut.jpg", "quantity": 3},
        ],
        "shippingAddress": {"address": "12 Temple Road", "city": "Kandy", "postalCode": "20000", "country": "LK"},
        "totalPrice": 35.0,
        "isPaid": True,
        "paidAt": "2026-10-17T09:30:00Z",
        "paymentResult": {"id": "pi_123", "status": "succeeded"},
    }
    body.update(overrides)
    return body


def _create_order(client, headers=CUSTOMER_AUTH, **overrides):
    response = client.post("/orders", json=_order_body(**overrides), headers=headers)
    assert response.status_code == 201
    return response.json()["order"]


class TestCreateOrder:
    def test_returns_created_order(self, client):
        response = client.post("/orders", json=_order_body(), headers=CUSTOMER_AUTH)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        order = body["order"]
        assert order["_id"]
        assert order["user"] == "user-001"
        assert order["totalPrice"] == 35.0
        assert order["isPaid"] is True
        assert order["paidAt"] is not None
        assert order["orderStatus"] == "pending"
        assert order["deliveredAt"] is None
        assert order["shippingAddress"]["postalCode"] == "20000"
        assert order["paymentResult"] == {"id": "pi_123", "status": "succeeded"}

    def test_items_come_back_with_qty(self, client):
        order = _create_order(client)

        items = sorted(order["orderItems"], key=lambda i: i["product"])
        assert items[0] == {"product": "prod-oak", "name": "Oak Frame", "qty": 2, "image": "oak.jpg", "price": 10.0}
        assert all("quantity" not in item for item in items)

    def test_order_is_persisted(self, client):
        order = _create_order(client)

        stored = current_domain.repository_for(Order).get(order["_id"])
        assert str(stored.owner_id) == "user-001"

    def test_sends_confirmation_email(self, client):
        email = get_email_channel()

        order = _create_order(client)

        assert len(email.sent_emails) == 1
        sent = email.sent_emails[0]
        assert sent["to"] == "nimal@example.com"
        assert order["_id"] in sent["subject"]

    def test_email_failure_does_not_change_response(self, client):
        get_email_channel().configure(should_succeed=False, failure_reason="SMTP relay down")

        response = client.post("/orders", json=_order_body(), headers=CUSTOMER_AUTH)

        assert response.status_code == 201
        assert response.json()["success"] is True

    def test_email_exception_does_not_change_response(self, client):
        get_email_channel().configure(raise_on_send=ConnectionError("relay unreachable"))

        response = client.post("/orders", json=_order_body(), headers=CUSTOMER_AUTH)

        assert response.status_code == 201
        assert len(current_domain.repository_for(Order).find_all()) == 1

    def test_without_token_is_401(self, client):
        response = client.post("/orders", json=_order_body())

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert current_domain.repository_for(Order).find_all() == []

    def test_empty_items_is_400(self, client):
        response = client.post("/orders", json=_order_body(orderItems=[], totalPrice=0), headers=CUSTOMER_AUTH)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "No order items"}

    def test_missing_items_is_400(self, client):
        body = _order_body()
        del body["orderItems"]

        response = client.post("/orders", json=body, headers=CUSTOMER_AUTH)

        assert response.status_code == 400

    def test_total_mismatch_is_400(self, client):
        response = client.post("/orders", json=_order_body(totalPrice=1.0), headers=CUSTOMER_AUTH)
        assert response.status_code == 400

    def test_missing_shipping_address_is_422(self, client):
        body = _order_body()
        del body["shippingAddress"]

        response = client.post("/orders", json=body, headers=CUSTOMER_AUTH)

        assert response.status_code == 422

    def test_no_email_when_rejected(self, client):
        client.post("/orders", json=_order_body(orderItems=[], totalPrice=0), headers=CUSTOMER_AUTH)
        assert get_email_channel().sent_emails == []


class TestMyOrders:
    def test_lists_only_callers_orders(self, client):
        mine = _create_order(client)
        _create_order(client, headers=OTHER_AUTH)

        response = client.get("/orders/myorders", headers=CUSTOMER_AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [o["_id"] for o in body["orders"]] == [mine["_id"]]

    def test_empty_history(self, client):
        response = client.get("/orders/myorders", headers=CUSTOMER_AUTH)
        assert response.json() == {"success": True, "orders": []}

    def test_requires_token(self, client):
        assert client.get("/orders/myorders").status_code == 401


class TestListOrders:
    def test_admin_sees_all_orders(self, client):
        _create_order(client)
        _create_order(client, headers=OTHER_AUTH)

        response = client.get("/orders", headers=ADMIN_AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert {o["user"] for o in body["orders"]} == {"user-001", "user-002"}

    def test_customer_is_forbidden(self, client):
        assert client.get("/orders", headers=CUSTOMER_AUTH).status_code == 403


class TestUpdateOrderStatus:
    def test_admin_updates_status(self, client):
        order = _create_order(client)

        response = client.put(f"/orders/{order['_id']}/status", json={"status": "shipped"}, headers=ADMIN_AUTH)

        assert response.status_code == 200
        updated = response.json()["order"]
        assert updated["orderStatus"] == "shipped"
        assert updated["deliveredAt"] is None

    def test_delivered_sets_delivered_at(self, client):
        order = _create_order(client)

        response = client.put(f"/orders/{order['_id']}/status", json={"status": "delivered"}, headers=ADMIN_AUTH)

        assert response.json()["order"]["deliveredAt"] is not None

    def test_invalid_status_is_400(self, client):
        order = _create_order(client)

        response = client.put(f"/orders/{order['_id']}/status", json={"status": "lost"}, headers=ADMIN_AUTH)

        assert response.status_code == 400
        assert "Invalid status provided" in response.json()["message"]

    def test_unknown_order_is_404(self, client):
        response = client.put("/orders/missing-order/status", json={"status": "shipped"}, headers=ADMIN_AUTH)

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Order not found"}

    def test_customer_is_forbidden(self, client):
        order = _create_order(client)

        response = client.put(f"/orders/{order['_id']}/status", json={"status": "shipped"}, headers=CUSTOMER_AUTH)

        assert response.status_code == 403
        assert current_domain.repository_for(Order).get(order["_id"]).status == "pending"
