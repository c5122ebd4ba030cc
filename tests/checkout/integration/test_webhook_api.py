"""Integration tests for the payment webhook endpoint via TestClient."""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from checkout.api import order_router, product_router, register_error_handlers, webhook_router
from checkout.gateway.port import CHECKOUT_COMPLETED


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(product_router)
    app.include_router(webhook_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def placed(client, register_customer, register_product):
    user_id = register_customer()
    product_id = register_product(stock=10)
    response = client.post(
        "/orders",
        json={"lines": [{"product_id": product_id, "quantity": 1}]},
        headers={"X-User-Id": user_id},
    )
    return {"user_id": user_id, "order_id": response.json()["order"]["order_id"]}


_ADDRESS = {"street": "1 Lygon St", "suburb": "Carlton", "postcode": "3053"}


def _post(client, gateway, order_id, user_id, event_type=CHECKOUT_COMPLETED, signature=None, address=_ADDRESS):
    payload = json.dumps(
        {
            "id": "evt_api_001",
            "type": event_type,
            "data": {
                "orderId": order_id,
                "userId": user_id,
                "shippingAddress": address,
            },
        }
    ).encode()
    return client.post(
        "/webhooks/payment",
        content=payload,
        headers={
            "Content-Type": "application/json",
            gateway.signature_header: signature if signature is not None else gateway.sign(payload),
        },
    )


def _status(client, placed):
    return client.get(f"/orders/{placed['order_id']}", headers={"X-User-Id": placed["user_id"]}).json()["status"]


class TestPaymentWebhook:
    def test_completed_payment(self, client, gateway, mailbox, placed):
        response = _post(client, gateway, placed["order_id"], placed["user_id"])

        assert response.status_code == 200
        assert response.json() == {"received": True, "order_id": placed["order_id"], "outcome": "fulfilled"}
        assert _status(client, placed) == "payment_received"
        assert len(mailbox.sent_emails) == 1

    def test_redelivery_is_acknowledged(self, client, gateway, mailbox, placed):
        _post(client, gateway, placed["order_id"], placed["user_id"])
        response = _post(client, gateway, placed["order_id"], placed["user_id"])

        assert response.status_code == 200
        assert response.json()["outcome"] == "already_processed"
        assert len(mailbox.sent_emails) == 1

    def test_invalid_signature(self, client, gateway, placed):
        response = _post(client, gateway, placed["order_id"], placed["user_id"], signature="forged")

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid webhook signature"}
        assert _status(client, placed) == "pending"

    def test_unknown_order_is_an_error_for_the_provider(self, client, gateway, placed):
        response = _post(client, gateway, "missing-order", placed["user_id"])
        assert response.status_code == 404

    def test_other_event_types(self, client, gateway, placed):
        response = _post(client, gateway, placed["order_id"], placed["user_id"], event_type="payment_intent.created")

        assert response.status_code == 200
        assert response.json()["outcome"] == "ignored"
        assert _status(client, placed) == "pending"

    def test_malformed_shipping_address_still_settles_payment(self, client, gateway, mailbox, placed):
        response = _post(client, gateway, placed["order_id"], placed["user_id"], address="1 Lygon St")

        assert response.status_code == 200
        assert response.json()["outcome"] == "fulfilled"
        order = client.get(f"/orders/{placed['order_id']}", headers={"X-User-Id": placed["user_id"]}).json()
        assert order["status"] == "payment_received"
        assert order["shipping_address"] is None
