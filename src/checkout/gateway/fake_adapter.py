"""Configurable fake payment gateway for development and testing.

Simulates a hosted-checkout provider without any external calls. Sessions can
be configured to succeed or fail, every call is recorded, and webhook payloads
are signed with HMAC-SHA256 over the raw body using a shared secret, the same
shape as real providers' signing schemes.

Webhook wire format:
    {"id": "evt_...", "type": "checkout.session.completed",
     "data": {"orderId": "...", "userId": "...",
              "shippingAddress": {"street": ..., "suburb": ..., "postcode": ...,
                                  "state": ..., "country": ...}}}
"""

import hashlib
import hmac
import json
from uuid import uuid4

from checkout.errors import UnverifiedEvent
from checkout.gateway.port import (
    CheckoutSessionRequest,
    CheckoutSessionResult,
    PaymentEvent,
    PaymentGateway,
    normalize_address,
)


class FakeGatewayError(Exception):
    """Raised by FakeGateway when configured to fail."""


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    signature_header = "X-Gateway-Signature"

    def __init__(self, webhook_secret: str = "whsec_test") -> None:
        self.webhook_secret = webhook_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Provider unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Provider unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSessionResult:
        self.calls.append({"method": "create_checkout_session", "request": request})

        if not self.should_succeed:
            raise FakeGatewayError(self.failure_reason)

        session_id = f"cs_fake_{uuid4().hex[:16]}"
        return CheckoutSessionResult(
            session_id=session_id,
            url=f"https://checkout.fake.test/pay/{session_id}",
        )

    def sign(self, payload: bytes | str) -> str:
        """Signature a genuine delivery of `payload` would carry."""
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return hmac.new(self.webhook_secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()

    def construct_event(self, payload: bytes, signature: str) -> PaymentEvent:
        if not signature or not hmac.compare_digest(self.sign(payload), signature):
            raise UnverifiedEvent("Webhook signature mismatch")

        try:
            body = json.loads(payload)
        except ValueError as exc:
            raise UnverifiedEvent("Webhook payload is not valid JSON") from exc
        if not isinstance(body, dict) or "type" not in body:
            raise UnverifiedEvent("Webhook payload has no event type")

        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise UnverifiedEvent("Webhook payload data is not an object")
        return PaymentEvent(
            event_id=body.get("id"),
            type=body["type"],
            order_id=data.get("orderId"),
            user_id=data.get("userId"),
            shipping_address=normalize_address(data.get("shippingAddress")),
        )
