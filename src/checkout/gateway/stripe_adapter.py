"""Stripe payment gateway adapter.

Creates hosted Checkout Sessions and verifies webhook deliveries with the
stripe-python SDK. Verification is `stripe.Webhook.construct_event`; the
verified payload is then read as plain JSON so the shipping address can be
taken from whichever field the account's API version populates.
"""

import json

import stripe

from checkout.errors import UnverifiedEvent
from checkout.gateway.port import (
    CheckoutSessionRequest,
    CheckoutSessionResult,
    PaymentEvent,
    PaymentGateway,
    normalize_address,
)
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_SHIPPING_COUNTRIES = ["AU"]


def _object(value) -> dict:
    return value if isinstance(value, dict) else {}


def _shipping_details(session: dict) -> dict | None:
    for candidate in (
        session.get("shipping_details"),
        session.get("shipping"),
        _object(session.get("collected_information")).get("shipping_details"),
    ):
        if isinstance(candidate, dict) and isinstance(candidate.get("address"), dict):
            return candidate
    return None


def _to_address(details: dict | None) -> dict | None:
    if not details:
        return None
    address = details["address"]
    return normalize_address(
        {
            "street": address.get("line1"),
            "suburb": address.get("city"),
            "postcode": address.get("postal_code"),
            "state": address.get("state"),
            "country": address.get("country"),
        }
    )


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    signature_header = "Stripe-Signature"

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSessionResult:
        params = {
            "api_key": self.api_key,
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": request.currency,
                        "product_data": {"name": item.name},
                        "unit_amount": item.unit_amount,
                    },
                    "quantity": item.quantity,
                }
                for item in request.line_items
            ],
            "metadata": dict(request.metadata),
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "shipping_address_collection": {"allowed_countries": ALLOWED_SHIPPING_COUNTRIES},
        }
        if request.customer_email:
            params["customer_email"] = request.customer_email

        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as exc:
            logger.error("stripe_session_failed", error=str(exc), error_type=type(exc).__name__)
            raise

        return CheckoutSessionResult(session_id=session.id, url=session.url)

    def construct_event(self, payload: bytes, signature: str) -> PaymentEvent:
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            logger.warning("webhook_signature_invalid", error=str(exc))
            raise UnverifiedEvent("Stripe signature verification failed") from exc
        except ValueError as exc:
            raise UnverifiedEvent("Stripe webhook payload is not valid JSON") from exc

        body = _object(json.loads(payload))
        session = _object(_object(body.get("data")).get("object"))
        metadata = _object(session.get("metadata"))

        return PaymentEvent(
            event_id=body.get("id"),
            type=body.get("type", ""),
            order_id=metadata.get("order_id"),
            user_id=metadata.get("user_id"),
            shipping_address=_to_address(_shipping_details(session)),
        )
