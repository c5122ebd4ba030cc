"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations, selected by
the PAYMENT_GATEWAY environment variable:
- "fake" (default): FakeGateway for development and testing
- "stripe": StripeGateway, configured from STRIPE_SECRET_KEY / STRIPE_WEBHOOK_SECRET
"""

import os

from checkout.gateway.fake_adapter import FakeGateway
from checkout.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def _build_gateway() -> PaymentGateway:
    name = os.environ.get("PAYMENT_GATEWAY", "fake").lower()
    if name == "fake":
        return FakeGateway(webhook_secret=os.environ.get("FAKE_WEBHOOK_SECRET", "whsec_test"))
    if name == "stripe":
        from checkout.gateway.stripe_adapter import StripeGateway

        api_key = os.environ.get("STRIPE_SECRET_KEY")
        webhook_secret = os.environ.get("STRIPE_WEBHOOK_SECRET")
        if not api_key or not webhook_secret:
            raise ValueError("STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET must be set for the stripe gateway")
        return StripeGateway(api_key=api_key, webhook_secret=webhook_secret)
    raise ValueError(f"Unknown payment gateway: {name}")


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
