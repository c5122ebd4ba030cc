"""Checkout session bridge: hands a pending order to the payment provider.

Creating a session changes nothing locally: the order stays `pending` whether
the provider call succeeds or fails, so a fresh session can always be requested
for it later.
"""

import os

from checkout.errors import InvalidInput, PaymentProviderError
from checkout.gateway import get_gateway
from checkout.gateway.port import CheckoutSessionRequest, SessionLineItem
from checkout.order.order import OrderStatus
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

SUCCESS_PATH = "/order/success?session_id={CHECKOUT_SESSION_ID}"
CANCEL_PATH = "/cart"


def frontend_url() -> str:
    return os.environ.get("FRONTEND_URL", "http://localhost:3000").rstrip("/")


def checkout_currency() -> str:
    return os.environ.get("CHECKOUT_CURRENCY", "aud").lower()


class CheckoutSessionBridge:
    def __init__(self, gateway=None):
        self._gateway = gateway

    @property
    def gateway(self):
        return self._gateway or get_gateway()

    def build_request(self, order, customer_email: str | None) -> CheckoutSessionRequest:
        base_url = frontend_url()
        return CheckoutSessionRequest(
            line_items=tuple(
                SessionLineItem(
                    name=line.product_name,
                    unit_amount=line.unit_price_cents,
                    quantity=line.quantity,
                )
                for line in order.ordered_lines()
            ),
            success_url=f"{base_url}{SUCCESS_PATH}",
            cancel_url=f"{base_url}{CANCEL_PATH}",
            customer_email=customer_email,
            metadata={"order_id": str(order.id), "user_id": str(order.user_id)},
            currency=checkout_currency(),
        )

    def create_session(self, order, customer_email: str | None) -> dict:
        """Open a hosted checkout session for a pending order.

        Returns {"session_id", "redirect_url"}. Any provider failure surfaces as
        PaymentProviderError; the provider's own message is only logged.
        """
        if OrderStatus(order.status) != OrderStatus.PENDING:
            raise InvalidInput(f"Checkout is only possible for pending orders, order is {order.status}")

        request = self.build_request(order, customer_email)
        try:
            result = self.gateway.create_checkout_session(request)
        except Exception as exc:
            logger.error(
                "checkout_session_failed",
                order_id=str(order.id),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise PaymentProviderError("Error creating checkout session", order_id=str(order.id)) from exc

        logger.info("checkout_session_created", order_id=str(order.id), session_id=result.session_id)
        return {"session_id": result.session_id, "redirect_url": result.url}
