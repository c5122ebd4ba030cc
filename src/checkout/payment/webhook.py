"""Inbound payment webhook handling.

Verification happens before anything is read from the delivery: an event the
gateway cannot verify raises UnverifiedEvent and nothing changes. Verified
events other than a completed checkout are acknowledged and dropped.
"""

from checkout.gateway import get_gateway
from checkout.gateway.port import CHECKOUT_COMPLETED
from checkout.payment.fulfillment import FulfillmentReconciler, Outcome
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


def handle_webhook(payload: bytes, signature: str, gateway=None, reconciler=None) -> dict:
    gateway = gateway or get_gateway()
    event = gateway.construct_event(payload, signature)

    if event.type != CHECKOUT_COMPLETED:
        logger.info("webhook_event_ignored", event_id=event.event_id, event_type=event.type)
        return {"received": True, "order_id": event.order_id, "outcome": Outcome.IGNORED.value}

    reconciler = reconciler or FulfillmentReconciler()
    result = reconciler.on_payment_completed(event)
    return {"received": True, **result}
