"""Fulfillment reconciler: reacts to a verified payment-completed event.

Deciding what to do and doing it are kept apart. `plan_fulfillment` is a pure
function of the order's status and the event; `FulfillmentReconciler` loads
the order, asks for a plan and performs its effects in order.

Marking the order paid is the only step that must succeed: it commits in its
own unit of work before anything else runs, and its failure is reported to the
provider so the delivery is retried. The profile address, the cart and the
confirmation email follow on a best-effort basis; a failure there is logged and
the delivery is still acknowledged.

Redelivery is safe. An order already `payment_received` yields an empty plan,
and the paid transition itself is re-checked inside its unit of work, so two
concurrent deliveries still clear the cart and send the email once.
"""

import json
from dataclasses import dataclass
from enum import Enum

from protean.utils.globals import current_domain

from checkout.cart.engine import CartEngine
from checkout.customer.profile import ProfileStore
from checkout.errors import InvalidInput
from checkout.gateway.port import PaymentEvent
from checkout.notifier.confirmation import OrderConfirmationNotifier
from checkout.order.order import OrderStatus
from checkout.order.payment import MarkPaymentReceived
from checkout.order.service import OrderService
from checkout.order.views import order_view
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class Effect(Enum):
    MARK_PAID = "mark_paid"
    UPDATE_PROFILE_ADDRESS = "update_profile_address"
    CLEAR_CART = "clear_cart"
    SEND_CONFIRMATION = "send_confirmation"


class Outcome(Enum):
    FULFILLED = "fulfilled"
    ALREADY_PROCESSED = "already_processed"
    IGNORED = "ignored"


@dataclass(frozen=True)
class FulfillmentPlan:
    outcome: Outcome
    effects: tuple[Effect, ...] = ()


def plan_fulfillment(status: str, event: PaymentEvent) -> FulfillmentPlan:
    current = OrderStatus(status)
    if current == OrderStatus.PAYMENT_RECEIVED:
        return FulfillmentPlan(Outcome.ALREADY_PROCESSED)
    if current != OrderStatus.PENDING:
        return FulfillmentPlan(Outcome.IGNORED)

    effects = [Effect.MARK_PAID]
    if event.shipping_address:
        effects.append(Effect.UPDATE_PROFILE_ADDRESS)
    effects += [Effect.CLEAR_CART, Effect.SEND_CONFIRMATION]
    return FulfillmentPlan(Outcome.FULFILLED, tuple(effects))


class FulfillmentReconciler:
    def __init__(self, profiles=None, notifier=None, carts=None, orders=None):
        self.profiles = profiles or ProfileStore()
        self.notifier = notifier or OrderConfirmationNotifier()
        self.carts = carts or CartEngine()
        self.orders = orders or OrderService()

    def on_payment_completed(self, event: PaymentEvent) -> dict:
        if not event.order_id:
            raise InvalidInput("Payment event carries no order id")

        order = self.orders.load(event.order_id)
        user_id = str(order.user_id)
        if event.user_id and str(event.user_id) != user_id:
            logger.error(
                "payment_event_user_mismatch",
                order_id=event.order_id,
                event_user_id=event.user_id,
                order_user_id=user_id,
            )
            raise InvalidInput("Payment event does not belong to the order's customer")

        plan = plan_fulfillment(order.status, event)
        if plan.outcome == Outcome.IGNORED:
            logger.error(
                "payment_for_closed_order",
                order_id=event.order_id,
                status=order.status,
                event_id=event.event_id,
            )
        elif plan.outcome == Outcome.ALREADY_PROCESSED:
            logger.info("payment_already_processed", order_id=event.order_id, event_id=event.event_id)

        outcome = self.execute(plan, order_id=event.order_id, user_id=user_id, event=event)
        return {"order_id": event.order_id, "outcome": outcome.value}

    def execute(self, plan: FulfillmentPlan, order_id: str, user_id: str, event: PaymentEvent) -> Outcome:
        for effect in plan.effects:
            if effect == Effect.MARK_PAID:
                if not self._mark_paid(order_id, event):
                    logger.info("payment_already_processed", order_id=order_id, event_id=event.event_id)
                    return Outcome.ALREADY_PROCESSED
            elif effect == Effect.UPDATE_PROFILE_ADDRESS:
                self._update_profile_address(user_id, event.shipping_address)
            elif effect == Effect.CLEAR_CART:
                self._clear_cart(user_id)
            elif effect == Effect.SEND_CONFIRMATION:
                self._send_confirmation(order_id, user_id)
        return plan.outcome

    def _mark_paid(self, order_id, event) -> bool:
        transitioned = current_domain.process(
            MarkPaymentReceived(
                order_id=order_id,
                shipping_address=json.dumps(event.shipping_address) if event.shipping_address else None,
            ),
            asynchronous=False,
        )
        if transitioned:
            logger.info("payment_received", order_id=order_id, event_id=event.event_id)
        return bool(transitioned)

    def _update_profile_address(self, user_id, address):
        try:
            self.profiles.update_address(user_id, address)
        except Exception:
            logger.exception("profile_address_update_failed", user_id=user_id)

    def _clear_cart(self, user_id):
        try:
            self.carts.clear(user_id)
        except Exception:
            logger.exception("cart_clear_failed", user_id=user_id)

    def _send_confirmation(self, order_id, user_id):
        try:
            email = self.profiles.email_for(user_id)
            if not email:
                logger.warning("order_confirmation_skipped", order_id=order_id, reason="no email on profile")
                return
            view = order_view(self.orders.load(order_id), self.profiles)
            self.notifier.send_order_confirmation(email, view)
        except Exception:
            logger.exception("order_confirmation_failed", order_id=order_id)
