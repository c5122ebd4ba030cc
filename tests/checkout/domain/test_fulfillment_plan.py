"""Tests for the pure fulfillment planner."""

from checkout.gateway.port import CHECKOUT_COMPLETED, PaymentEvent
from checkout.order.order import OrderStatus
from checkout.payment.fulfillment import Effect, Outcome, plan_fulfillment


def _event(shipping_address=None):
    return PaymentEvent(
        event_id="evt_001",
        type=CHECKOUT_COMPLETED,
        order_id="ord-001",
        user_id="user-001",
        shipping_address=shipping_address,
    )


class TestPlanFulfillment:
    def test_pending_order_with_address(self):
        plan = plan_fulfillment(OrderStatus.PENDING.value, _event({"street": "1 Lygon St"}))

        assert plan.outcome == Outcome.FULFILLED
        assert plan.effects == (
            Effect.MARK_PAID,
            Effect.UPDATE_PROFILE_ADDRESS,
            Effect.CLEAR_CART,
            Effect.SEND_CONFIRMATION,
        )

    def test_pending_order_without_address_skips_profile_update(self):
        plan = plan_fulfillment(OrderStatus.PENDING.value, _event())
        assert Effect.UPDATE_PROFILE_ADDRESS not in plan.effects
        assert plan.effects[0] == Effect.MARK_PAID

    def test_paid_order_is_already_processed(self):
        plan = plan_fulfillment(OrderStatus.PAYMENT_RECEIVED.value, _event({"street": "1 Lygon St"}))
        assert plan.outcome == Outcome.ALREADY_PROCESSED
        assert plan.effects == ()

    def test_closed_orders_are_ignored(self):
        for status in (OrderStatus.CANCELED, OrderStatus.RETURNED):
            plan = plan_fulfillment(status.value, _event())
            assert plan.outcome == Outcome.IGNORED
            assert plan.effects == ()
