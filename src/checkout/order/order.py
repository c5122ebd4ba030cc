"""Order aggregate: the immutable, priced record compiled from a cart.

Lines carry the product name and unit price as they were at compile time;
later catalogue edits never reach an existing order. After compilation only
the status, the shipping address and their timestamps may change.

State machine:
    pending → payment_received
    pending → canceled
    pending → returned
Nothing leaves payment_received, canceled or returned within this context.

Money is stored in minor units. `total_cents` must always equal the sum of
unit_price_cents x quantity over the lines; the repository refuses to persist
an order for which that does not hold.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean.core.repository import BaseRepository
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, ValueObject

from checkout.domain import checkout
from checkout.errors import InvalidInput
from checkout.order.events import OrderCanceled, OrderPlaced, OrderReturned, PaymentReceived
from checkout.pricing import to_major_units, total_cents


class OrderStatus(Enum):
    PENDING = "pending"
    PAYMENT_RECEIVED = "payment_received"
    CANCELED = "canceled"
    RETURNED = "returned"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PAYMENT_RECEIVED,
        OrderStatus.CANCELED,
        OrderStatus.RETURNED,
    },
    OrderStatus.PAYMENT_RECEIVED: set(),
    OrderStatus.CANCELED: set(),
    OrderStatus.RETURNED: set(),
}


@checkout.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships to, as collected by the payment provider."""

    street = String(required=True, max_length=255)
    suburb = String(max_length=100)
    postcode = String(max_length=20)
    state = String(max_length=100)
    country = String(max_length=100)

    def as_dict(self) -> dict:
        return {
            "street": self.street,
            "suburb": self.suburb,
            "postcode": self.postcode,
            "state": self.state,
            "country": self.country,
        }


@checkout.entity(part_of="Order")
class OrderLine:
    position = Integer(required=True, min_value=0)
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price_cents = Integer(required=True, min_value=0)

    @property
    def unit_price(self) -> Decimal:
        return to_major_units(self.unit_price_cents)

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@checkout.aggregate
class Order:
    user_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    total_cents = Integer(required=True, min_value=0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping_address = ValueObject(ShippingAddress)
    cancellation_reason = String(max_length=500)
    from_cart = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()
    paid_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def compile(cls, user_id, priced_lines, from_cart=False):
        """Build a pending order from lines already priced in supplied order."""
        if not priced_lines:
            raise InvalidInput("Order must include at least one product")

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            total_cents=total_cents(priced_lines),
            status=OrderStatus.PENDING.value,
            from_cart=from_cart,
            created_at=now,
            updated_at=now,
        )
        for position, line in enumerate(priced_lines):
            order.add_lines(
                OrderLine(
                    position=position,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price_cents=line.unit_price_cents,
                )
            )
        order.verify_total()

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                lines=json.dumps(
                    [
                        {
                            "product_id": line.product_id,
                            "product_name": line.product_name,
                            "quantity": line.quantity,
                            "unit_price_cents": line.unit_price_cents,
                        }
                        for line in priced_lines
                    ]
                ),
                total_cents=order.total_cents,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------
    @property
    def total(self) -> Decimal:
        return to_major_units(self.total_cents)

    def ordered_lines(self) -> list:
        return sorted(self.lines, key=lambda line: line.position)

    def verify_total(self) -> None:
        expected = total_cents(self.ordered_lines())
        if self.total_cents != expected:
            raise ValidationError(
                {"total": [f"Order total {self.total_cents} does not match the sum of its lines ({expected})"]}
            )

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _transition_to(self, new_status):
        current = OrderStatus(self.status)
        if new_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {new_status.value}"]})
        self.status = new_status.value
        self.updated_at = datetime.now(UTC)

    def record_payment(self, shipping_address=None) -> bool:
        """Mark the order paid. Returns False, changing nothing, if it already is."""
        if OrderStatus(self.status) == OrderStatus.PAYMENT_RECEIVED:
            return False

        self._transition_to(OrderStatus.PAYMENT_RECEIVED)
        if shipping_address:
            self.shipping_address = ShippingAddress(**shipping_address)
        self.paid_at = self.updated_at

        self.raise_(
            PaymentReceived(
                order_id=str(self.id),
                user_id=str(self.user_id),
                total_cents=self.total_cents,
                shipping_address=json.dumps(shipping_address) if shipping_address else None,
                received_at=self.paid_at,
            )
        )
        return True

    def cancel(self, reason=None):
        self._transition_to(OrderStatus.CANCELED)
        self.cancellation_reason = reason
        self.raise_(
            OrderCanceled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                reason=reason,
                canceled_at=self.updated_at,
            )
        )

    def mark_returned(self):
        self._transition_to(OrderStatus.RETURNED)
        self.raise_(
            OrderReturned(
                order_id=str(self.id),
                user_id=str(self.user_id),
                returned_at=self.updated_at,
            )
        )


@checkout.repository(part_of=Order)
class OrderRepository(BaseRepository):
    def add(self, order):
        """Persist `order`, refusing one whose total drifted from its lines."""
        order.verify_total()
        return super().add(order)

    def for_user(self, user_id, status: OrderStatus | None = None) -> list:
        """All orders placed by `user_id`, newest first, optionally of one status."""
        query = self._dao.query.filter(user_id=str(user_id))
        if status is not None:
            query = query.filter(status=status.value)
        return query.order_by("-created_at").limit(None).all().items

    def page_for_user(self, user_id, offset: int, limit: int) -> tuple[list, int]:
        """One page of `user_id`'s orders, newest first, and the total count."""
        result = (
            self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").offset(offset).limit(limit).all()
        )
        return result.items, result.total
