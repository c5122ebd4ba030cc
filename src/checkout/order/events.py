"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from checkout.domain import checkout


@checkout.event(part_of="Order")
class OrderPlaced:
    """A cart's contents were compiled into a priced, pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, product_name, quantity, unit_price_cents}
    total_cents = Integer(required=True)
    placed_at = DateTime(required=True)


@checkout.event(part_of="Order")
class PaymentReceived:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_cents = Integer(required=True)
    shipping_address = Text()  # JSON, absent when the provider collected none
    received_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderCanceled:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(max_length=500)
    canceled_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderReturned:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    returned_at = DateTime(required=True)
