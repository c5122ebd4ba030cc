"""Order placement: command and handler."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order
from checkout.pricing import PricedLine


@checkout.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, product_name, quantity, unit_price_cents}
    from_cart = Boolean(default=False)


@checkout.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        priced_lines = [PricedLine(**line) for line in json.loads(command.lines)]
        order = Order.compile(user_id=command.user_id, priced_lines=priced_lines, from_cart=command.from_cart)
        current_domain.repository_for(Order).add(order)
        return str(order.id)
