"""Order payment: command and handler.

The handler re-reads the order inside its own unit of work, so two deliveries
racing past the reconciler's status check still transition the order once.
"""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order


@checkout.command(part_of="Order")
class MarkPaymentReceived:
    order_id = Identifier(required=True)
    shipping_address = Text()  # JSON: {street, suburb, postcode, state, country}


@checkout.command_handler(part_of=Order)
class MarkPaymentReceivedHandler:
    @handle(MarkPaymentReceived)
    def mark_payment_received(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        shipping_address = json.loads(command.shipping_address) if command.shipping_address else None
        transitioned = order.record_payment(shipping_address=shipping_address)
        if transitioned:
            repo.add(order)
        return transitioned
