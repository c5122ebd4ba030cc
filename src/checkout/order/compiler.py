"""Order compiler: turns (product, quantity) lines into a persisted, priced order.

Steps, in order:
    1. validate the lines (non-empty, positive integer quantities)
    2. snapshot every product's name and unit price
    3. price the lines in minor units, in the order supplied
    4. take stock for every line, atomically per product; on any shortfall
       put back what was already taken and fail
    5. persist the order as pending and return the joined view

If step 5 fails the taken stock is returned as well, so a failed compile
leaves both the catalogue and the order store as they were.
"""

import json

from protean.utils.globals import current_domain

from checkout.cart.planning import parse_lines
from checkout.catalogue.reader import CatalogueReader
from checkout.errors import InsufficientStock
from checkout.order.order import Order, OrderStatus
from checkout.order.placement import PlaceOrder
from checkout.order.service import OrderService
from checkout.order.views import order_view
from checkout.pricing import price_lines
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

SUPERSEDED_REASON = "Superseded by a newer checkout of the cart"


class OrderCompiler:
    def __init__(self, reader: CatalogueReader | None = None) -> None:
        self.reader = reader or CatalogueReader()

    def compile(self, user_id: str, lines) -> dict:
        order = self.compile_order(user_id, lines)
        return order_view(order)

    def compile_order(self, user_id: str, lines, from_cart: bool = False) -> Order:
        requested = parse_lines(lines)
        snapshots = self.reader.find_products(line.product_id for line in requested)
        priced = price_lines(requested, snapshots)

        taken = []
        try:
            for line in priced:
                if not self.reader.take_stock(line.product_id, line.quantity):
                    available = self.reader.find_product(line.product_id).stock
                    raise InsufficientStock(line.product_id, line.quantity, available, name=line.product_name)
                taken.append(line)

            order_id = current_domain.process(
                PlaceOrder(
                    user_id=user_id,
                    lines=json.dumps(
                        [
                            {
                                "product_id": line.product_id,
                                "product_name": line.product_name,
                                "quantity": line.quantity,
                                "unit_price_cents": line.unit_price_cents,
                            }
                            for line in priced
                        ]
                    ),
                    from_cart=from_cart,
                ),
                asynchronous=False,
            )
        except Exception:
            for line in reversed(taken):
                self.reader.return_stock(line.product_id, line.quantity)
            logger.warning("order_compile_aborted", user_id=user_id, stock_returned=len(taken))
            raise

        order = current_domain.repository_for(Order).get(order_id)
        logger.info("order_compiled", order_id=order_id, user_id=user_id, total=str(order.total), lines=len(priced))
        return order

    def checkout_cart(self, user_id: str, lines) -> Order:
        """Order the cart's lines, holding stock for at most one unpaid cart order.

        A pending cart order with the same lines is reused as is. Any other
        pending cart order is superseded: it is canceled and its stock returned
        before the new order takes stock.
        """
        requested = sorted((line.product_id, line.quantity) for line in parse_lines(lines))

        service = OrderService(self.reader)
        for order in current_domain.repository_for(Order).for_user(user_id, status=OrderStatus.PENDING):
            if not order.from_cart:
                continue
            if sorted((str(line.product_id), line.quantity) for line in order.lines) == requested:
                logger.info("cart_order_reused", order_id=str(order.id), user_id=user_id)
                return order
            service.cancel(str(order.id), user_id, reason=SUPERSEDED_REASON)

        return self.compile_order(user_id, lines, from_cart=True)
