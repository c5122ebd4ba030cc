"""Cart engine: the operations the API and the fulfillment reconciler call.

Stock checks made here are advisory: they guarantee the cart never asks for
more than was available at the moment of the check, not that the stock will
still be there at checkout. Two concurrent calls for the same user can both
pass the check; the order compiler takes the stock for real.
"""

import json

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from checkout.cart.cart import Cart
from checkout.cart.items import AddOrUpdateCartLines, ClearCart, RemoveCartLine
from checkout.cart.planning import parse_lines
from checkout.catalogue.reader import CatalogueReader
from checkout.errors import NotFound, ProductNotFound
from checkout.pricing import to_major_units, to_minor_units
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class CartEngine:
    def __init__(self, reader: CatalogueReader | None = None) -> None:
        self.reader = reader or CatalogueReader()

    def add_or_update(self, user_id: str, lines, is_update: bool = False) -> dict:
        requested = parse_lines(lines)
        current_domain.process(
            AddOrUpdateCartLines(
                user_id=user_id,
                lines=json.dumps([{"product_id": line.product_id, "quantity": line.quantity} for line in requested]),
                is_update=is_update,
            ),
            asynchronous=False,
        )
        logger.info("cart_lines_applied", user_id=user_id, lines=len(requested), is_update=is_update)
        return self.get_by_user(user_id)

    def remove(self, user_id: str, product_id: str) -> dict:
        current_domain.process(RemoveCartLine(user_id=user_id, product_id=product_id), asynchronous=False)
        logger.info("cart_line_removed", user_id=user_id, product_id=product_id)
        return self.get_by_user(user_id)

    def clear(self, user_id: str) -> int:
        removed = current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
        logger.info("cart_cleared", user_id=user_id, lines_removed=removed)
        return removed

    def get_cart(self, user_id: str) -> Cart:
        try:
            return current_domain.repository_for(Cart).get(user_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Cart not found", user_id=user_id) from exc

    def get_by_user(self, user_id: str) -> dict:
        return self.view(self.get_cart(user_id))

    def view(self, cart: Cart) -> dict:
        """Join each line with current product details for presentation."""
        lines = []
        total = 0
        for line in cart.lines:
            product_id = str(line.product_id)
            try:
                product = self.reader.find_product(product_id)
            except ProductNotFound:
                lines.append({"product_id": product_id, "quantity": line.quantity, "available": False})
                continue

            subtotal = to_minor_units(product.price) * line.quantity
            total += subtotal
            lines.append(
                {
                    "product_id": product_id,
                    "quantity": line.quantity,
                    "available": True,
                    "name": product.name,
                    "price": product.price,
                    "product_type": product.product_type,
                    "thumbnail": product.thumbnail,
                    "subtotal": to_major_units(subtotal),
                }
            )

        return {
            "user_id": str(cart.user_id),
            "lines": lines,
            "total": to_major_units(total),
            "updated_at": cart.updated_at,
        }
