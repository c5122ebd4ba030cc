"""Cart aggregate: one mutable working set of product lines per user.

The cart is keyed by the user's identifier, so a user can never own two carts.
It is created lazily on the first add and is emptied, never deleted, when a
payment completes.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer

from checkout.cart.events import CartCleared, CartLineRemoved, CartLinesUpdated
from checkout.domain import checkout
from checkout.errors import NotFound


@checkout.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@checkout.aggregate
class Cart:
    user_id = Identifier(identifier=True, required=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    def quantities(self) -> dict[str, int]:
        return {str(line.product_id): line.quantity for line in self.lines}

    def line_for(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def set_quantities(self, resulting, is_update=False):
        """Upsert every line in `resulting` ({product_id: quantity}) as already validated."""
        now = datetime.now(UTC)
        for product_id, quantity in resulting.items():
            existing = self.line_for(product_id)
            if existing:
                existing.quantity = quantity
            else:
                self.add_lines(CartLine(product_id=product_id, quantity=quantity, added_at=now))

        self.updated_at = now
        self.raise_(
            CartLinesUpdated(
                user_id=str(self.user_id),
                lines=json.dumps([{"product_id": str(pid), "quantity": qty} for pid, qty in resulting.items()]),
                is_update=is_update,
            )
        )

    def remove_line(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise NotFound("Product not found in cart", product_id=str(product_id))

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartLineRemoved(user_id=str(self.user_id), product_id=str(product_id)))

    def clear(self) -> int:
        """Remove every line; returns how many were removed (0 on an empty cart)."""
        removed = list(self.lines)
        if not removed:
            return 0

        for line in removed:
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(user_id=str(self.user_id), lines_removed=len(removed)))
        return len(removed)
