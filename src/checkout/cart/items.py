"""Cart line management: commands and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Text
from protean.utils.globals import current_domain

from checkout.cart.cart import Cart
from checkout.cart.planning import parse_lines, plan_cart_lines
from checkout.catalogue.reader import CatalogueReader
from checkout.domain import checkout
from checkout.errors import NotFound


@checkout.command(part_of="Cart")
class AddOrUpdateCartLines:
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, quantity}
    is_update = Boolean(default=False)


@checkout.command(part_of="Cart")
class RemoveCartLine:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@checkout.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@checkout.command_handler(part_of=Cart)
class ManageCartLinesHandler:
    @handle(AddOrUpdateCartLines)
    def add_or_update_lines(self, command):
        requested = parse_lines(json.loads(command.lines))

        # Every product must resolve and every resulting quantity must fit in
        # stock before the first line is touched.
        snapshots = CatalogueReader().find_products(line.product_id for line in requested)

        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(command.user_id)
        except ObjectNotFoundError:
            cart = Cart.create(user_id=command.user_id)

        resulting = plan_cart_lines(cart.quantities(), requested, snapshots, bool(command.is_update))
        cart.set_quantities(resulting, is_update=bool(command.is_update))
        repo.add(cart)

    @handle(RemoveCartLine)
    def remove_line(self, command):
        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(command.user_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Cart not found", user_id=command.user_id) from exc

        cart.remove_line(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(command.user_id)
        except ObjectNotFoundError:
            return 0

        removed = cart.clear()
        if removed:
            repo.add(cart)
        return removed
