"""Domain events for the Cart aggregate."""

from protean.fields import Boolean, Identifier, Integer, Text

from checkout.domain import checkout


@checkout.event(part_of="Cart")
class CartLinesUpdated:
    """One or more cart lines were added, merged or set to an absolute quantity."""

    __version__ = 1

    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, quantity} after the change
    is_update = Boolean(default=False)


@checkout.event(part_of="Cart")
class CartLineRemoved:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@checkout.event(part_of="Cart")
class CartCleared:
    """All lines were removed from the cart. The cart itself is kept."""

    __version__ = 1

    user_id = Identifier(required=True)
    lines_removed = Integer(required=True)
