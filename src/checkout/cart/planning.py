"""Pure planning of cart mutations.

Given the current line quantities and a stock snapshot, compute the quantities
a request would leave behind, and refuse the whole request if any one of them
is invalid or exceeds stock. Nothing here touches a repository.
"""

from dataclasses import dataclass

from checkout.errors import InsufficientStock, InvalidInput


@dataclass(frozen=True)
class RequestedLine:
    product_id: str
    quantity: int


def is_positive_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def parse_lines(raw_lines) -> list[RequestedLine]:
    """Normalize `[{"product_id": ..., "quantity": ...}, ...]` into RequestedLines."""
    if not isinstance(raw_lines, (list, tuple)) or not raw_lines:
        raise InvalidInput("At least one line with a product and quantity is required")

    lines = []
    for raw in raw_lines:
        if isinstance(raw, RequestedLine):
            product_id, quantity = raw.product_id, raw.quantity
        elif isinstance(raw, dict):
            product_id, quantity = raw.get("product_id"), raw.get("quantity")
        else:
            raise InvalidInput("Each line must be an object with product_id and quantity")

        if not product_id or not isinstance(product_id, str):
            raise InvalidInput("Each line must have a product_id")
        if not is_positive_quantity(quantity):
            raise InvalidInput(f"Quantity for product {product_id} must be a positive integer")
        lines.append(RequestedLine(product_id=product_id, quantity=quantity))
    return lines


def plan_cart_lines(current, requested, snapshots, is_update) -> dict[str, int]:
    """Return {product_id: resulting_quantity} for every product touched by `requested`.

    With `is_update` the requested quantity replaces the current one; otherwise
    it is added to it. Repeating a product within one additive request adds up;
    repeating it within an update is ambiguous and rejected.
    """
    resulting: dict[str, int] = {}
    for line in requested:
        if is_update:
            if line.product_id in resulting:
                raise InvalidInput(f"Product {line.product_id} appears more than once in the update")
            resulting[line.product_id] = line.quantity
        else:
            base = resulting.get(line.product_id, current.get(line.product_id, 0))
            resulting[line.product_id] = base + line.quantity

    for product_id, quantity in resulting.items():
        snapshot = snapshots[product_id]
        if quantity > snapshot.stock:
            raise InsufficientStock(product_id, quantity, snapshot.stock, name=snapshot.name)

    return resulting
