"""Joined, presentation-ready views of orders."""

from checkout.customer.profile import ProfileStore


def order_view(order, profiles: ProfileStore | None = None) -> dict:
    """Order joined with the owner's email; lines in the order they were compiled."""
    profiles = profiles or ProfileStore()
    return {
        "order_id": str(order.id),
        "user_id": str(order.user_id),
        "user_email": profiles.email_for(str(order.user_id)),
        "status": order.status,
        "lines": [
            {
                "product_id": str(line.product_id),
                "product_name": line.product_name,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "line_total": line.unit_price * line.quantity,
            }
            for line in order.ordered_lines()
        ],
        "total": order.total,
        "shipping_address": order.shipping_address.as_dict() if order.shipping_address else None,
        "created_at": order.created_at,
        "paid_at": order.paid_at,
    }
