"""Checkout API package."""

from checkout.api.errors import register_error_handlers
from checkout.api.routes import (
    cart_router,
    customer_router,
    order_router,
    product_router,
    webhook_router,
)

__all__ = [
    "cart_router",
    "order_router",
    "product_router",
    "customer_router",
    "webhook_router",
    "register_error_handlers",
]
