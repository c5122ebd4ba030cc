"""Checkout bounded context: carts, priced orders, payment hand-off and fulfillment.

Owns the pipeline that turns a mutable per-user cart into an immutable priced
order, hands the order to an externally hosted payment session, and reconciles
the asynchronous payment callback. The product catalogue, customer profiles and
outbound notifications are modeled here only as far as the pipeline reads them.
"""

from protean.domain import Domain

from checkout.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
checkout = Domain(name="checkout")
