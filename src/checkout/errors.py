"""Error taxonomy of the checkout pipeline.

Each error carries the HTTP status it maps to. Validation and not-found errors
are shown to the caller as-is; provider and internal errors expose only a
generic message, the detail stays in the server logs.
"""


class CheckoutError(Exception):
    status_code = 500
    public_message: str | None = None

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def public_detail(self) -> str:
        return self.public_message or self.message


class NotFound(CheckoutError):
    """A cart, cart line, order or customer does not exist."""

    status_code = 404


class ProductNotFound(NotFound):
    """A referenced product no longer resolves in the catalogue."""


class InvalidInput(CheckoutError):
    """Malformed or missing fields, non-positive quantities, disallowed transitions."""

    status_code = 400


class InsufficientStock(CheckoutError):
    status_code = 409

    def __init__(self, product_id: str, requested: int, available: int, name: str | None = None) -> None:
        label = name or product_id
        super().__init__(
            f"Insufficient stock for {label}. Requested: {requested}, available: {available}",
            product_id=product_id,
            requested=requested,
            available=available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class PaymentProviderError(CheckoutError):
    """The payment provider refused or failed to create a checkout session."""

    status_code = 502
    public_message = "Payment provider is unavailable, please try again"


class UnverifiedEvent(CheckoutError):
    """An inbound webhook failed signature verification or could not be parsed."""

    status_code = 401
    public_message = "Invalid webhook signature"


class InternalError(CheckoutError):
    status_code = 500
    public_message = "Internal server error"
