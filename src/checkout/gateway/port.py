"""Payment gateway port (abstract interface).

Defines the contract every payment provider adapter implements: create a
hosted checkout session, and turn a signed webhook delivery into a verified
PaymentEvent. Swapping FakeGateway (dev/test) for StripeGateway (production)
changes nothing in the pipeline.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

CHECKOUT_COMPLETED = "checkout.session.completed"

ADDRESS_FIELDS = ("street", "suburb", "postcode", "state", "country")


@dataclass(frozen=True)
class SessionLineItem:
    name: str
    unit_amount: int  # minor units
    quantity: int


@dataclass(frozen=True)
class CheckoutSessionRequest:
    line_items: tuple[SessionLineItem, ...]
    success_url: str
    cancel_url: str
    customer_email: str | None
    metadata: dict = field(default_factory=dict)
    currency: str = "aud"


@dataclass(frozen=True)
class CheckoutSessionResult:
    session_id: str
    url: str


@dataclass(frozen=True)
class PaymentEvent:
    """A verified, provider-neutral webhook event."""

    event_id: str | None
    type: str
    order_id: str | None
    user_id: str | None
    shipping_address: dict | None = None


def _address_field(value) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return value if isinstance(value, str) else None


def normalize_address(raw) -> dict | None:
    """Keep only the address fields orders and profiles store; None without a street.

    Anything that is not an object, and any field that is not text or a number,
    is treated as absent.
    """
    if not isinstance(raw, dict):
        return None
    address = {name: _address_field(raw.get(name)) for name in ADDRESS_FIELDS}
    if not address["street"]:
        return None
    return address


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    signature_header: str = "X-Gateway-Signature"

    @abstractmethod
    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSessionResult:
        """Create a hosted checkout session for one order."""
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> PaymentEvent:
        """Verify `signature` over the raw `payload` and parse it.

        Raises UnverifiedEvent when the signature does not match or the payload
        cannot be parsed.
        """
        ...
