"""Customer aggregate: the profile data the checkout pipeline needs.

Account management (credentials, OAuth, roles) lives outside this context; a
customer here is an email to send confirmations to and a default address
that successful payments keep up to date.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, String, ValueObject

from checkout.domain import checkout


@checkout.value_object(part_of="Customer")
class ProfileAddress:
    street = String(required=True, max_length=255)
    suburb = String(max_length=100)
    postcode = String(max_length=20)
    state = String(max_length=100)
    country = String(max_length=100)


@checkout.aggregate
class Customer:
    email = String(required=True, max_length=254)
    name = String(max_length=255)
    address = ValueObject(ProfileAddress)
    registered_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, email, name=None):
        now = datetime.now(UTC)
        return cls(email=email, name=name, registered_at=now, updated_at=now)

    def update_address(self, street, suburb=None, postcode=None, state=None, country=None):
        """Replace the profile address wholesale."""
        self.address = ProfileAddress(
            street=street,
            suburb=suburb,
            postcode=postcode,
            state=state,
            country=country,
        )
        self.updated_at = datetime.now(UTC)
