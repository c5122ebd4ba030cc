"""Customer profile: commands, handler and the profile store used by fulfillment."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from checkout.customer.customer import Customer
from checkout.domain import checkout
from checkout.errors import NotFound


@checkout.command(part_of="Customer")
class RegisterCustomer:
    email = String(required=True, max_length=254)
    name = String(max_length=255)


@checkout.command(part_of="Customer")
class UpdateCustomerAddress:
    customer_id = Identifier(required=True)
    street = String(required=True, max_length=255)
    suburb = String(max_length=100)
    postcode = String(max_length=20)
    state = String(max_length=100)
    country = String(max_length=100)


@checkout.command_handler(part_of=Customer)
class ManageCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(email=command.email, name=command.name)
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)

    @handle(UpdateCustomerAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.update_address(
            street=command.street,
            suburb=command.suburb,
            postcode=command.postcode,
            state=command.state,
            country=command.country,
        )
        repo.add(customer)


class ProfileStore:
    """Narrow read/write access to customer profiles."""

    def get(self, user_id: str) -> Customer:
        try:
            return current_domain.repository_for(Customer).get(user_id)
        except ObjectNotFoundError as exc:
            raise NotFound(f"Customer {user_id} not found", user_id=user_id) from exc

    def email_for(self, user_id: str) -> str | None:
        """Return the customer's email, or None when no profile exists."""
        try:
            return self.get(user_id).email
        except NotFound:
            return None

    def update_address(self, user_id: str, address: dict) -> None:
        try:
            current_domain.process(
                UpdateCustomerAddress(customer_id=user_id, **address),
                asynchronous=False,
            )
        except ObjectNotFoundError as exc:
            raise NotFound(f"Customer {user_id} not found", user_id=user_id) from exc
