import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from checkout.catalogue.management import RegisterProduct
from checkout.customer.profile import RegisterCustomer
from checkout.gateway import reset_gateway, set_gateway
from checkout.gateway.fake_adapter import FakeGateway
from checkout.notifier import reset_email_channel, set_email_channel
from checkout.notifier.fake_email import FakeEmailAdapter


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def gateway():
    fake = FakeGateway(webhook_secret="whsec_test")
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture(autouse=True)
def mailbox():
    fake = FakeEmailAdapter()
    set_email_channel(fake)
    yield fake
    reset_email_channel()


@pytest.fixture()
def register_product():
    def _register(name="Blue Train", price=12.50, stock=10, **overrides):
        return current_domain.process(
            RegisterProduct(name=name, price=price, stock=stock, **overrides),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def register_customer():
    def _register(email="coltrane@example.com", name="John Coltrane"):
        return current_domain.process(RegisterCustomer(email=email, name=name), asynchronous=False)

    return _register
