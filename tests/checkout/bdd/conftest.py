"""Shared BDD fixtures and step definitions for the checkout flow."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from checkout.cart.engine import CartEngine
from checkout.catalogue.management import RegisterProduct
from checkout.catalogue.reader import CatalogueReader
from checkout.customer.profile import RegisterCustomer
from checkout.order.service import OrderService


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def flow():
    """Results captured between steps."""
    return {"order_id": None, "error": None, "outcome": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a registered customer "{email}"'), target_fixture="user_id")
def _(email):
    return current_domain.process(RegisterCustomer(email=email), asynchronous=False)


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def _(products, name, price, stock):
    products[name] = current_domain.process(
        RegisterProduct(name=name, price=price, stock=stock),
        asynchronous=False,
    )


@given(parsers.cfparse('the customer has {quantity:d} of "{name}" in the cart'))
def _(user_id, products, quantity, name):
    CartEngine().add_or_update(user_id, [{"product_id": products[name], "quantity": quantity}])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(flow, status):
    assert OrderService().load(flow["order_id"]).status == status


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert CatalogueReader().find_product(products[name]).stock == stock
