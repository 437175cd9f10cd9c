"""Shared BDD fixtures and step definitions for the cart."""

from decimal import Decimal

import pytest
from commerce.cart.cart import Cart
from commerce.catalogue.product import Product
from commerce.errors import CommerceError
from commerce.shared.money import Money
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for the error raised by the last When step."""
    return {"exc": None}


@pytest.fixture()
def products():
    return {}


@given(parsers.cfparse('an active cart in "{currency}"'), target_fixture="cart")
def active_cart(currency):
    return Cart.open(owner_id="owner-001", currency=currency)


@given(parsers.cfparse('a product "{name}" priced at {price}'))
def product_priced_at(products, name, price):
    products[name] = Product.register(name=name, price=Money.of(price))


@given(parsers.cfparse('{qty:d} units of "{name}" are in the cart'))
def units_in_cart(cart, products, qty, name):
    cart.add_item(products[name], qty, available=100)


@then(parsers.cfparse("the action fails with {error_name}"))
def action_fails_with(error, error_name):
    assert isinstance(error["exc"], CommerceError)
    assert type(error["exc"]).__name__ == error_name


@then(parsers.cfparse("the cart total is {amount}"))
def cart_total_is(cart, amount):
    assert cart.total_value.amount == Decimal(amount)
