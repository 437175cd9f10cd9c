"""Shared BDD fixtures and step definitions for orders."""

import pytest
from commerce.errors import CommerceError
from commerce.order.order import Order, OrderLine
from commerce.shared.money import Money
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for the error raised by the last When step."""
    return {"exc": None}


@given(parsers.cfparse('an order for {qty:d} units of "{name}" at {price}'), target_fixture="order")
def placed_order(qty, name, price):
    return Order.place(
        owner_id="owner-001",
        cart_id="cart-001",
        lines=[OrderLine.snapshot("prod-001", name, Money.of(price), qty)],
        shipping_address="Rua das Flores, 123",
    )


@then(parsers.cfparse("the action fails with {error_name}"))
def action_fails_with(error, error_name):
    assert isinstance(error["exc"], CommerceError)
    assert type(error["exc"]).__name__ == error_name
