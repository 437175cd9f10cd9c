"""Tests for the Product aggregate."""

from decimal import Decimal

import pytest
from commerce.catalogue.events import ProductActivated, ProductDeactivated, ProductPriceChanged, ProductRegistered
from commerce.catalogue.product import Product
from commerce.errors import InvalidAmount
from commerce.shared.money import Money


def _product(**overrides):
    defaults = {"name": "Widget", "price": Money.of("10.00")}
    defaults.update(overrides)
    return Product.register(**defaults)


class TestRegister:
    def test_register(self):
        product = _product(description="A small widget")
        assert product.name == "Widget"
        assert product.price.amount == Decimal("10.00")
        assert product.active is True
        assert product.created_at is not None

    def test_register_raises_event(self):
        product = _product()
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductRegistered)
        assert event.product_id == str(product.id)
        assert event.price == "10.00"
        assert event.currency == "BRL"

    def test_register_inactive(self):
        assert _product(active=False).active is False

    def test_zero_price_rejected(self):
        with pytest.raises(InvalidAmount):
            _product(price=Money.zero())


class TestPrice:
    def test_change_price(self):
        product = _product()
        product.change_price(Money.of("12.50"))
        assert product.price.amount == Decimal("12.50")

        event = product._events[-1]
        assert isinstance(event, ProductPriceChanged)
        assert event.previous_price == "10.00"
        assert event.new_price == "12.50"

    def test_change_to_zero_rejected(self):
        product = _product()
        with pytest.raises(InvalidAmount):
            product.change_price(Money.zero())
        assert product.price.amount == Decimal("10.00")


class TestActivation:
    def test_deactivate_and_activate(self):
        product = _product()
        product.deactivate()
        assert product.active is False
        assert isinstance(product._events[-1], ProductDeactivated)

        product.activate()
        assert product.active is True
        assert isinstance(product._events[-1], ProductActivated)

    def test_repeated_calls_raise_no_extra_events(self):
        product = _product()
        product.activate()
        assert len(product._events) == 1

        product.deactivate()
        product.deactivate()
        assert len(product._events) == 2
