"""Application tests for stock adjustment commands and stock level queries."""

import pytest
from commerce import settings
from commerce.catalogue.management import RegisterProduct
from commerce.errors import InsufficientStock, InvalidQuantity, ProductNotFound
from commerce.inventory.adjustment import (
    AddStock,
    AdjustStock,
    ReleaseStock,
    RemoveStock,
    ReserveStock,
    stock_level,
)
from commerce.inventory.ledger import StockLedger
from commerce.shared.concurrency import process_with_retry
from protean import current_domain
from protean.exceptions import ExpectedVersionError


def _register_product(**overrides):
    defaults = {"name": "Widget", "price": 10.0}
    defaults.update(overrides)
    return current_domain.process(RegisterProduct(**defaults), asynchronous=False)


def _add_stock(product_id, quantity):
    return current_domain.process(AddStock(product_id=product_id, quantity=quantity), asynchronous=False)


def _quantity(product_id):
    return current_domain.repository_for(StockLedger).quantity_of(product_id)


class TestAddStockCommand:
    def test_first_add_creates_ledger(self):
        product_id = _register_product()
        assert _add_stock(product_id, 10) == 10

        ledger = current_domain.repository_for(StockLedger).get(product_id)
        assert ledger.quantity == 10

    def test_adds_accumulate(self):
        product_id = _register_product()
        _add_stock(product_id, 10)
        _add_stock(product_id, 5)
        assert _quantity(product_id) == 15

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            _add_stock("missing-product", 10)

    def test_zero_quantity_rejected(self):
        product_id = _register_product()
        with pytest.raises(InvalidQuantity):
            _add_stock(product_id, 0)


class TestRemoveStockCommand:
    def test_remove(self):
        product_id = _register_product()
        _add_stock(product_id, 10)
        current_domain.process(RemoveStock(product_id=product_id, quantity=3), asynchronous=False)
        assert _quantity(product_id) == 7

    def test_remove_too_many_leaves_ledger_untouched(self):
        product_id = _register_product(name="Gadget")
        _add_stock(product_id, 2)
        with pytest.raises(InsufficientStock) as exc:
            current_domain.process(RemoveStock(product_id=product_id, quantity=3), asynchronous=False)
        assert exc.value.product_name == "Gadget"
        assert _quantity(product_id) == 2

    def test_remove_from_never_stocked_product(self):
        product_id = _register_product()
        with pytest.raises(InsufficientStock) as exc:
            current_domain.process(RemoveStock(product_id=product_id, quantity=1), asynchronous=False)
        assert exc.value.available == 0


class TestAdjustStockCommand:
    def test_adjust(self):
        product_id = _register_product()
        _add_stock(product_id, 10)
        current_domain.process(
            AdjustStock(product_id=product_id, new_quantity=4, reason="Cycle count"),
            asynchronous=False,
        )
        assert _quantity(product_id) == 4

    def test_adjust_negative_rejected(self):
        product_id = _register_product()
        _add_stock(product_id, 10)
        with pytest.raises(InvalidQuantity):
            current_domain.process(AdjustStock(product_id=product_id, new_quantity=-2), asynchronous=False)
        assert _quantity(product_id) == 10


class TestReservationCommands:
    def test_reserve_and_release(self):
        product_id = _register_product()
        _add_stock(product_id, 10)
        current_domain.process(ReserveStock(product_id=product_id, quantity=6), asynchronous=False)
        assert _quantity(product_id) == 4

        current_domain.process(ReleaseStock(product_id=product_id, quantity=6), asynchronous=False)
        assert _quantity(product_id) == 10

    def test_reserve_beyond_quantity(self):
        product_id = _register_product()
        _add_stock(product_id, 1)
        with pytest.raises(InsufficientStock):
            current_domain.process(ReserveStock(product_id=product_id, quantity=2), asynchronous=False)


class TestStockLevel:
    def test_never_stocked_product_is_out_of_stock(self):
        product_id = _register_product()
        level = stock_level(product_id)
        assert level["quantity"] == 0
        assert level["out_of_stock"] is True
        assert level["low_stock"] is True

    def test_low_stock_uses_configured_threshold(self):
        product_id = _register_product()
        _add_stock(product_id, 5)
        assert stock_level(product_id)["low_stock"] is True

        _add_stock(product_id, 1)
        level = stock_level(product_id)
        assert level["quantity"] == 6
        assert level["low_stock"] is False
        assert level["out_of_stock"] is False

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            stock_level("missing-product")


class TestConcurrentFirstStock:
    def test_new_ledger_for_an_existing_product_ledger_is_refused(self):
        product_id = _register_product()
        _add_stock(product_id, 5)

        repo = current_domain.repository_for(StockLedger)
        duplicate = StockLedger.open(product_id)
        duplicate.add(3)
        with pytest.raises(ExpectedVersionError):
            repo.add(duplicate)

        assert _quantity(product_id) == 5

    def test_concurrent_first_restocks_are_both_kept(self, run_concurrently, held_after_first_call):
        product_id = _register_product()

        def restock():
            return process_with_retry(AddStock(product_id=product_id, quantity=5), settings.max_write_attempts())

        # Both commands have added to their own unsaved zero ledger before either saves.
        with held_after_first_call(StockLedger, "add"):
            results = run_concurrently(restock, restock)

        assert not [result for result in results if isinstance(result, Exception)]
        assert sorted(results) == [5, 10]
        assert _quantity(product_id) == 10
