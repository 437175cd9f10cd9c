"""Stock adjustment — commands and handler.

Restocking, manual removals, corrections after a physical count, and
reservation hold/release. Every use case checks the product exists first
and logs the quantity before and after.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from commerce import settings
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.inventory.ledger import StockLedger

logger = structlog.get_logger(__name__)


@commerce.command(part_of="StockLedger")
class AddStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(max_length=500)


@commerce.command(part_of="StockLedger")
class RemoveStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(max_length=500)


@commerce.command(part_of="StockLedger")
class AdjustStock:
    """Set the quantity directly, e.g. after a physical count."""

    product_id = Identifier(required=True)
    new_quantity = Integer(required=True)
    reason = String(max_length=500)


@commerce.command(part_of="StockLedger")
class ReserveStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(max_length=500)


@commerce.command(part_of="StockLedger")
class ReleaseStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(max_length=500)


@commerce.command_handler(part_of=StockLedger)
class StockAdjustmentHandler:
    def _ledger(self, product_id):
        current_domain.repository_for(Product).lookup(product_id)
        return current_domain.repository_for(StockLedger).ledger_for(product_id)

    def _save(self, ledger, action, previous, reason):
        current_domain.repository_for(StockLedger).add(ledger)
        logger.info(
            f"Stock {action}",
            product_id=str(ledger.product_id),
            previous_quantity=previous,
            new_quantity=ledger.quantity,
            reason=reason,
        )
        return ledger.quantity

    @handle(AddStock)
    def add_stock(self, command):
        ledger = self._ledger(command.product_id)
        previous = ledger.quantity
        ledger.add(command.quantity, reason=command.reason)
        return self._save(ledger, "added", previous, command.reason)

    @handle(RemoveStock)
    def remove_stock(self, command):
        product = current_domain.repository_for(Product).lookup(command.product_id)
        ledger = current_domain.repository_for(StockLedger).ledger_for(command.product_id)
        previous = ledger.quantity
        ledger.remove(command.quantity, reason=command.reason, product_name=product.name)
        return self._save(ledger, "removed", previous, command.reason)

    @handle(AdjustStock)
    def adjust_stock(self, command):
        ledger = self._ledger(command.product_id)
        previous = ledger.quantity
        ledger.adjust(command.new_quantity, reason=command.reason)
        return self._save(ledger, "adjusted", previous, command.reason)

    @handle(ReserveStock)
    def reserve_stock(self, command):
        ledger = self._ledger(command.product_id)
        previous = ledger.quantity
        ledger.reserve(command.quantity, reason=command.reason)
        return self._save(ledger, "reserved", previous, command.reason)

    @handle(ReleaseStock)
    def release_stock(self, command):
        ledger = self._ledger(command.product_id)
        previous = ledger.quantity
        ledger.release(command.quantity, reason=command.reason)
        return self._save(ledger, "released", previous, command.reason)


def stock_level(product_id: str) -> dict:
    """Current quantity plus low/out-of-stock flags for one product."""
    current_domain.repository_for(Product).lookup(product_id)
    return current_domain.repository_for(StockLedger).level_for(product_id, settings.low_stock_threshold())
