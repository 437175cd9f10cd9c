"""Repository for the StockLedger aggregate.

A missing ledger is a product with zero units. Callers never see ``None``:
``ledger_for`` returns an unsaved zero ledger that becomes persistent the
first time it is added back. That first save is guarded, so two units of
work opening the same product's ledger cannot both insert it.
"""

from protean.core.repository import BaseRepository
from protean.exceptions import ObjectNotFoundError

from commerce.domain import commerce
from commerce.inventory.ledger import StockLedger
from commerce.shared.concurrency import insert_once


@commerce.repository(part_of=StockLedger)
class StockLedgerRepository:
    def add(self, ledger: StockLedger) -> StockLedger:
        if ledger.state_.is_persisted:
            return BaseRepository.add(self, ledger)
        return insert_once(
            lambda item: BaseRepository.add(self, item),
            ledger,
            lambda: self._exists(ledger.product_id),
            f"Stock ledger for product {ledger.product_id}",
        )

    def _exists(self, product_id: str) -> bool:
        return bool(self._dao.query.filter(product_id=str(product_id)).all().items)

    def ledger_for(self, product_id: str) -> StockLedger:
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            return StockLedger.open(product_id)

    def quantity_of(self, product_id: str) -> int:
        return self.ledger_for(product_id).quantity

    def has_sufficient_stock(self, product_id: str, quantity: int) -> bool:
        return self.ledger_for(product_id).has_sufficient_stock(quantity)

    def level_for(self, product_id: str, low_stock_threshold: int) -> dict:
        ledger = self.ledger_for(product_id)
        return {
            "product_id": str(product_id),
            "quantity": ledger.quantity,
            "low_stock": ledger.is_low(low_stock_threshold),
            "out_of_stock": ledger.is_out_of_stock(),
            "updated_at": ledger.updated_at,
        }

    def consume(self, product_id: str, quantity: int, product_name: str | None = None, reason: str | None = None):
        """Decrement against the persisted quantity.

        The ledger is re-read here rather than passed in, and saved with its
        version guard: if another unit of work committed a change to the same
        ledger in between, saving raises ``ExpectedVersionError`` and the
        whole unit of work is rolled back.
        """
        ledger = self.ledger_for(product_id)
        ledger.remove(quantity, reason=reason, product_name=product_name)
        self.add(ledger)
        return ledger
