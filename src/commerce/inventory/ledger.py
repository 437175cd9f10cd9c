"""StockLedger aggregate (CQRS) — the available quantity of one product.

Quantity never goes below zero. A product that never received stock has no
ledger at all; the repository hands out an unsaved zero ledger for it.

Movements:
    add / release          quantity += n
    remove / reserve       quantity -= n, only when n <= quantity
    adjust                 quantity  = n, for corrections after a count
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer

from commerce.domain import commerce
from commerce.errors import InsufficientStock, InvalidQuantity
from commerce.inventory.events import StockUpdated


class StockMovement(Enum):
    ADDED = "Added"
    REMOVED = "Removed"
    RESERVED = "Reserved"
    RELEASED = "Released"
    ADJUSTED = "Adjusted"


def _require_positive(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(quantity)


@commerce.aggregate
class StockLedger:
    product_id = Identifier(identifier=True, required=True)
    quantity = Integer(default=0, min_value=0)
    updated_at = DateTime()

    @classmethod
    def open(cls, product_id: str):
        """A zero ledger for a product that has never been stocked."""
        return cls(product_id=str(product_id), quantity=0, updated_at=datetime.now(UTC))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def has_sufficient_stock(self, quantity: int) -> bool:
        return self.quantity >= quantity

    def is_low(self, threshold: int) -> bool:
        return self.quantity <= threshold

    def is_out_of_stock(self) -> bool:
        return self.quantity == 0

    # -------------------------------------------------------------------
    # Movements
    # -------------------------------------------------------------------
    def _record(self, movement: StockMovement, quantity: int, new_quantity: int, reason: str | None) -> None:
        previous = self.quantity
        now = datetime.now(UTC)
        self.quantity = new_quantity
        self.updated_at = now
        self.raise_(
            StockUpdated(
                product_id=str(self.product_id),
                movement=movement.value,
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=new_quantity,
                reason=reason,
                occurred_at=now,
            )
        )

    def add(self, quantity: int, reason: str | None = None) -> None:
        _require_positive(quantity)
        self._record(StockMovement.ADDED, quantity, self.quantity + quantity, reason)

    def remove(self, quantity: int, reason: str | None = None, product_name: str | None = None) -> None:
        """Take units out. Fails without touching the ledger when short."""
        _require_positive(quantity)
        if quantity > self.quantity:
            raise InsufficientStock(
                available=self.quantity,
                requested=quantity,
                product_id=str(self.product_id),
                product_name=product_name,
            )
        self._record(StockMovement.REMOVED, quantity, self.quantity - quantity, reason)

    def reserve(self, quantity: int, reason: str | None = None) -> None:
        _require_positive(quantity)
        if quantity > self.quantity:
            raise InsufficientStock(available=self.quantity, requested=quantity, product_id=str(self.product_id))
        self._record(StockMovement.RESERVED, quantity, self.quantity - quantity, reason)

    def release(self, quantity: int, reason: str | None = None) -> None:
        _require_positive(quantity)
        self._record(StockMovement.RELEASED, quantity, self.quantity + quantity, reason)

    def adjust(self, new_quantity: int, reason: str | None = None) -> None:
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int) or new_quantity < 0:
            raise InvalidQuantity(new_quantity, minimum=0)
        self._record(StockMovement.ADJUSTED, abs(new_quantity - self.quantity), new_quantity, reason)
