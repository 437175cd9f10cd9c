"""Cart aggregate (CQRS) — the owner's working basket before checkout.

An owner has at most one Active cart. Each line captures the product price
at the moment the line is created and keeps it; later price changes in the
catalogue do not reach existing lines. Totals are never edited directly:
every mutation ends in ``_recalculate_totals``.

Stock is checked per product against the quantity the caller passes in,
never against other lines of the same cart.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from commerce.cart.events import (
    CartCleared,
    CartClosed,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
    CartOpened,
)
from commerce.domain import commerce
from commerce.errors import (
    CartNotActive,
    CurrencyMismatch,
    EmptyCart,
    InsufficientStock,
    InvalidQuantity,
    LineNotFound,
    ProductInactive,
)
from commerce.shared.money import Money, sum_money


class CartStatus(Enum):
    ACTIVE = "Active"
    CLOSED = "Closed"


def _require_positive(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantity(quantity)


@commerce.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = ValueObject(Money, required=True)
    subtotal = ValueObject(Money, required=True)
    added_at = DateTime()

    @classmethod
    def snapshot(cls, product_id, unit_price: Money, quantity: int):
        return cls(
            product_id=str(product_id),
            quantity=quantity,
            unit_price=unit_price,
            subtotal=unit_price.multiply(quantity),
            added_at=datetime.now(UTC),
        )

    def change_quantity(self, quantity: int) -> None:
        self.quantity = quantity
        self.subtotal = self.unit_price.multiply(quantity)


@commerce.aggregate
class Cart:
    owner_id = Identifier(required=True)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    lines = HasMany(CartLine)
    total_value = ValueObject(Money, required=True)
    total_quantity = Integer(default=0, min_value=0)
    order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()
    closed_at = DateTime()

    @invariant.post
    def closed_cart_must_have_lines(self):
        if self.status == CartStatus.CLOSED.value and not self.lines:
            raise ValidationError({"cart": ["A closed cart must hold the lines it was checked out with"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, owner_id: str, currency: str):
        now = datetime.now(UTC)
        cart = cls(
            owner_id=owner_id,
            status=CartStatus.ACTIVE.value,
            total_value=Money.zero(currency),
            total_quantity=0,
            created_at=now,
            updated_at=now,
        )
        cart.raise_(
            CartOpened(
                cart_id=str(cart.id),
                owner_id=str(owner_id),
                currency=currency,
                opened_at=now,
            )
        )
        return cart

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def currency(self) -> str:
        return self.total_value.currency

    def line_for(self, line_id) -> CartLine | None:
        return next((line for line in self.lines if str(line.id) == str(line_id)), None)

    def line_for_product(self, product_id) -> CartLine | None:
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def _assert_active(self) -> None:
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise CartNotActive(str(self.id), self.status)

    def _recalculate_totals(self) -> None:
        self.total_value = sum_money((line.subtotal for line in self.lines), self.currency)
        self.total_quantity = sum(line.quantity for line in self.lines)
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity: int, available: int) -> CartLine:
        """Add units of ``product``, merging with an existing line for it.

        ``available`` is the product's ledger quantity. The line's combined
        quantity, not just the units being added, must fit in it.
        """
        self._assert_active()
        _require_positive(quantity)
        if not product.active:
            raise ProductInactive(str(product.id), product.name)
        if product.price.currency != self.currency:
            raise CurrencyMismatch(self.currency, product.price.currency)

        existing = self.line_for_product(product.id)
        combined = quantity + (existing.quantity if existing else 0)
        if combined > available:
            raise InsufficientStock(
                available=available,
                requested=combined,
                product_id=str(product.id),
                product_name=product.name,
            )

        if existing:
            existing.change_quantity(combined)
            line = existing
        else:
            line = CartLine.snapshot(product.id, product.price, quantity)
            self.add_lines(line)

        self._recalculate_totals()
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=str(product.id),
                quantity_added=quantity,
                line_quantity=line.quantity,
                unit_price=str(line.unit_price.amount),
                cart_total=str(self.total_value.amount),
            )
        )
        return line

    def update_item_quantity(
        self, line_id, new_quantity: int, available: int, product_name: str | None = None
    ) -> None:
        self._assert_active()
        _require_positive(new_quantity)
        line = self.line_for(line_id)
        if line is None:
            raise LineNotFound(str(line_id))
        if new_quantity > available:
            raise InsufficientStock(
                available=available,
                requested=new_quantity,
                product_id=str(line.product_id),
                product_name=product_name,
            )

        previous_quantity = line.quantity
        line.change_quantity(new_quantity)
        self._recalculate_totals()
        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                line_id=str(line.id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                cart_total=str(self.total_value.amount),
            )
        )

    def remove_item(self, line_id) -> None:
        self._assert_active()
        line = self.line_for(line_id)
        if line is None:
            raise LineNotFound(str(line_id))

        self.remove_lines(line)
        self._recalculate_totals()
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                line_id=str(line_id),
                product_id=str(line.product_id),
                cart_total=str(self.total_value.amount),
            )
        )

    def clear(self) -> None:
        self._assert_active()
        removed = list(self.lines)
        for line in removed:
            self.remove_lines(line)

        self._recalculate_totals()
        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=len(removed)))

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def close(self, order_id: str) -> None:
        """Mark the cart as checked out into ``order_id``. Happens once."""
        self._assert_active()
        if not self.lines:
            raise EmptyCart(str(self.id))

        now = datetime.now(UTC)
        self.status = CartStatus.CLOSED.value
        self.order_id = order_id
        self.closed_at = now
        self.updated_at = now
        self.raise_(
            CartClosed(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                order_id=str(order_id),
                closed_at=now,
            )
        )
