"""Order aggregate (CQRS) — the immutable record of a checkout.

Lines are fixed when the order is placed: product name and unit price are
copied from the cart, never re-read from the catalogue. After that, only
the lifecycle moves.

State Machine:
    CREATED → PAID → SHIPPED → DELIVERED
    {CREATED, PAID} → CANCELED
    DELIVERED and CANCELED are terminal.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from commerce.domain import commerce
from commerce.errors import EmptyCart, IllegalStateTransition
from commerce.order.events import (
    OrderCanceled,
    OrderDelivered,
    OrderPaid,
    OrderPlaced,
    OrderShipped,
)
from commerce.shared.money import Money, sum_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    CREATED = "Created"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"


_VALID_TRANSITIONS = {
    OrderStatus.CREATED: {OrderStatus.PAID, OrderStatus.CANCELED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.CANCELED: set(),  # terminal
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@commerce.entity(part_of="Order")
class OrderLine:
    """One purchased product, frozen at checkout."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=200)
    quantity = Integer(required=True, min_value=1)
    unit_price = ValueObject(Money, required=True)
    subtotal = ValueObject(Money, required=True)

    @classmethod
    def snapshot(cls, product_id, product_name: str, unit_price: Money, quantity: int):
        return cls(
            product_id=str(product_id),
            product_name=product_name,
            quantity=quantity,
            unit_price=unit_price,
            subtotal=unit_price.multiply(quantity),
        )

    def to_dict_summary(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price.amount),
            "subtotal": str(self.subtotal.amount),
        }


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@commerce.aggregate
class Order:
    owner_id = Identifier(required=True)
    cart_id = Identifier()
    status = String(choices=OrderStatus, default=OrderStatus.CREATED.value)
    lines = HasMany(OrderLine)
    subtotal = ValueObject(Money, required=True)
    shipping_fee = ValueObject(Money, required=True)
    discount = ValueObject(Money, required=True)
    total = ValueObject(Money, required=True)
    shipping_address = String(required=True, max_length=500)
    notes = Text()
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()
    paid_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    canceled_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        owner_id: str,
        cart_id: str,
        lines: list[OrderLine],
        shipping_address: str,
        notes: str | None = None,
    ):
        """Create an order in CREATED from already-snapshotted lines.

        Shipping fee and discount start at zero in the lines' currency.
        """
        if not lines:
            raise EmptyCart(str(cart_id))

        currency = lines[0].unit_price.currency
        zero = Money.zero(currency)
        now = datetime.now(UTC)
        order = cls(
            owner_id=owner_id,
            cart_id=cart_id,
            status=OrderStatus.CREATED.value,
            subtotal=zero,
            shipping_fee=zero,
            discount=zero,
            total=zero,
            shipping_address=shipping_address,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_lines(line)
        order._recalculate_totals()

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                owner_id=str(owner_id),
                cart_id=str(cart_id),
                lines=json.dumps([line.to_dict_summary() for line in order.lines]),
                item_count=order.item_count,
                subtotal=str(order.subtotal.amount),
                shipping_fee=str(order.shipping_fee.amount),
                discount=str(order.discount.amount),
                total=str(order.total.amount),
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def is_owned_by(self, owner_id) -> bool:
        return str(self.owner_id) == str(owner_id)

    def _recalculate_totals(self) -> None:
        """total = subtotal + shipping fee - discount, with subtotal from the lines."""
        self.subtotal = sum_money((line.subtotal for line in self.lines), self.subtotal.currency)
        self.total = self.subtotal.add(self.shipping_fee).subtract(self.discount)

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise IllegalStateTransition(current.value, target_status.value)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def pay(self) -> None:
        """Payment is a status flip; no gateway is involved."""
        self._assert_can_transition(OrderStatus.PAID)
        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.paid_at = now
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                owner_id=str(self.owner_id),
                total=str(self.total.amount),
                currency=self.total.currency,
                paid_at=now,
            )
        )

    def mark_shipped(self) -> None:
        self._assert_can_transition(OrderStatus.SHIPPED)
        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.shipped_at = now
        self.updated_at = now
        self.raise_(OrderShipped(order_id=str(self.id), owner_id=str(self.owner_id), shipped_at=now))

    def mark_delivered(self) -> None:
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.delivered_at = now
        self.updated_at = now
        self.raise_(OrderDelivered(order_id=str(self.id), owner_id=str(self.owner_id), delivered_at=now))

    def cancel(self, reason: str | None = None) -> None:
        """Cancel from CREATED or PAID. Stock is left untouched."""
        self._assert_can_transition(OrderStatus.CANCELED)
        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELED.value
        self.cancellation_reason = reason
        self.canceled_at = now
        self.updated_at = now
        self.raise_(
            OrderCanceled(
                order_id=str(self.id),
                owner_id=str(self.owner_id),
                previous_status=previous,
                reason=reason,
                lines=json.dumps([{"product_id": str(line.product_id), "quantity": line.quantity} for line in self.lines]),
                canceled_at=now,
            )
        )
