"""Domain events for the Order aggregate.

Amounts travel as decimal strings so consumers never see float rounding.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, product_name, quantity, unit_price, subtotal}
    item_count = Integer(required=True)
    subtotal = String(required=True)
    shipping_fee = String(required=True)
    discount = String(required=True)
    total = String(required=True)
    currency = String(required=True)
    placed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderPaid:
    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    total = String(required=True)
    currency = String(required=True)
    paid_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    shipped_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderCanceled:
    """The order was canceled. Stock is not returned automatically."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String(max_length=500)
    lines = Text(required=True)  # JSON: list of {product_id, quantity}
    canceled_at = DateTime(required=True)
